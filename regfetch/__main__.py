"""
Package entry point.

Allows running the application via:

    python -m regfetch

This simply forwards execution to regfetch.cli.main().
"""

from regfetch.cli import main

if __name__ == "__main__":
    main()
