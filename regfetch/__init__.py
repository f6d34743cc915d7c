"""
regfetch - UCI registrar scraper.

Fetches a student's DegreeWorks audit and caches department catalogue,
prerequisite and WebSOC schedule pages on disk.
"""

