"""
Unit tests for the registrar index parsers and page fetches.
"""

import unittest
from urllib.parse import parse_qs

import requests

from regfetch.client import Response
from regfetch.config import PREREQS_URL, WEBSOC_URL
from regfetch.errors import ExtractionError, TransportError
from regfetch.registrar import (
    fetch_prerequisites,
    fetch_schedule,
    parse_catalogue_index,
    parse_prereq_index,
    parse_websoc_index,
    websoc_form,
)

CATALOGUE_INDEX = """
<a href="/allcourses/">Courses</a>
<div id="atozindex"><ul>
<li><a href="/allcourses/compsci/">Computer Science (COMPSCI)</a></li>
<li><a href="/allcourses/i_c_sci/">Information and Computer Science (I&amp;C SCI)</a></li>
<li><a href="/allcourses/crm_law/">Criminology, Law and Society (CRM/LAW)</a></li>
</ul></div>
<div id="bySchool"><a href="/allcourses/compsci/">Computer Science (COMPSCI)</a></div>
"""

WEBSOC_INDEX = """
<form action="https://www.reg.uci.edu/perl/WebSoc" method="post">
<select name="YearTerm">
  <option value="2025-03">2025 Winter Quarter</option>
  <option value="2024-92" selected="selected">2024 Fall Quarter</option>
</select>
<select name="Dept">
  <option value=" ALL" selected="selected">Include All Departments</option>
  <option value="COMPSCI">COMPSCI . . . . Computer Science</option>
  <option value="I&amp;C SCI">I&amp;C SCI . . . Information and Computer Science</option>
</select>
</form>
"""

PREREQ_INDEX = """
<select name="term"><option value="202492" selected>Fall 2024</option></select>
<select name="dept">
  <option value="COMPSCI">COMPSCI</option>
  <option value="MATH    ">MATH</option>
</select>
"""


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def get(self, url, params=None, cookie=None):
        self.calls.append(("GET", url, params))
        if self.error:
            raise self.error
        return Response(200, self.reply)

    def post(self, url, body, cookie=None):
        self.calls.append(("POST", url, body))
        if self.error:
            raise self.error
        return Response(200, self.reply)


class TestIndexes(unittest.TestCase):
    def test_catalogue_index(self) -> None:
        found = parse_catalogue_index(CATALOGUE_INDEX)
        self.assertIsNone(found.term)
        self.assertEqual(
            found.options,
            {
                "COMPSCI": "https://catalogue.uci.edu/allcourses/compsci/",
                "I&C SCI": "https://catalogue.uci.edu/allcourses/i_c_sci/",
                "CRM/LAW": "https://catalogue.uci.edu/allcourses/crm_law/",
            },
        )

    def test_websoc_index(self) -> None:
        found = parse_websoc_index(WEBSOC_INDEX)
        self.assertEqual(found.term, "2024-92")
        self.assertEqual(found.options, {"COMPSCI": "COMPSCI", "I&C SCI": "I&C SCI"})

    def test_prereq_index_keeps_raw_form_value(self) -> None:
        found = parse_prereq_index(PREREQ_INDEX)
        self.assertEqual(found.term, "202492")
        self.assertEqual(found.options["MATH"], "MATH    ")

    def test_page_without_departments_is_malformed(self) -> None:
        with self.assertRaises(ExtractionError):
            parse_websoc_index('<select name="YearTerm"><option value="2024-92"></option></select>')
        with self.assertRaises(ExtractionError):
            parse_catalogue_index("<html>maintenance</html>")


class TestFetches(unittest.TestCase):
    def test_websoc_form(self) -> None:
        form = parse_qs(websoc_form("2024-92", "I&C SCI"), keep_blank_values=True)
        self.assertEqual(form["YearTerm"], ["2024-92"])
        self.assertEqual(form["Dept"], ["I&C SCI"])
        self.assertEqual(form["Submit"], ["Display Text Results"])
        self.assertEqual(form["CourseNum"], [""])

    def test_fetch_schedule_posts_form(self) -> None:
        client = FakeClient(reply="COMPSCI 161 ...")
        self.assertEqual(fetch_schedule(client, "2024-92", "COMPSCI"), "COMPSCI 161 ...")
        method, url, body = client.calls[0]
        self.assertEqual((method, url), ("POST", WEBSOC_URL))
        self.assertIn("Dept=COMPSCI", body)

    def test_fetch_prerequisites(self) -> None:
        client = FakeClient(reply="<html>prereqs</html>")
        fetch_prerequisites(client, "202492", "COMPSCI")
        self.assertEqual(
            client.calls[0], ("GET", PREREQS_URL, {"term": "202492", "dept": "COMPSCI", "action": "view_all"})
        )

    def test_transport_error(self) -> None:
        client = FakeClient(error=requests.ConnectionError("refused"))
        with self.assertRaises(TransportError) as ctx:
            fetch_schedule(client, "2024-92", "COMPSCI")
        self.assertIn("WebSOC schedule", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
