import unittest

from app.data_sources import envcan_client

FEED_HEAD = '<?xml version="1.0" encoding="UTF-8"?><feed xmlns="http://www.w3.org/2005/Atom" xml:lang="en-ca">'
FEED_TAIL = "</feed>"

ENTRY_STORM = """
<entry>
  <title> Winter Storm Watch </title>
  <link type="text/html" href="https://weather.gc.ca/warnings/report_e.html?on61"/>
  <updated>2024-01-10T15:00:00Z</updated>
  <published>2024-01-10T14:30:00Z</published>
  <category term="Warnings and Watches"/>
  <summary type="html">  Significant snowfall expected.  </summary>
  <id>tag:weather.gc.ca,2024-01-10:20240110150000</id>
</entry>
"""

ENTRY_NONE = """
<entry>
  <title>No watches or warnings in effect, City of Toronto</title>
  <link type="text/html" href="https://weather.gc.ca/warnings/report_e.html?on61"/>
  <updated>2024-01-10T16:00:00Z</updated>
  <summary>No watches or warnings in effect.</summary>
</entry>
"""


def _feed(*entries):
    return FEED_HEAD + "<title>City of Toronto - Weather Alert - Environment Canada</title>" + "".join(entries) + FEED_TAIL


def _entries(xml):
    return envcan_client.map_entries(envcan_client.parse_xml(xml.encode("utf-8")))


class TestMapEntries(unittest.TestCase):
    def test_zero_entries_is_empty_list(self):
        self.assertEqual(_entries(_feed()), [])

    def test_single_entry_becomes_one_element_list(self):
        entries = _entries(_feed(ENTRY_STORM))
        self.assertEqual(len(entries), 1)
        entry = entries[0].to_dict()
        self.assertEqual(entry["title"], "Winter Storm Watch")
        self.assertEqual(entry["summary"], "Significant snowfall expected.")
        self.assertEqual(entry["updatedISO"], "2024-01-10T15:00:00Z")
        self.assertEqual(entry["link"], "https://weather.gc.ca/warnings/report_e.html?on61")
        self.assertEqual(entry["id"], "tag:weather.gc.ca,2024-01-10:20240110150000")

    def test_many_entries_keep_order(self):
        entries = _entries(_feed(ENTRY_STORM, ENTRY_NONE))
        self.assertEqual([e.title for e in entries], [
            "Winter Storm Watch",
            "No watches or warnings in effect, City of Toronto",
        ])

    def test_id_falls_back_to_link_then_updated(self):
        by_link = _entries(_feed(ENTRY_NONE))[0]
        self.assertEqual(by_link.id, "https://weather.gc.ca/warnings/report_e.html?on61")

        by_updated = _entries(_feed("<entry><updated>2024-01-10T16:00:00Z</updated></entry>"))[0]
        self.assertEqual(by_updated.id, "2024-01-10T16:00:00Z")
        self.assertIsNone(by_updated.link)

    def test_pretty_printed_id_is_trimmed(self):
        xml = _feed("<entry>\n  <id>\n    tag:weather.gc.ca,2024:1\n  </id>\n</entry>")
        self.assertEqual(_entries(xml)[0].id, "tag:weather.gc.ca,2024:1")

    def test_blank_id_falls_back_to_link(self):
        xml = _feed('<entry><id>   </id><link href="https://a.test/x"/><updated>2024-01-10T16:00:00Z</updated></entry>')
        self.assertEqual(_entries(xml)[0].id, "https://a.test/x")

    def test_mixed_content_summary_uses_text_portion(self):
        xml = _feed('<entry><id>x</id><summary type="xhtml">Snow <b>heavy</b> expected </summary></entry>')
        self.assertEqual(_entries(xml)[0].summary, "Snow expected")

    def test_updated_falls_back_to_published(self):
        entry = _entries(_feed("<entry><id>x</id><published>2024-01-09T00:00:00Z</published></entry>"))[0]
        self.assertEqual(entry.updated_iso, "2024-01-09T00:00:00Z")

    def test_missing_title_and_summary_default_to_empty(self):
        entry = _entries(_feed("<entry><id>x</id></entry>"))[0].to_dict()
        self.assertEqual(entry["title"], "")
        self.assertEqual(entry["summary"], "")
        self.assertIsNone(entry["updatedISO"])
        self.assertIsNone(entry["link"])

    def test_alternate_link_preferred(self):
        xml = _feed(
            '<entry><id>x</id><link rel="self" href="https://a.test/self"/>'
            '<link rel="alternate" href="https://a.test/page"/></entry>'
        )
        self.assertEqual(_entries(xml)[0].link, "https://a.test/page")

    def test_feed_url_template(self):
        url = envcan_client.feed_url("https://weather.gc.ca/rss/battleboard/{region}_e.xml", "on61")
        self.assertEqual(url, "https://weather.gc.ca/rss/battleboard/on61_e.xml")


class DummyResp:
    def __init__(self, content, status_code=200, reason="OK"):
        self.content = content
        self.status_code = status_code
        self.reason = reason


class TestFetchEntries(unittest.TestCase):
    def test_fetch_entries_parses_bytes(self):
        payload = _feed(ENTRY_STORM).encode("utf-8")
        http = type("S", (), {"get": lambda *a, **k: DummyResp(payload)})()
        entries = envcan_client.fetch_entries("https://feed.test/on61_e.xml", user_agent="ua", timeout=5, http=http)
        self.assertEqual(len(entries), 1)


if __name__ == "__main__":
    unittest.main()
