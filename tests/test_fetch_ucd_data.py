#
# test_fetch_ucd_data.py
#
# unit tests for downloading UCD files and scraping block descriptions;
# all network access is mocked
#
import contextlib
import io
import json
import pathlib
import tempfile
import unittest
from unittest import mock

import requests

from unicode_modules import fetch_ucd_data
from unicode_modules.errors import FetchError
from unicode_modules.generate_unicode_modules import load_block_metadata

from ucd_fixtures import BLOCKS_TXT

ARTICLE_HTML = b"""
<html><body>
<div class="mw-parser-output">
  <table><tr><td><p>Infobox text</p></td></tr></table>
  <p>   </p>
  <p><b>Basic Latin</b> is the first block<sup>[1]</sup> of the Unicode standard.</p>
  <p>It contains the <a href="/wiki/ASCII">ASCII</a> characters.<sup>[a]</sup></p>
  <p>A third paragraph.</p>
</div>
</body></html>
"""


def fake_response(status_code=200, content=b""):
    response = mock.Mock()
    response.status_code = status_code
    response.content = content
    return response


class TestUcdUrl(unittest.TestCase):

    def test_latest(self):
        self.assertEqual("https://www.unicode.org/Public/UCD/latest/ucd/Blocks.txt",
                         fetch_ucd_data.ucd_url("Blocks.txt"))

    def test_version(self):
        self.assertEqual("https://www.unicode.org/Public/15.1.0/ucd/UnicodeData.txt",
                         fetch_ucd_data.ucd_url("UnicodeData.txt", "15.1.0"))


class TestDownload(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.ucd_dir = pathlib.Path(self._tmp.name) / "ucd"

    def tearDown(self):
        self._tmp.cleanup()

    def test_download_writes_file(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(200, b"0000..007F; Basic Latin\n")) as get:
            with contextlib.redirect_stdout(io.StringIO()):
                path = fetch_ucd_data.download_ucd_file("Blocks.txt", self.ucd_dir, "15.1.0")
        self.assertEqual(b"0000..007F; Basic Latin\n", path.read_bytes())
        self.assertEqual("https://www.unicode.org/Public/15.1.0/ucd/Blocks.txt", get.call_args[0][0])

    def test_existing_file_kept(self):
        self.ucd_dir.mkdir()
        (self.ucd_dir / "Blocks.txt").write_text("cached", encoding="utf-8")
        with mock.patch.object(fetch_ucd_data.requests, "get") as get:
            with contextlib.redirect_stdout(io.StringIO()):
                fetch_ucd_data.download_ucd_file("Blocks.txt", self.ucd_dir)
        get.assert_not_called()
        self.assertEqual("cached", (self.ucd_dir / "Blocks.txt").read_text(encoding="utf-8"))

    def test_http_error(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(404)):
            with contextlib.redirect_stdout(io.StringIO()):
                with self.assertRaises(FetchError):
                    fetch_ucd_data.download_ucd_file("Blocks.txt", self.ucd_dir)
        self.assertFalse((self.ucd_dir / "Blocks.txt").exists())

    def test_connection_error(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", side_effect=requests.exceptions.ConnectionError("down")):
            with contextlib.redirect_stdout(io.StringIO()):
                with self.assertRaises(FetchError):
                    fetch_ucd_data.download_ucd_file("Blocks.txt", self.ucd_dir)

    def test_main_reports_failure(self):
        stderr = io.StringIO()
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(500)):
            with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(stderr):
                status = fetch_ucd_data.main(["--ucd-dir", str(self.ucd_dir)])
        self.assertEqual(1, status)
        self.assertIn("HTTP 500", stderr.getvalue())


class TestFetch(unittest.TestCase):

    def test_returns_body(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(200, b"body")) as get:
            self.assertEqual(b"body", fetch_ucd_data.fetch("https://example.org/x", timeout=5))
        self.assertEqual(5, get.call_args[1]["timeout"])
        self.assertEqual(fetch_ucd_data.HEADERS, get.call_args[1]["headers"])

    def test_non_200(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(503)):
            with self.assertRaises(FetchError) as ctx:
                fetch_ucd_data.fetch("https://example.org/x")
        self.assertIn("HTTP 503", str(ctx.exception))


class TestExtractSummary(unittest.TestCase):

    def test_first_paragraphs(self):
        summary = fetch_ucd_data.extract_summary(ARTICLE_HTML)
        first, second = summary.split("\n\n")
        self.assertTrue(first.startswith("Basic Latin is the first block"))
        self.assertTrue(first.endswith("of the Unicode standard."))
        self.assertNotIn("[1]", first)
        self.assertEqual("It contains the ASCII characters.", second)

    def test_paragraph_count(self):
        summary = fetch_ucd_data.extract_summary(ARTICLE_HTML, num_paragraphs=3)
        self.assertTrue(summary.endswith("A third paragraph."))
        self.assertEqual(1, len(fetch_ucd_data.extract_summary(ARTICLE_HTML, num_paragraphs=1).split("\n\n")))

    def test_citation_only_paragraph_skipped(self):
        html = b'<div class="mw-parser-output"><p><sup>[1]</sup></p><p>Text.</p></div>'
        self.assertEqual("Text.", fetch_ucd_data.extract_summary(html))

    def test_no_article(self):
        self.assertEqual("", fetch_ucd_data.extract_summary(b"<html><p>x</p></html>"))


class TestScrapeWikipediaSummary(unittest.TestCase):

    def test_two_paragraphs(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(200, ARTICLE_HTML)):
            summary = fetch_ucd_data.scrape_wikipedia_summary("https://en.wikipedia.org/wiki/Basic_Latin")
        paragraphs = summary.split("\n\n")
        self.assertEqual(2, len(paragraphs))
        self.assertTrue(paragraphs[0].startswith("Basic Latin is the first block"))
        self.assertNotIn("[1]", summary)
        self.assertNotIn("Infobox", summary)
        self.assertIn("ASCII", paragraphs[1])

    def test_non_200(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(404, ARTICLE_HTML)):
            self.assertEqual("", fetch_ucd_data.scrape_wikipedia_summary("https://en.wikipedia.org/wiki/Nope"))

    def test_request_exception(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", side_effect=requests.exceptions.Timeout()):
            self.assertEqual("", fetch_ucd_data.scrape_wikipedia_summary("https://en.wikipedia.org/wiki/Slow"))

    def test_missing_content_div(self):
        with mock.patch.object(fetch_ucd_data.requests, "get", return_value=fake_response(200, b"<html><p>x</p></html>")):
            self.assertEqual("", fetch_ucd_data.scrape_wikipedia_summary("https://en.wikipedia.org/wiki/Odd"))


class TestGenerateBlockMetadata(unittest.TestCase):

    def test_metadata_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            ucd_dir = pathlib.Path(tmp)
            (ucd_dir / "Blocks.txt").write_text(BLOCKS_TXT, encoding="utf-8")

            def summary(url):
                return "Faces." if "Emoticons" in url else ""

            with mock.patch.object(fetch_ucd_data, "scrape_wikipedia_summary", side_effect=summary):
                with contextlib.redirect_stdout(io.StringIO()):
                    output_file = fetch_ucd_data.generate_block_metadata(ucd_dir, delay=0)

            data = json.loads(output_file.read_text(encoding="utf-8"))
            self.assertEqual("15.1.0", data["unicode_version"])
            self.assertEqual(5, len(data["blocks"]))
            emoticons = data["blocks"][-1]
            self.assertEqual("Emoticons", emoticons["name"])
            self.assertEqual("1F600", emoticons["start"])
            self.assertEqual("https://www.unicode.org/charts/PDF/U1F600.pdf", emoticons["unicode_charts_url"])

            self.assertEqual("Faces.", load_block_metadata(ucd_dir)["Emoticons"])
            self.assertEqual("", load_block_metadata(ucd_dir)["Basic Latin"])


if __name__ == '__main__':
    unittest.main()
