#
# test_blocks.py
#
# unit tests for parsing Blocks.txt
#
import pathlib
import tempfile
import unittest

from unicode_modules import blocks
from unicode_modules.blocks import Range, UnicodeBlock, parse_blocks
from unicode_modules.errors import UcdParseError

from ucd_fixtures import BLOCKS_TXT


class TestParseBlocks(unittest.TestCase):

    def test_blocks_in_file_order(self):
        table = parse_blocks(BLOCKS_TXT)
        self.assertEqual(
            ["Basic Latin", "Latin-1 Supplement", "Latin Extended-A", "Private Use Area", "Emoticons"],
            [block.name for block in table])
        self.assertEqual(UnicodeBlock(Range(0x0000, 0x007F), "Basic Latin"), table.blocks[0])
        self.assertEqual(0x1F64F, table.blocks[-1].end)

    def test_ranges_ordered_and_disjoint(self):
        table = parse_blocks(BLOCKS_TXT)
        for block in table:
            self.assertLessEqual(block.begin, block.end)
        for previous, block in zip(table.blocks, table.blocks[1:]):
            self.assertLess(previous.end, block.begin)

    def test_surrogate_blocks_dropped(self):
        names = [block.name for block in parse_blocks(BLOCKS_TXT)]
        self.assertNotIn("High Surrogates", names)
        self.assertNotIn("Low Surrogates", names)

    def test_header(self):
        table = parse_blocks(BLOCKS_TXT)
        self.assertEqual("Blocks-15.1.0.txt", table.header[0])
        self.assertIn("", table.header)
        self.assertEqual("Start Code..End Code; Block Name", table.header[-1])
        self.assertNotIn("EOF", table.header)

    def test_header_strips_only_one_space(self):
        table = parse_blocks("#  indented\n0000..007F; Basic Latin\n")
        self.assertEqual([" indented"], table.header)

    def test_version(self):
        self.assertEqual("15.1.0", parse_blocks(BLOCKS_TXT).version)
        self.assertIsNone(parse_blocks("0000..007F; Basic Latin\n").version)

    def test_membership_is_inclusive(self):
        block = parse_blocks(BLOCKS_TXT).blocks[0]
        self.assertIn(0x0000, block)
        self.assertIn(0x007F, block)
        self.assertNotIn(0x0080, block)

    def test_empty_input(self):
        table = parse_blocks("")
        self.assertEqual(0, len(table))
        self.assertEqual([], table.header)


class TestMalformedBlocks(unittest.TestCase):

    def assert_fatal(self, text, line_number=1):
        with self.assertRaises(UcdParseError) as ctx:
            parse_blocks(text, "Blocks.txt")
        self.assertEqual(line_number, ctx.exception.line_number)
        self.assertEqual("Blocks.txt", ctx.exception.path)
        self.assertTrue(str(ctx.exception).startswith(f"Blocks.txt:{line_number}:"))

    def test_missing_semicolon(self):
        self.assert_fatal("0000..007F Basic Latin\n")

    def test_too_many_semicolons(self):
        self.assert_fatal("0000..007F; Basic; Latin\n")

    def test_bad_range_separator(self):
        self.assert_fatal("0000-007F; Basic Latin\n")

    def test_bad_hex(self):
        self.assert_fatal("# header\n00G0..007F; Basic Latin\n", line_number=2)

    def test_reversed_range(self):
        self.assert_fatal("007F..0000; Basic Latin\n")

    def test_empty_name(self):
        self.assert_fatal("0000..007F;  \n")

    def test_overlap(self):
        self.assert_fatal("0000..007F; Basic Latin\n0070..00FF; Latin-1 Supplement\n", line_number=2)

    def test_beyond_code_space(self):
        self.assert_fatal("100000..110000; Too Far\n")


class TestLinks(unittest.TestCase):

    def test_urls(self):
        block = UnicodeBlock(Range(0x0080, 0x00FF), "Latin-1 Supplement")
        self.assertEqual("https://en.wikipedia.org/wiki/Latin-1_Supplement_(Unicode_block)",
                         blocks.wikipedia_url(block))
        self.assertEqual("https://www.unicode.org/charts/PDF/U0080.pdf", blocks.charts_url(block))


class TestLoadBlocks(unittest.TestCase):

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp) / "Blocks.txt"
            path.write_text(BLOCKS_TXT, encoding="utf-8")
            self.assertEqual(5, len(blocks.load_blocks(path)))

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                blocks.load_blocks(pathlib.Path(tmp) / "Blocks.txt")


if __name__ == '__main__':
    unittest.main()
