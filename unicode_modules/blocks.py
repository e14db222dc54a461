# -*- coding: utf-8 -*-

"""
blocks.py

Parses the Unicode Blocks.txt file into an ordered table of block ranges and
names, together with the free-text header at the top of the file.
"""

import pathlib
import re
from collections import namedtuple
from typing import List, Optional, Union
from urllib.parse import quote

from .errors import UcdParseError

# --- Configuration ---
BLOCKS_FILE = "Blocks.txt"

# Base URLs for generating links
WIKI_BASE_URL = "https://en.wikipedia.org/wiki/"
CHART_BASE_URL = "https://www.unicode.org/charts/PDF/"

COMMENT_MARKER = "#"
EOF_SENTINEL = "EOF"

# Regular expression to find the version in the header of Blocks.txt
VERSION_RE = re.compile(r'Blocks-(\d+\.\d+\.\d+)\.txt')

MAX_UNICODE_CP = 0x10FFFF
SURROGATE_FIRST = 0xD800
SURROGATE_LAST = 0xDFFF


# Inclusive code point span
Range = namedtuple('Range', ['begin', 'end'])


class UnicodeBlock(namedtuple('UnicodeBlock', ['range', 'name'])):
    __slots__ = ()

    @property
    def begin(self) -> int:
        return self.range.begin

    @property
    def end(self) -> int:
        return self.range.end

    def __contains__(self, cp: int) -> bool:
        return self.range.begin <= cp <= self.range.end


def is_scalar_value(cp: int) -> bool:
    """True for code points that can be represented as a character (no surrogates)."""
    return 0 <= cp <= MAX_UNICODE_CP and not SURROGATE_FIRST <= cp <= SURROGATE_LAST


def parse_hex(token: str, path: Optional[str], line_number: int) -> int:
    token = token.strip()
    try:
        return int(token, 16)
    except ValueError:
        raise UcdParseError(f"Invalid hexadecimal code point {token!r}", path, line_number) from None


class BlockTable:
    """
    The ordered list of Unicode blocks plus the header comment of the file
    they were read from.
    """

    def __init__(self, blocks: List[UnicodeBlock], header: List[str]):
        self.blocks = blocks
        self.header = header
        self.version = get_unicode_version(header)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def __repr__(self) -> str:
        return f"BlockTable({len(self.blocks)} blocks, version={self.version!r})"


def parse_block_line(line: str, path: Optional[str] = None, line_number: int = 0) -> Optional[UnicodeBlock]:
    """
    Parses a single `HEXBEGIN..HEXEND; Block Name` line.

    Returns None when the block starts on a code point that is not a scalar
    value; every other malformation raises UcdParseError.
    """
    tokens = line.split(';')
    if len(tokens) != 2:
        raise UcdParseError('Unrecognized syntax in "Blocks" line: expected "RANGE; NAME"', path, line_number)

    bounds = tokens[0].split('..')
    if len(bounds) != 2:
        raise UcdParseError('Unrecognized syntax in "Blocks" line: expected "BEGIN..END"', path, line_number)

    begin = parse_hex(bounds[0], path, line_number)
    end = parse_hex(bounds[1], path, line_number)
    if begin > end:
        raise UcdParseError(f"Block range U+{begin:04X}..U+{end:04X} is reversed", path, line_number)

    name = tokens[1].strip()
    if not name:
        raise UcdParseError("Block has an empty name", path, line_number)

    if not is_scalar_value(begin):
        return None
    if end > MAX_UNICODE_CP:
        raise UcdParseError(f"Block range U+{begin:04X}..U+{end:04X} exceeds the code space", path, line_number)
    return UnicodeBlock(Range(begin, end), name)


def parse_blocks(text: str, path: Optional[str] = None) -> BlockTable:
    """
    Parses the contents of Blocks.txt.

    Comment lines are collected into the header (minus the marker and one
    following space); blank lines are dropped; the `# EOF` sentinel is not
    part of the header. Blocks keep file order and must not overlap.
    """
    blocks: List[UnicodeBlock] = []
    header: List[str] = []

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(COMMENT_MARKER):
            comment = line[len(COMMENT_MARKER):]
            if comment.startswith(' '):
                comment = comment[1:]
            if comment.strip() == EOF_SENTINEL:
                continue
            header.append(comment.rstrip())
            continue

        block = parse_block_line(line, path, line_number)
        if block is None:
            continue

        if blocks and block.begin <= blocks[-1].end:
            previous = blocks[-1]
            raise UcdParseError(
                f"Block '{block.name}' (U+{block.begin:04X}..U+{block.end:04X}) overlaps "
                f"'{previous.name}' (U+{previous.begin:04X}..U+{previous.end:04X})",
                path, line_number)
        blocks.append(block)

    return BlockTable(blocks, header)


def load_blocks(path: Union[str, pathlib.Path]) -> BlockTable:
    path = pathlib.Path(path)
    return parse_blocks(path.read_text(encoding='utf-8'), str(path))


def get_unicode_version(header: List[str]) -> Optional[str]:
    """Extracts the Unicode version from the `Blocks-X.Y.Z.txt` banner line."""
    # Search the first few lines in case the version isn't exactly the first
    for line in header[:3]:
        match = VERSION_RE.search(line)
        if match:
            return match.group(1)
    return None


def wikipedia_url(block: UnicodeBlock) -> str:
    """Generates a Wikipedia URL-friendly string from the Unicode block name."""
    sanitized_name = block.name.strip().replace(' ', '_')
    return f"{WIKI_BASE_URL}{quote(sanitized_name)}_(Unicode_block)"


def charts_url(block: UnicodeBlock) -> str:
    """Generates the official Unicode charts URL from the starting code point."""
    return f"{CHART_BASE_URL}U{block.begin:04X}.pdf"
