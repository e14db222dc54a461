# -*- coding: utf-8 -*-

"""
unicode_data.py

Parses UnicodeData.txt into a table of characters keyed by code point,
repairing names that cannot be used as-is for identifiers: control character
placeholders, bracketed pseudo-names, known upstream misspellings and
punctuation.
"""

import bisect
import pathlib
import re
from collections import namedtuple
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .blocks import Range, is_scalar_value, parse_hex
from .errors import UcdParseError

# --- Configuration ---
UNICODE_DATA_FILE = "UnicodeData.txt"

FIELD_COUNT = 15
CODE_POINT_FIELD = 0
NAME_FIELD = 1
CATEGORY_FIELD = 2
UNICODE_1_NAME_FIELD = 10

CONTROL_PLACEHOLDER = "<control>"
CONTROL_FALLBACK_PREFIX = "CONTROL"

# Upstream names that are known to be wrong (see NameAliases.txt, type
# "correction"). Applied as plain substring replacements, in order.
NAME_CORRECTIONS: Tuple[Tuple[str, str], ...] = (
    ("WHITE LENTICULAR BRAKCET", "WHITE LENTICULAR BRACKET"),
    ("SYMBOL FHTORA SKLIRON", "SYMBOL FTHORA SKLIRON"),
    ("KANNADA LETTER FA", "KANNADA LETTER LLLA"),
)

# Anything that is not a letter, digit, space or dash is dropped from names.
PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9 \-]")
WHITESPACE_RE = re.compile(r"\s+")


CharacterRecord = namedtuple('CharacterRecord', ['code_point', 'character', 'name', 'category'])


def repair_name(name: str, unicode_1_name: str, cp: int) -> str:
    """
    Turns the raw name field of a UnicodeData.txt line into a name that can
    be normalized into identifiers.
    """
    # 1. Control characters have no name of their own
    if name == CONTROL_PLACEHOLDER:
        name = unicode_1_name.strip()
        if not name:
            name = f"{CONTROL_FALLBACK_PREFIX} {cp:04X}"

    # 2. Pseudo-names such as <CJK Ideograph Extension A, First>
    if name.startswith('<'):
        for symbol in '<>,':
            name = name.replace(symbol, '')
        name = name.replace('_', ' ').upper()

    # 3. Known upstream inconsistencies
    for original, replacement in NAME_CORRECTIONS:
        name = name.replace(original, replacement)

    # 4. Punctuation, e.g. "LINE FEED (LF)"
    name = PUNCTUATION_RE.sub('', name)
    return WHITESPACE_RE.sub(' ', name).strip()


class CharacterTable:
    """
    Characters of UnicodeData.txt keyed by code point. Iteration and range
    lookups are always in ascending code point order.
    """

    def __init__(self, records: Dict[int, CharacterRecord]):
        self._records = records
        self._code_points: List[int] = sorted(records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, cp: int) -> bool:
        return cp in self._records

    def __getitem__(self, cp: int) -> CharacterRecord:
        return self._records[cp]

    def get(self, cp: int) -> Optional[CharacterRecord]:
        return self._records.get(cp)

    def __iter__(self) -> Iterator[CharacterRecord]:
        for cp in self._code_points:
            yield self._records[cp]

    def members(self, code_points: Range) -> List[CharacterRecord]:
        """All records with begin <= code point <= end, in ascending order."""
        lo = bisect.bisect_left(self._code_points, code_points.begin)
        hi = bisect.bisect_right(self._code_points, code_points.end)
        return [self._records[cp] for cp in self._code_points[lo:hi]]


def parse_unicode_data(text: str, path: Optional[str] = None) -> CharacterTable:
    """
    Parses the contents of UnicodeData.txt.

    Every non-empty line must have exactly 15 fields. Code points that are
    not scalar values (surrogates) are skipped. A code point appearing twice
    is treated as corruption.
    """
    records: Dict[int, CharacterRecord] = {}

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        fields = line.split(';')
        if len(fields) != FIELD_COUNT:
            raise UcdParseError(
                f"Expected {FIELD_COUNT} fields per character, found {len(fields)}", path, line_number)

        cp = parse_hex(fields[CODE_POINT_FIELD], path, line_number)
        if not is_scalar_value(cp):
            continue
        if cp in records:
            raise UcdParseError(f"Duplicate code point U+{cp:04X}", path, line_number)

        name = repair_name(fields[NAME_FIELD].strip(), fields[UNICODE_1_NAME_FIELD], cp)
        if not name:
            raise UcdParseError(f"Character U+{cp:04X} has no usable name", path, line_number)

        records[cp] = CharacterRecord(cp, chr(cp), name, fields[CATEGORY_FIELD].strip())

    return CharacterTable(records)


def load_unicode_data(path: Union[str, pathlib.Path]) -> CharacterTable:
    path = pathlib.Path(path)
    return parse_unicode_data(path.read_text(encoding='utf-8'), str(path))
