#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
generate_unicode_modules.py

Generate Python modules with Unicode constants and enumerations, one module
per Unicode block, from the plain-text Unicode Character Database.

Block ranges come from Blocks.txt, character names from UnicodeData.txt. An
optional unicode_blocks.json (written by fetch_ucd_data.py) adds a short
description to each block's docstring.

All identifiers are planned before anything is written, so a malformed
database or a fatal name collision never leaves a half-generated package.
"""

import argparse
import json
import pathlib
import sys
from collections import namedtuple
from typing import Dict, List, Optional

from .blocks import BLOCKS_FILE, BlockTable, UnicodeBlock, charts_url, load_blocks, wikipedia_url
from .errors import NameCollisionError, UcdParseError, UnicodeModulesError
from .names import (IdentifierRegistry, is_valid_identifier, pretty_display_name, snake_identifier,
                    upper_camel_identifier, upper_snake_constant)
from .unicode_data import UNICODE_DATA_FILE, CharacterRecord, CharacterTable, load_unicode_data

# --- Configuration ---
BLOCKS_DATA_FILE = "unicode_blocks.json"
INDEX_FILE = "__init__.py"
GENERATOR_NAME = "generate-unicode-modules"

GRID_COLUMNS = 16
DESCRIPTION_WIDTH = 72

# Module level names of every generated block module; character constants
# must not shadow them.
RESERVED_MODULE_NAMES = ("BLOCK_NAME", "FIRST_CODE_POINT", "LAST_CODE_POINT")

SIMPLE_ESCAPES: Dict[str, str] = {
    '\t': '\\t',
    '\n': '\\n',
    '\r': '\\r',
    "'": "\\'",
    '\\': '\\\\',
}


MemberPlan = namedtuple('MemberPlan', ['record', 'member_name', 'constant_name'])
BlockPlan = namedtuple('BlockPlan', ['block', 'module_name', 'class_name', 'members'])


# --------------------------------------------------------------------
# 1. Character Rendering
# --------------------------------------------------------------------

def unicode_escape(cp: int) -> str:
    if cp <= 0xFFFF:
        return f"\\u{cp:04x}"
    return f"\\U{cp:08x}"


def char_literal(ch: str) -> str:
    """
    Python source literal for a single character. Only printable ASCII is
    written as-is, so the generated text does not depend on the Unicode
    version of the interpreter running the generator.
    """
    if ch in SIMPLE_ESCAPES:
        return f"'{SIMPLE_ESCAPES[ch]}'"
    cp = ord(ch)
    if 0x20 <= cp < 0x7F:
        return f"'{ch}'"
    return f"'{unicode_escape(cp)}'"


def printable_form(record: CharacterRecord) -> str:
    """
    How a character is shown in the docstring grid: the glyph itself, or an
    escape sequence for controls, format characters and separators.
    """
    ch = record.character
    if ch in SIMPLE_ESCAPES:
        return SIMPLE_ESCAPES[ch]
    # Everything in C (Control, Format, Private Use, ...) and Z (Separator)
    # except the plain space
    if record.category[:1] in ("C", "Z") and ch != ' ':
        return unicode_escape(record.code_point)
    return ch


def sanitize_doc_text(text: str) -> str:
    """Keeps free text from terminating a raw docstring early."""
    return text.replace('\\', '/').replace('"', "'")


def wrap_text(text: str, max_width: int = DESCRIPTION_WIDTH) -> List[str]:
    """Greedy word wrap, one output line per list entry; paragraphs separated by ''."""
    lines: List[str] = []
    for paragraph in text.strip().split('\n\n'):
        if lines:
            lines.append('')
        current_line: List[str] = []
        for word in paragraph.split():
            word = sanitize_doc_text(word)
            if current_line and len(' '.join(current_line) + ' ' + word) > max_width:
                lines.append(' '.join(current_line))
                current_line = [word]
            else:
                current_line.append(word)
        if current_line:
            lines.append(' '.join(current_line))
    return lines


def format_range(block: UnicodeBlock) -> str:
    return f"U+{block.begin:04X}..U+{block.end:04X}"


# --------------------------------------------------------------------
# 2. Planning (member selection and identifiers)
# --------------------------------------------------------------------

def plan_block(block: UnicodeBlock, module_name: str, characters: CharacterTable, strict: bool) -> BlockPlan:
    """
    Selects the members of a block and assigns their enum member and constant
    names, checking for collisions within the block.
    """
    class_name = upper_camel_identifier(block.name)
    if not is_valid_identifier(class_name):
        raise NameCollisionError(f"Block '{block.name}' does not normalize to a valid class name ('{class_name}')")

    member_names = IdentifierRegistry(f"{class_name} members", strict)
    constant_names = IdentifierRegistry(f"{module_name} constants", strict)
    for reserved in RESERVED_MODULE_NAMES + (class_name, "NotInBlock"):
        constant_names.reserve(reserved)

    members: List[MemberPlan] = []
    for record in characters.members(block.range):
        member_name = member_names.claim(
            upper_camel_identifier(record.name), record.code_point, suffix="U{cp:04X}", source=record.name)
        constant_name = constant_names.claim(
            upper_snake_constant(record.name), record.code_point, suffix="_U{cp:04X}", source=record.name)
        members.append(MemberPlan(record, member_name, constant_name))

    return BlockPlan(block, module_name, class_name, members)


def plan_blocks(blocks: BlockTable, characters: CharacterTable, strict: bool = False) -> List[BlockPlan]:
    """Plans every block in range order. Raises before any output is written."""
    module_names = IdentifierRegistry("package index", strict)
    plans: List[BlockPlan] = []
    for block in blocks:
        module_name = module_names.claim(
            snake_identifier(block.name), block.begin, suffix="_u{cp:04x}", source=block.name)
        plans.append(plan_block(block, module_name, characters, strict))
    return plans


# --------------------------------------------------------------------
# 3. Module Rendering
# --------------------------------------------------------------------

def describe_block(plan: BlockPlan, unicode_version: Optional[str], description: str) -> List[str]:
    """The text shared by a block module's docstring and its index entry, without the grid."""
    block = plan.block
    lines = [
        sanitize_doc_text(block.name),
        "",
        f"Unicode block {format_range(block)} ('{unicode_escape(block.begin)}'..='{unicode_escape(block.end)}'), "
        f"{len(plan.members)} assigned characters.",
        "",
        f"Generated from the Unicode Character Database {unicode_version or '(unknown version)'} "
        f"by {GENERATOR_NAME}. Do not edit.",
        "",
        f"Wikipedia: {wikipedia_url(block)}",
        f"Unicode Charts: {charts_url(block)}",
    ]

    if description.strip():
        lines.append("")
        lines.extend(wrap_text(description))
    return lines


def render_docstring(plan: BlockPlan, unicode_version: Optional[str], description: str) -> List[str]:
    lines = ['r"""']
    lines.extend(describe_block(plan, unicode_version, description))

    if plan.members:
        lines.append("")
        lines.append("Characters:")
        lines.append("")
        cells = [printable_form(member.record) for member in plan.members]
        for start in range(0, len(cells), GRID_COLUMNS):
            lines.append("    " + " ".join(cells[start:start + GRID_COLUMNS]))

    lines.append('"""')
    return lines


def render_block_module(plan: BlockPlan, unicode_version: Optional[str] = None, description: str = "") -> str:
    """Renders the complete source text of one block module."""
    block = plan.block
    cls = plan.class_name

    lines: List[str] = ["# -*- coding: utf-8 -*-"]
    lines.extend(render_docstring(plan, unicode_version, description))
    lines.extend([
        "",
        "import enum",
        "from typing import Iterator, Optional",
        "",
        f"BLOCK_NAME = {block.name!r}",
        f"FIRST_CODE_POINT = 0x{block.begin:04X}",
        f"LAST_CODE_POINT = 0x{block.end:04X}",
        "",
    ])

    # Constants
    for member in plan.members:
        lines.append(f"{member.constant_name} = {char_literal(member.record.character)}")
    if plan.members:
        lines.append("")

    # Sentinel error and enumeration
    lines.extend([
        "",
        "class NotInBlock(ValueError):",
        f'    """Raised for characters and code points that are not assigned in {sanitize_doc_text(block.name)}."""',
        "",
        "",
        f"class {cls}(enum.Enum):",
        f'    """Assigned characters of the {sanitize_doc_text(block.name)} block, in code point order."""',
        "",
    ])
    for member in plan.members:
        lines.append(f"    {member.member_name} = {char_literal(member.record.character)}")
    if plan.members:
        lines.append("")

    lines.extend([
        "    @classmethod",
        f"    def first(cls) -> '{cls}':",
        '        """The member with the lowest code point."""',
        "        if not _ORDER:",
        "            raise NotInBlock(f'{BLOCK_NAME} has no assigned characters')",
        "        return _ORDER[0]",
        "",
        "    @property",
        "    def display_name(self) -> str:",
        "        return _DISPLAY_NAMES[self]",
        "",
        "    def __str__(self) -> str:",
        "        return self.display_name",
        "",
        "    def to_char(self) -> str:",
        "        return self.value",
        "",
        "    @classmethod",
        f"    def from_char(cls, ch: str) -> '{cls}':",
        "        try:",
        "            return _BY_CHAR[ch]",
        "        except (KeyError, TypeError):",
        "            raise NotInBlock(f'{ch!r} is not in {BLOCK_NAME}') from None",
        "",
        "    def to_code_point(self) -> int:",
        "        return ord(self.value)",
        "",
        "    @classmethod",
        f"    def from_code_point(cls, cp: int) -> '{cls}':",
        "        if not FIRST_CODE_POINT <= cp <= LAST_CODE_POINT:",
        "            raise NotInBlock(f'U+{cp:04X} is not in {BLOCK_NAME}')",
        "        return cls.from_char(chr(cp))",
        "",
        f"    def successor(self) -> Optional['{cls}']:",
        '        """The next member in code point order, or None after the last one."""',
        "        return _SUCCESSORS.get(self)",
        "",
        "",
        f"_ORDER = tuple({cls})",
        "_SUCCESSORS = dict(zip(_ORDER, _ORDER[1:]))",
        "_BY_CHAR = {member.value: member for member in _ORDER}",
    ])

    if plan.members:
        lines.append("_DISPLAY_NAMES = {")
        for member in plan.members:
            lines.append(f"    {cls}.{member.member_name}: {pretty_display_name(member.record.name)!r},")
        lines.append("}")
    else:
        lines.append("_DISPLAY_NAMES = {}")

    lines.extend([
        "",
        "",
        f"def iterate() -> Iterator[{cls}]:",
        '    """Yields every member, starting at the lowest code point."""',
        "    member = _ORDER[0] if _ORDER else None",
        "    while member is not None:",
        "        yield member",
        "        member = member.successor()",
        "",
        "",
        "__all__ = [",
    ])
    exported = list(RESERVED_MODULE_NAMES) + [member.constant_name for member in plan.members]
    exported += ["NotInBlock", cls, "iterate"]
    lines.extend(f"    {name!r}," for name in exported)
    lines.append("]")

    return "\n".join(lines) + "\n"


def render_index(plans: List[BlockPlan], blocks: BlockTable, descriptions: Optional[Dict[str, str]] = None) -> str:
    """
    Renders the package __init__.py listing every block module in range
    order. Each import is preceded by the block's summary as a comment.
    """
    descriptions = descriptions or {}
    lines: List[str] = ["# -*- coding: utf-8 -*-", 'r"""']
    for header_line in blocks.header:
        lines.append(sanitize_doc_text(header_line))
    if blocks.header:
        lines.append("")
    lines.append(f"Generated by {GENERATOR_NAME}. Do not edit.")
    lines.append('"""')
    lines.append("")

    for plan in plans:
        for summary_line in describe_block(plan, blocks.version, descriptions.get(plan.block.name, "")):
            lines.append(f"# {summary_line}" if summary_line else "#")
        lines.append(f"from . import {plan.module_name}")
        lines.append("")

    lines.append("__all__ = [")
    lines.extend(f"    {plan.module_name!r}," for plan in plans)
    lines.append("]")
    lines.append("")
    lines.append("BLOCKS = (")
    lines.extend(f"    {plan.module_name}," for plan in plans)
    lines.append(")")

    return "\n".join(lines) + "\n"


# --------------------------------------------------------------------
# 4. Output
# --------------------------------------------------------------------

def load_block_metadata(ucd_dir: pathlib.Path) -> Dict[str, str]:
    """
    Reads the optional unicode_blocks.json next to the UCD files and returns
    the block descriptions keyed by block name. A missing file means no
    descriptions.
    """
    metadata_file = ucd_dir / BLOCKS_DATA_FILE
    if not metadata_file.exists():
        return {}

    try:
        json_data = json.loads(metadata_file.read_text(encoding='utf-8'))
        return {entry['name']: entry.get('description', '') or '' for entry in json_data.get('blocks', [])}
    except json.JSONDecodeError as e:
        raise UcdParseError(f"Invalid JSON: {e.msg}", str(metadata_file), e.lineno) from None
    except (KeyError, TypeError, AttributeError) as e:
        raise UcdParseError(f"Malformed block entry ({e})", str(metadata_file)) from None


def emit_block_module(plan: BlockPlan, out_dir: pathlib.Path, unicode_version: Optional[str],
                      description: str = "", quiet: bool = False) -> str:
    """Writes one block module and returns its file name."""
    filename = f"{plan.module_name}.py"
    (out_dir / filename).write_text(render_block_module(plan, unicode_version, description), encoding="utf-8")
    if not quiet:
        print(f"Processed block '{plan.block.name}' (U+{plan.block.begin:04X}...U+{plan.block.end:04X}): "
              f"Written to {filename}")
    return filename


def emit_index(plans: List[BlockPlan], blocks: BlockTable, out_dir: pathlib.Path,
               descriptions: Optional[Dict[str, str]] = None, quiet: bool = False) -> str:
    if not plans:
        print("Warning: No blocks were found. The package index will be empty.", file=sys.stderr)
    (out_dir / INDEX_FILE).write_text(render_index(plans, blocks, descriptions), encoding="utf-8")
    if not quiet:
        print(f"\nPackage index written: {INDEX_FILE}")
    return INDEX_FILE


def generate(ucd_dir, output_dir, strict: bool = False, quiet: bool = False) -> List[str]:
    """
    Runs the whole pipeline: parse both UCD files, plan every block, then
    write one module per block followed by the package index.

    Returns the names of the files written, in write order.
    """
    ucd_dir = pathlib.Path(ucd_dir)
    out_dir = pathlib.Path(output_dir)

    blocks = load_blocks(ucd_dir / BLOCKS_FILE)
    characters = load_unicode_data(ucd_dir / UNICODE_DATA_FILE)
    descriptions = load_block_metadata(ucd_dir)

    plans = plan_blocks(blocks, characters, strict)

    if not quiet:
        print(f"Generating Python modules for Unicode {blocks.version or '(unknown version)'} "
              f"({len(blocks)} blocks, {len(characters)} characters)...")

    out_dir.mkdir(parents=True, exist_ok=True)

    written: List[str] = []
    for plan in plans:
        written.append(emit_block_module(plan, out_dir, blocks.version, descriptions.get(plan.block.name, ""), quiet))
    written.append(emit_index(plans, blocks, out_dir, descriptions, quiet))
    return written


# --------------------------------------------------------------------
# 5. Main Execution
# --------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate Python modules containing Unicode block enumerations and constants."
    )
    parser.add_argument(
        '-d', '--ucd-dir',
        required=True,
        help=f'Directory containing the plain-text UCD ({BLOCKS_FILE} and {UNICODE_DATA_FILE}). '
             'The latest version may be downloaded from https://www.unicode.org/Public/UCD/latest/ucd/'
    )
    parser.add_argument(
        '-o', '--output',
        required=True,
        help='Output directory for the generated package'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Abort on identifier collisions instead of appending a code point suffix'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Only report warnings and errors'
    )
    args = parser.parse_args(argv)

    try:
        written = generate(args.ucd_dir, args.output, strict=args.strict, quiet=args.quiet)
    except UnicodeModulesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"\nAll files written to {pathlib.Path(args.output).resolve()} ({len(written) - 1} block modules).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
