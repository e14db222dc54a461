"""
unicode_modules

Generates one Python module per Unicode block (constants, an enumeration of
the block's assigned characters and conversions between members, characters
and code points) from the plain-text Unicode Character Database.
"""

__version__ = "0.1.0"

from .blocks import BlockTable, Range, UnicodeBlock, load_blocks, parse_blocks
from .errors import FetchError, NameCollisionError, UcdParseError, UnicodeModulesError
from .names import (IdentifierRegistry, pretty_display_name, snake_identifier, upper_camel_identifier,
                    upper_snake_constant)
from .unicode_data import CharacterRecord, CharacterTable, load_unicode_data, parse_unicode_data
from .generate_unicode_modules import generate
