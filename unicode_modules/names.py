# -*- coding: utf-8 -*-

"""
names.py

Converts Unicode block and character names into Python identifiers.

Every transform is a pure function of the name. Uniqueness is not a property
of the transforms themselves: names such as "LATIN CAPITAL LETTER A" and
"LATIN CAPITAL LETTER a" collapse to the same identifier, so generated code
claims every identifier through an IdentifierRegistry for its scope.
"""

import keyword
import sys
from typing import Dict, Optional

from .errors import NameCollisionError

# Owner marker for identifiers that no code point stands for
RESERVED = -1


def snake_identifier(name: str) -> str:
    """'Latin-1 Supplement' -> 'latin_1_supplement'"""
    return name.lower().replace(' ', '_').replace('-', '_')


def upper_camel_identifier(name: str) -> str:
    """
    'HANGUL JUNGSEONG O-E' -> 'HangulJungseongODashE'

    Dashes become the word "Dash" so that dash-joined names keep a visible
    word boundary and stay distinct from their space-joined counterparts.
    """
    words = name.replace('-', ' Dash ').split(' ')
    return ''.join(word[:1].upper() + word[1:].lower() for word in words)


def upper_snake_constant(name: str) -> str:
    """'HANGUL JUNGSEONG O-E' -> 'HANGUL_JUNGSEONG_O_DASH_E'"""
    return name.upper().replace(' ', '_').replace('-', '_DASH_')


def pretty_display_name(name: str) -> str:
    return name.lower()


def is_valid_identifier(identifier: str) -> bool:
    return identifier.isidentifier() and not keyword.iskeyword(identifier)


class IdentifierRegistry:
    """
    Tracks the identifiers already used in one scope (a generated module or
    the package index) and hands out unique ones.

    In strict mode a collision is fatal. Otherwise the colliding identifier
    gets a code point suffix, the same way a clashing macro name falls back
    to a U+XXXX suffix, and a warning is printed.
    """

    def __init__(self, scope: str, strict: bool = False):
        self.scope = scope
        self.strict = strict
        self._owners: Dict[str, int] = {}

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def reserve(self, identifier: str) -> None:
        """Marks a name defined by the generated code itself as taken."""
        self._owners[identifier] = RESERVED

    def _owner(self, identifier: str) -> str:
        cp = self._owners[identifier]
        return "a generated definition" if cp == RESERVED else f"U+{cp:04X}"

    def claim(self, identifier: str, cp: int, suffix: str = "U{cp:04X}", source: Optional[str] = None) -> str:
        """
        Reserves `identifier` for code point `cp` and returns the identifier
        that was actually reserved.

        Args:
            identifier: The normalized identifier.
            cp: Code point the identifier stands for (used for the suffix).
            suffix: Format string for the disambiguating suffix.
            source: The original name, for error messages.
        """
        source = source or identifier
        # Keywords (U+22A8 TRUE) always take the suffix, in strict mode too
        if keyword.iskeyword(identifier):
            identifier += suffix.format(cp=cp)

        if identifier in self._owners or not is_valid_identifier(identifier):
            if self.strict:
                if identifier in self._owners:
                    raise NameCollisionError(
                        f"{self.scope}: '{source}' (U+{cp:04X}) normalizes to '{identifier}', "
                        f"already used by {self._owner(identifier)}")
                raise NameCollisionError(
                    f"{self.scope}: '{source}' (U+{cp:04X}) does not normalize to a valid identifier ('{identifier}')")

            safe_identifier = identifier + suffix.format(cp=cp)
            if safe_identifier in self._owners or not is_valid_identifier(safe_identifier):
                raise NameCollisionError(
                    f"{self.scope}: cannot derive a unique identifier for '{source}' (U+{cp:04X})")
            print(f"Warning: Collision detected for U+{cp:04X} in {self.scope}. "
                  f"Identifier '{identifier}' is not available. Using '{safe_identifier}'", file=sys.stderr)
            identifier = safe_identifier

        self._owners[identifier] = cp
        return identifier
