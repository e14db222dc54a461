# -*- coding: utf-8 -*-

"""
errors.py

Fatal error types raised while reading the UCD files and generating modules.
Everything here aborts the run; main() reports the message and exits non-zero.
"""

from typing import Optional


class UnicodeModulesError(Exception):
    """Base class for every fatal condition of a generation run."""


class UcdParseError(UnicodeModulesError, ValueError):
    """
    A UCD input line does not match the expected structure (wrong field count,
    malformed hex, malformed range). This means the database format changed,
    so generation must stop.
    """

    def __init__(self, message: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.reason = message
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}:"
        if line_number is not None:
            location += f"{line_number}:"
        super().__init__(f"{location} {message}" if location else message)


class NameCollisionError(UnicodeModulesError):
    """Two names in the same scope normalize to the same identifier."""


class FetchError(UnicodeModulesError):
    """A UCD file could not be downloaded."""
