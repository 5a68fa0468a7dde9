# -*- coding: utf-8 -*-
"""
Errores públicos de diffxml.
"""


class DiffXMLError(Exception):
    """Base class for every error diffxml raises on purpose."""


class ParseError(DiffXMLError):
    """A document could not be read into a tree."""


class DiffError(DiffXMLError):
    """Computing a delta failed."""


class PatchFormatError(DiffXMLError):
    """
    A delta could not be applied: malformed operation, a locator that does
    not resolve, or a position outside the target's children or text.
    """
