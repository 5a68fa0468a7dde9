# -*- coding: utf-8 -*-
"""
    diffxml
    ~~~~~~~

    Diffs and patches XML documents.  The differences are written as a DUL
    delta: an ordered list of insert, delete, move and update operations
    that turns the first document into the second.  Examples:

    >>> from diffxml import diff_xml, patch_xml

    >>> print(diff_xml('<a><b/></a>', '<a><b/><c/></a>'))
    <delta xmlns="http://www.adrianmouat.com/dul">
      <insert parent="/node()[1]" nodetype="1" childno="2" name="c"/>
    </delta>
    <BLANKLINE>

    >>> print(diff_xml('<a><b/><c/></a>', '<a><b/></a>'))
    <delta xmlns="http://www.adrianmouat.com/dul">
      <delete node="/node()[1]/node()[2]"/>
    </delta>
    <BLANKLINE>

    >>> delta = diff_xml('<a>text</a>', '<a>text<b/></a>')
    >>> patch_xml('<a>text</a>', delta)
    '<a>text<b/></a>'

    >>> patch_xml('<a>text</a>', '<delta><insert parent="/a" nodetype="1" '
    ...           'childno="2" name="b" charpos="2"/></delta>')
    '<a>t<b/>ext</a>'
"""
import logging

from .config import DiffConfig
from .delta import EditScript, Insert, Delete, Move, Update, encode, decode
from .editscript import EditScriptBuilder
from .exceptions import DiffXMLError, ParseError, DiffError, PatchFormatError
from .match import match_documents
from .parser import parse_xml, parse_xml_file, parse_html, parse_html_file
from .patch import PatchApplier, apply_patch
from .serializer import serialize

log = logging.getLogger(__name__)

__all__ = [
    'diff',
    'diff_xml',
    'diff_files',
    'patch',
    'patch_xml',
    'load_for_patch',
    'DiffConfig',
    'EditScript',
    'Insert',
    'Delete',
    'Move',
    'Update',
    'encode',
    'decode',
    'parse_xml',
    'parse_html',
    'serialize',
    'DiffXMLError',
    'ParseError',
    'DiffError',
    'PatchFormatError',
]


def diff(doc1, doc2, config=None):
    """
    Edit script turning ``doc1`` into ``doc2``.  Both documents are copied
    first, so the caller's trees are left alone.
    """
    config = config or DiffConfig()
    doc1 = doc1.clone()
    doc2 = doc2.clone()
    pairs = match_documents(doc1, doc2, config)
    return EditScriptBuilder(doc1, doc2, pairs, config).create()


def diff_xml(text1, text2, config=None):
    """Diff two XML strings and return the encoded delta."""
    config = config or DiffConfig()
    try:
        doc1 = parse_xml(text1, config.resolve_entities)
        doc2 = parse_xml(text2, config.resolve_entities)
    except ParseError as e:
        raise DiffError(str(e)) from e
    return encode(diff(doc1, doc2, config))


def diff_files(path1, path2, config=None, html=False):
    """Diff two files; returns the EditScript."""
    config = config or DiffConfig()
    try:
        if html:
            doc1 = parse_html_file(path1)
            doc2 = parse_html_file(path2)
        else:
            doc1 = parse_xml_file(path1, config.resolve_entities)
            doc2 = parse_xml_file(path2, config.resolve_entities)
    except ParseError as e:
        raise DiffError(str(e)) from e
    log.debug('diffing %s against %s', path1, path2)
    return diff(doc1, doc2, config)


def patch(doc, script, config=None):
    """Apply ``script`` (EditScript or delta text) to ``doc`` and return it."""
    return apply_patch(doc, script, config)


def load_for_patch(source, script, config=None):
    """
    Parse the document a delta applies to, from XML text or a
    ``pathlib.Path``.  Entity references stay unexpanded when the delta was
    computed that way (or ``config`` says so), otherwise its character
    positions would not line up.
    """
    config = config or DiffConfig()
    resolve = script.resolve_entities and config.resolve_entities
    if isinstance(source, (str, bytes)):
        return parse_xml(source, resolve)
    return parse_xml_file(source, resolve)


def patch_xml(text, delta, config=None):
    """Patch an XML string with an encoded delta and return the new text."""
    script = delta if isinstance(delta, EditScript) else decode(delta)
    doc = load_for_patch(text, script, config)
    return serialize(apply_patch(doc, script, config))
