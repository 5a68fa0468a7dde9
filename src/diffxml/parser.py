# -*- coding: utf-8 -*-
"""
Funciones de parsing para diffxml.

XML goes through expat so CDATA sections, comments, processing instructions
and the DOCTYPE survive as nodes.  HTML fragments go through html5lib.
"""
import logging
import xml.etree.ElementTree as ElementTree
from xml.parsers import expat

import html5lib

from .exceptions import ParseError
from .nodes import (
    Document, Element, Attribute, Text, CDATA, Comment, ProcessingInstruction,
    DocType,
)

log = logging.getLogger(__name__)


def _split_name(name):
    """expat reports ``uri local [prefix]`` when namespace aware."""
    parts = name.split(' ')
    if len(parts) == 1:
        return None, parts[0], None
    if len(parts) == 2:
        return parts[0], parts[1], None
    return parts[0], parts[1], parts[2]


class _TreeBuilder(object):

    def __init__(self, data, resolve_entities=True):
        # raw bytes, for slicing out the DOCTYPE internal subset
        self._raw = data
        self.document = Document()
        self._stack = [self.document]
        self._pending_namespaces = []
        self._chunks = []
        self._doctype = None
        self._subset_start = None
        self.resolve_entities = resolve_entities
        self.parser = self.create_parser()

    def create_parser(self):
        p = expat.ParserCreate(namespace_separator=' ')
        p.namespace_prefixes = True
        p.ordered_attributes = True
        p.buffer_text = True
        p.StartNamespaceDeclHandler = self.start_namespace
        p.StartElementHandler = self.start
        p.EndElementHandler = self.end
        p.CharacterDataHandler = self.data
        p.StartCdataSectionHandler = self.start_cdata
        p.EndCdataSectionHandler = self.end_cdata
        p.CommentHandler = self.comment
        p.ProcessingInstructionHandler = self.pi
        p.StartDoctypeDeclHandler = self.doctype
        p.EndDoctypeDeclHandler = self.end_doctype
        if not self.resolve_entities:
            # A default handler stops expat from expanding internal entities
            p.DefaultHandler = self.default
        return p

    def _append(self, node):
        self._stack[-1].append(node)

    def _flush_text(self):
        if self._chunks:
            self._append(Text(''.join(self._chunks)))
            self._chunks = []

    def start_namespace(self, prefix, uri):
        self._pending_namespaces.append((prefix or None, uri or ''))

    def start(self, name, attributes):
        self._flush_text()
        uri, local, prefix = _split_name(name)
        el = Element(local, uri, prefix, namespaces=self._pending_namespaces)
        self._pending_namespaces = []
        for i in range(0, len(attributes), 2):
            auri, alocal, aprefix = _split_name(attributes[i])
            el.add_attribute(Attribute(alocal, attributes[i + 1], auri, aprefix))
        self._append(el)
        self._stack.append(el)

    def end(self, name):
        self._flush_text()
        self._stack.pop()

    def data(self, text):
        self._chunks.append(text)

    def start_cdata(self):
        self._flush_text()

    def end_cdata(self):
        self._append(CDATA(''.join(self._chunks)))
        self._chunks = []

    def comment(self, text):
        self._flush_text()
        self._append(Comment(text))

    def pi(self, target, data):
        self._flush_text()
        self._append(ProcessingInstruction(target, data))

    def doctype(self, name, system_id, public_id, has_internal_subset):
        self._doctype = DocType(name, public_id, system_id)
        if has_internal_subset:
            self._subset_start = self.parser.CurrentByteIndex
        self._append(self._doctype)

    def end_doctype(self):
        if self._subset_start is None:
            return
        end = self._raw.index(b'>', self.parser.CurrentByteIndex)
        start = self._raw.index(b'[', self._subset_start) + 1
        stop = self._raw.rindex(b']', start, end)
        self._doctype.internal_subset = self._raw[start:stop].decode(
            'utf-8', 'replace')
        self._subset_start = None

    def default(self, text):
        # unexpanded entity references inside content are kept verbatim
        if len(self._stack) > 1 and text.startswith('&') and text.endswith(';'):
            self._chunks.append(text)
            self.document.unresolved_entities.add(text[1:-1])

    def close(self):
        self._flush_text()
        return self.document


def parse_xml(source, resolve_entities=True):
    """
    Parse XML text (str or bytes) into a :class:`~diffxml.nodes.Document`.

    >>> doc = parse_xml('<a>x<![CDATA[y]]><!--c--></a>')
    >>> [type(n).__name__ for n in doc.document_element.children]
    ['Text', 'CDATA', 'Comment']
    """
    # expat reads str input as UTF-8, byte offsets follow that encoding
    data = source.encode('utf-8') if isinstance(source, str) else source
    builder = _TreeBuilder(data, resolve_entities)
    try:
        builder.parser.Parse(source, True)
    except expat.ExpatError as e:
        raise ParseError('Failed to parse document: %s' % e) from e
    return builder.close()


def parse_xml_file(path, resolve_entities=True):
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ParseError('Failed to read file %s: %s' % (path, e)) from e
    builder = _TreeBuilder(data, resolve_entities)
    try:
        builder.parser.Parse(data, True)
    except expat.ExpatError as e:
        raise ParseError('Failed to parse file %s: %s' % (path, e)) from e
    log.debug('parsed %s', path)
    return builder.close()


def _split_clark(tag):
    if tag.startswith('{'):
        uri, local = tag[1:].split('}', 1)
        return uri, local
    return None, tag


def _from_etree(el):
    if el.tag is ElementTree.Comment:
        return Comment(el.text or '')
    uri, local = _split_clark(el.tag)
    node = Element(local, uri)
    for key, value in el.attrib.items():
        auri, alocal = _split_clark(key)
        node.add_attribute(Attribute(alocal, value, auri))
    if el.text:
        node.append(Text(el.text))
    for child in el:
        if callable(child.tag) and child.tag is not ElementTree.Comment:
            continue
        node.append(_from_etree(child))
        if child.tail:
            node.append(Text(child.tail))
    return node


def parse_html(html, wrapper_element='div', wrapper_class=None):
    """
    Parse an HTML fragment into a Document whose document element is the
    ``wrapper_element`` holding the fragment.

    >>> doc = parse_html('Foo <b>bar</b>')
    >>> [getattr(n, 'name', n.value) for n in doc.document_element.children]
    ['Foo ', 'b']
    """
    builder = html5lib.getTreeBuilder('etree')
    parser = html5lib.HTMLParser(tree=builder, namespaceHTMLElements=False)
    tree = parser.parseFragment(html)
    tree.tag = wrapper_element
    if wrapper_class is not None:
        tree.set('class', wrapper_class)
    doc = Document()
    doc.append(_from_etree(tree))
    return doc


def parse_html_file(path, wrapper_element='div', wrapper_class=None):
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ParseError('Failed to read file %s: %s' % (path, e)) from e
    return parse_html(data, wrapper_element, wrapper_class)
