# -*- coding: utf-8 -*-
"""
Turns a node tree back into XML text.

The tree is rebuilt with lxml and written by ``etree.tostring``.  Namespace
declarations made in the source are handed over as ``nsmap``; lxml declares
whatever else a tag or attribute needs, so trees built by the patcher
serialize correctly too.
"""
import re

from lxml import etree

from .nodes import NodeKind

# lxml keeps one string per text slot, so each CDATA section is built inside
# a marker element that is stripped again once the tree is complete
_CDATA_MARKER = '{urn:diffxml:serializer}cdata'


def _clark(namespace, name):
    return '{%s}%s' % (namespace, name) if namespace else name


def _cdata_sections(value):
    """``]]>`` cannot appear inside a section, so split it across two."""
    parts = value.split(']]>')
    sections = [parts[0]]
    for part in parts[1:]:
        sections[-1] += ']]'
        sections.append('>' + part)
    return sections


def _entity_pattern(names):
    if not names:
        return None
    return re.compile('&(%s);' % '|'.join(re.escape(n) for n in sorted(names)))


def _nsmap(el, lparent):
    nsmap = {}
    for prefix, uri in el.namespaces:
        nsmap[prefix] = uri
    for attr in el.attributes:
        if attr.is_namespace_declaration:
            nsmap[None if attr.name == 'xmlns' else attr.name] = attr.value
    if el.namespace is not None:
        if el.prefix not in nsmap:
            nsmap[el.prefix] = el.namespace
    elif None not in nsmap and lparent is not None \
            and lparent.nsmap.get(None):
        # undeclare the default namespace of the parent
        nsmap[None] = ''
    for attr in el.content_attributes():
        if attr.namespace and attr.prefix and attr.prefix != 'xml' \
                and attr.prefix not in nsmap:
            nsmap[attr.prefix] = attr.namespace
    return nsmap


def _leaf(node):
    if node.kind == NodeKind.COMMENT:
        return etree.Comment(node.value)
    if node.kind == NodeKind.PROCESSING_INSTRUCTION:
        return etree.ProcessingInstruction(node.target, node.value or None)
    raise ValueError('Cannot serialize %r' % node)


def _add_text(lel, last, text):
    if not text:
        return
    if last is None:
        lel.text = (lel.text or '') + text
    else:
        last.tail = (last.tail or '') + text


def _fill(el, lel, refs):
    last = None
    for child in el.children:
        kind = child.kind
        if kind == NodeKind.ELEMENT:
            last = _element(child, lel, refs)
        elif kind == NodeKind.TEXT:
            parts = refs.split(child.value) if refs else [child.value]
            for i, part in enumerate(parts):
                if i % 2:
                    last = etree.Entity(part)
                    lel.append(last)
                else:
                    _add_text(lel, last, part)
        elif kind == NodeKind.CDATA:
            for section in _cdata_sections(child.value):
                last = etree.SubElement(lel, _CDATA_MARKER)
                last.text = etree.CDATA(section)
        else:
            last = _leaf(child)
            lel.append(last)


def _element(el, lparent, refs):
    tag = _clark(el.namespace, el.name)
    nsmap = _nsmap(el, lparent)
    if lparent is None:
        lel = etree.Element(tag, nsmap=nsmap)
    else:
        lel = etree.SubElement(lparent, tag, nsmap=nsmap)
    for attr in el.content_attributes():
        lel.set(_clark(attr.namespace, attr.name), attr.value)
    _fill(el, lel, refs)
    return lel


def to_etree(el, entities=()):
    """
    lxml copy of the element ``el``.  Text matching ``&name;`` for a name in
    ``entities`` becomes an entity reference again.

    >>> from diffxml.parser import parse_xml
    >>> lel = to_etree(parse_xml('<a>x<![CDATA[y]]><b/></a>').document_element)
    >>> etree.tostring(lel)
    b'<a>x<![CDATA[y]]><b/></a>'
    """
    lel = _element(el, None, _entity_pattern(entities))
    etree.strip_tags(lel, _CDATA_MARKER)
    return lel


def doctype_declaration(doctype):
    """Markup of a DOCTYPE node, internal subset included."""
    decl = '<!DOCTYPE %s' % doctype.name
    if doctype.public_id:
        decl += ' PUBLIC "%s" "%s"' % (doctype.public_id, doctype.system_id or '')
    elif doctype.system_id:
        decl += ' SYSTEM "%s"' % doctype.system_id
    if doctype.internal_subset:
        decl += ' [%s]' % doctype.internal_subset
    return decl + '>'


def _tostring(tree, xml_declaration, doctype=None):
    if xml_declaration:
        return etree.tostring(tree, encoding='UTF-8', xml_declaration=True,
                              doctype=doctype).decode('utf-8')
    return etree.tostring(tree, encoding='unicode', doctype=doctype)


def _serialize_document(doc, xml_declaration):
    root = doc.document_element
    if root is None:
        return ''.join(_tostring(_leaf(n), False) for n in doc.children
                       if n.kind != NodeKind.DOCTYPE)
    lroot = to_etree(root, doc.unresolved_entities)
    i = doc.index(root)
    for node in doc.children[:i]:
        if node.kind != NodeKind.DOCTYPE:
            lroot.addprevious(_leaf(node))
    for node in reversed(doc.children[i + 1:]):
        lroot.addnext(_leaf(node))
    doctype = doc.doctype
    return _tostring(lroot.getroottree(), xml_declaration,
                     doctype_declaration(doctype) if doctype else None)


def serialize(node, xml_declaration=False):
    """
    Serialize a node (usually a Document) to text.

    >>> from diffxml.parser import parse_xml
    >>> serialize(parse_xml('<a x="1"><b>t</b><![CDATA[<c>]]></a>'))
    '<a x="1"><b>t</b><![CDATA[<c>]]></a>'
    >>> serialize(parse_xml('<!--c--><a>x &amp; y</a><?p d?>'))
    '<!--c--><a>x &amp; y</a><?p d?>'
    """
    kind = node.kind
    if kind == NodeKind.DOCUMENT:
        return _serialize_document(node, xml_declaration)
    if kind == NodeKind.ELEMENT:
        return _tostring(to_etree(node), xml_declaration)
    if kind == NodeKind.DOCTYPE:
        return doctype_declaration(node)
    return _tostring(_leaf(node), xml_declaration)
