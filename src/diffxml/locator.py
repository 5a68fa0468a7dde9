# -*- coding: utf-8 -*-
"""
Locators: the path expressions deltas use to address nodes.

Generated locators only use ``node()[k]`` steps and a trailing ``@name``.
Resolution also understands name tests so hand written deltas such as
``/a/b/@attr`` work.
"""
import re

from .exceptions import PatchFormatError
from .nodes import NodeKind, is_text_like, is_empty_text
from .position import xpath_index

_step_re = re.compile(r'''
    ^(?P<test>
        node\(\)
      | text\(\)
      | comment\(\)
      | processing-instruction\((?:'(?P<pi1>[^']*)'|"(?P<pi2>[^"]*)")?\)
      | \*
      | [^\s\[\]/@()]+
    )
    (?:\[\s*(?P<pos>\d+)\s*\])?$
''', re.X)


def get_xpath(node):
    """
    Locator of ``node`` in its document.

    >>> from diffxml.parser import parse_xml
    >>> doc = parse_xml('<a>x<b c="1"/></a>')
    >>> b = doc.document_element.children[1]
    >>> get_xpath(b), get_xpath(b.attributes[0]), get_xpath(doc)
    ('/node()[1]/node()[2]', '/node()[1]/node()[2]/@c', '/')
    """
    if node.kind == NodeKind.DOCUMENT:
        return '/'
    if node.kind == NodeKind.ATTRIBUTE:
        return get_xpath(node.parent) + '/@' + node.qname
    if node.kind == NodeKind.DOCTYPE:
        raise ValueError('DOCTYPE nodes cannot be addressed')
    parent = node.parent
    if parent is None:
        raise ValueError('%r is not attached to a document' % node)
    base = '' if parent.kind == NodeKind.DOCUMENT else get_xpath(parent)
    return '%s/node()[%d]' % (base, xpath_index(node))


def addressable_children(parent):
    """
    Children as XPath sees them: one entry per coalesced text run (its first
    node), none for empty Text or DOCTYPE.
    """
    units = []
    prev = None
    for child in parent.children:
        if is_empty_text(child) or child.kind == NodeKind.DOCTYPE:
            continue
        if not (is_text_like(child) and is_text_like(prev)):
            units.append(child)
        prev = child
    return units


def _matches(node, test, pi_target):
    if test == 'node()':
        return True
    if test == 'text()':
        return is_text_like(node)
    if test == 'comment()':
        return node.kind == NodeKind.COMMENT
    if test.startswith('processing-instruction('):
        return (node.kind == NodeKind.PROCESSING_INSTRUCTION
                and (pi_target is None or node.target == pi_target))
    if node.kind != NodeKind.ELEMENT:
        return False
    if test == '*':
        return True
    return node.qname == test or (':' not in test and node.name == test)


def _find_attribute(element, qname):
    for attr in element.content_attributes():
        if attr.qname == qname:
            return attr
    if ':' not in qname:
        for attr in element.content_attributes():
            if attr.name == qname and attr.namespace is None:
                return attr
    return None


def resolve(document, path):
    """Find the node ``path`` points at, or raise PatchFormatError."""
    if path is None or not path.strip():
        raise PatchFormatError('Empty locator')
    path = path.strip()
    if path.startswith('//'):
        raise PatchFormatError('Unsupported locator: %s' % path)
    steps = [s for s in path.strip('/').split('/')]
    node = document
    if steps == ['']:
        return node
    for i, step in enumerate(steps):
        if step.startswith('@'):
            if i != len(steps) - 1 or node.kind != NodeKind.ELEMENT:
                raise PatchFormatError('Invalid attribute step in %s' % path)
            attr = _find_attribute(node, step[1:])
            if attr is None:
                raise PatchFormatError('No attribute matches %s' % path)
            return attr
        m = _step_re.match(step)
        if m is None:
            raise PatchFormatError('Invalid locator step %r in %s' % (step, path))
        if node.kind not in (NodeKind.DOCUMENT, NodeKind.ELEMENT):
            raise PatchFormatError('No node matches %s' % path)
        pi_target = m.group('pi1') if m.group('pi1') is not None else m.group('pi2')
        candidates = [c for c in addressable_children(node)
                      if _matches(c, m.group('test'), pi_target)]
        pos = int(m.group('pos') or 1)
        if pos < 1 or pos > len(candidates):
            raise PatchFormatError('No node matches %s' % path)
        node = candidates[pos - 1]
    return node
