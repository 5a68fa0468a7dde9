# -*- coding: utf-8 -*-
"""
Child numbering.

A node has several positions among its siblings:

* the DOM index, 0-based, counting every sibling;
* the XPath index, 1-based, where a run of adjacent Text/CDATA siblings takes
  a single position and empty Text and DOCTYPE siblings take none;
* the character offset, 1-based, of the node inside its text run.

The in-order variants only count siblings whose in-order flag is set, and the
``ignoring`` argument computes a position as if another node were not there.
Nothing is cached: positions are always read from the live tree.
"""
from collections import namedtuple

from .nodes import NodeKind, is_text_like, is_empty_text

Position = namedtuple('Position', 'dom xpath charpos')


def _always_in_order(node):
    return True


def _siblings(node, ignoring=None):
    if node is None:
        raise ValueError('Node cannot be None')
    if node.parent is None or node.kind == NodeKind.ATTRIBUTE:
        raise ValueError('Node must have a parent')
    if ignoring is node:
        raise ValueError("Can't ignore the position node")
    if ignoring is None:
        return node.parent.children
    return [s for s in node.parent.children if s is not ignoring]


def _invisible(node):
    return is_empty_text(node) or node.kind == NodeKind.DOCTYPE


def _index_in(siblings, node):
    for i, sibling in enumerate(siblings):
        if sibling is node:
            return i
    raise ValueError('%r not found among its siblings' % node)


def dom_index(node, ignoring=None):
    return _index_in(_siblings(node, ignoring), node)


def xpath_index(node, ignoring=None):
    child_no = 0
    prev = None
    for sibling in _siblings(node, ignoring):
        if sibling is not node and _invisible(sibling):
            continue
        if not (is_text_like(sibling) and is_text_like(prev)):
            child_no += 1
        if sibling is node:
            return child_no
        prev = sibling
    raise ValueError('%r not found among its siblings' % node)


def char_offset(node, ignoring=None):
    siblings = _siblings(node, ignoring)
    charpos = 1
    for sibling in reversed(siblings[:_index_in(siblings, node)]):
        if not is_text_like(sibling):
            break
        charpos += len(sibling.value)
    return charpos


def in_order_dom_index(node, in_order):
    count = 0
    for sibling in _siblings(node):
        if sibling is node:
            break
        if in_order(sibling):
            count += 1
    return count


def in_order_xpath_index(node, in_order):
    child_no = 0
    last_in_order = None
    for sibling in _siblings(node):
        if in_order(sibling) and not (
                (is_text_like(sibling) and is_text_like(last_in_order))
                or _invisible(sibling)):
            child_no += 1
        if sibling is node:
            break
        if in_order(sibling):
            last_in_order = sibling
    if not in_order(node):
        child_no += 1
    return child_no


def in_order_char_offset(node, in_order):
    siblings = _siblings(node)
    charpos = 1
    for sibling in reversed(siblings[:_index_in(siblings, node)]):
        if is_text_like(sibling):
            if in_order(sibling):
                charpos += len(sibling.value)
        elif in_order(sibling):
            break
    return charpos


class ChildNumber(object):
    """Bundles the numbering functions for one node.

    >>> from diffxml.parser import parse_xml
    >>> a = parse_xml('<a>12<b/>34</a>').document_element
    >>> cn = ChildNumber(a.children[2])
    >>> cn.dom, cn.xpath, cn.charpos
    (2, 3, 1)
    """

    def __init__(self, node, in_order=None):
        _siblings(node)
        self.node = node
        self.in_order = in_order or _always_in_order

    @property
    def dom(self):
        return dom_index(self.node)

    @property
    def xpath(self):
        return xpath_index(self.node)

    @property
    def charpos(self):
        return char_offset(self.node)

    @property
    def in_order_dom(self):
        return in_order_dom_index(self.node, self.in_order)

    @property
    def in_order_xpath(self):
        return in_order_xpath_index(self.node, self.in_order)

    @property
    def in_order_charpos(self):
        return in_order_char_offset(self.node, self.in_order)

    def dom_ignoring(self, other):
        return dom_index(self.node, other)

    def xpath_ignoring(self, other):
        return xpath_index(self.node, other)

    def charpos_ignoring(self, other):
        return char_offset(self.node, other)


def find_position(x, pairs, in_order):
    """
    Where the partner of ``x`` must go among the children of the partner of
    ``x``'s parent.

    The anchor is the nearest earlier sibling of ``x`` that is in order and
    matched under the target parent.  Without one the node goes first.  The
    current partner of ``x`` (when moving) is ignored so it does not count
    its own old slot.
    """
    anchor = None
    z = pairs.partner(x.parent)
    siblings = x.parent.children
    for sibling in reversed(siblings[:_index_in(siblings, x)]):
        if in_order(sibling) and pairs.is_matched(sibling) \
                and pairs.partner(sibling).parent is z:
            anchor = sibling
            break
    if anchor is None:
        return Position(0, 1, 1)

    u = pairs.partner(anchor)
    w = pairs.partner(x)
    if w is not None and w.parent is not u.parent:
        w = None
    dom = dom_index(u, w) + 1
    xpath = xpath_index(u, w) + 1
    if is_text_like(u):
        charpos = char_offset(u, w) + len(u.value)
    else:
        charpos = 1
    return Position(dom, xpath, charpos)
