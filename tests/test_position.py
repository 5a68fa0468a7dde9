from __future__ import annotations

import pytest

from diffxml.nodes import CDATA, DocType, Element, Text
from diffxml.pairs import InOrder, NodePairs
from diffxml.position import (
    ChildNumber, Position, char_offset, dom_index, find_position,
    in_order_char_offset, in_order_dom_index, in_order_xpath_index,
    xpath_index,
)

from helpers import root


def _element(*children) -> Element:
    el = Element("a")
    for child in children:
        el.append(child)
    return el


def test_text_runs_collapse_in_xpath_numbering():
    a = root("<a>ab<![CDATA[cd]]><b/>ef</a>")
    assert [dom_index(n) for n in a.children] == [0, 1, 2, 3]
    assert [xpath_index(n) for n in a.children] == [1, 1, 2, 3]
    assert [char_offset(n) for n in a.children] == [1, 3, 5, 1]


def test_empty_text_and_doctype_take_no_position():
    b, c = Element("b"), Element("c")
    _element(Text(""), b, DocType("x"), c)
    assert xpath_index(b) == 1
    assert xpath_index(c) == 2
    assert dom_index(c) == 3


def test_empty_text_does_not_split_a_run():
    t1, t2 = Text("ab"), Text("cd")
    _element(t1, Text(""), t2)
    assert xpath_index(t2) == 1
    assert char_offset(t2) == 3


def test_ignoring_a_sibling():
    x, b, c = Element("x"), Element("b"), Element("c")
    _element(x, b, c)
    assert dom_index(c, ignoring=b) == 1
    assert xpath_index(c, ignoring=b) == 2
    # ignoring a node that lives elsewhere changes nothing
    assert xpath_index(c, ignoring=Element("z")) == 3


def test_ignoring_joins_text_runs():
    t1, b, t2 = Text("ab"), Element("b"), Text("cd")
    _element(t1, b, t2)
    assert xpath_index(t2) == 3
    assert xpath_index(t2, ignoring=b) == 1
    assert char_offset(t2, ignoring=b) == 3


def test_ignoring_the_node_itself_fails():
    b = Element("b")
    _element(b)
    with pytest.raises(ValueError):
        dom_index(b, ignoring=b)


def test_node_without_parent_fails():
    with pytest.raises(ValueError):
        xpath_index(Element("b"))
    with pytest.raises(ValueError):
        ChildNumber(Element("b"))


def test_in_order_numbering():
    b, c, d = Element("b"), Element("c"), Element("d")
    _element(b, c, d)
    in_order = InOrder()
    in_order.mark_out(c)
    assert in_order_dom_index(d, in_order) == 1
    assert in_order_xpath_index(d, in_order) == 2
    # a node that is out of order gets the next in-order slot
    assert in_order_xpath_index(c, in_order) == 2


def test_in_order_char_offset_skips_out_of_order_text():
    t1, t2, t3 = Text("ab"), Text("cde"), Text("f")
    _element(t1, t2, t3)
    in_order = InOrder()
    in_order.mark_out(t2)
    assert in_order_char_offset(t3, in_order) == 3


def test_positions_follow_mutation():
    b, c = Element("b"), Element("c")
    a = _element(b, c)
    cn = ChildNumber(c)
    assert cn.xpath == 2
    a.insert(0, Text("t"))
    assert cn.xpath == 3
    assert cn.dom == 2
    a.remove(b)
    assert cn.xpath == 2
    assert cn.xpath_ignoring(a.children[0]) == 1


def _paired(a1: Element, a2: Element) -> NodePairs:
    pairs = NodePairs()
    pairs.add(a1, a2)
    for n1, n2 in zip(a1.children, a2.children):
        pairs.add(n1, n2)
    return pairs


def test_find_position_without_anchor_prepends():
    a1 = _element(Element("b"))
    a2 = _element(Element("b"))
    x = a2.append(Element("new"))
    pairs = _paired(a1, a2)
    in_order = InOrder()
    in_order.mark_out(a2.children[0])
    assert find_position(x, pairs, in_order) == Position(0, 1, 1)


def test_find_position_after_text_anchor():
    a1 = _element(Text("ab"), CDATA("cd"))
    a2 = _element(Text("ab"), CDATA("cd"))
    x = a2.append(Element("new"))
    pairs = _paired(a1, a2)
    assert find_position(x, pairs, InOrder()) == Position(2, 2, 5)


def test_find_position_ignores_the_moving_node():
    b1, c1 = Element("b"), Element("c")
    a1 = _element(c1, b1)
    b2, c2 = Element("b"), Element("c")
    a2 = _element(b2, c2)
    pairs = NodePairs()
    pairs.add(a1, a2)
    pairs.add(b1, b2)
    pairs.add(c1, c2)
    # c goes after b; its own old slot in front of b is not counted
    assert find_position(c2, pairs, InOrder()) == Position(1, 2, 1)
