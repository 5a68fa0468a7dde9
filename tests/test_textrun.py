from __future__ import annotations

import pytest

from diffxml import PatchFormatError
from diffxml.nodes import CDATA, Element, NodeKind, Text
from diffxml.textrun import TextRun

from helpers import root, values


def _run(xml: str, index: int = 0) -> TextRun:
    return TextRun.starting_at(root(xml).children[index])


def test_run_starts_at_first_text_node():
    a = root("<a><b/>ab<![CDATA[cd]]>ef<c/></a>")
    run = TextRun.starting_at(a.children[3])
    assert run.start == 1
    assert run.text == "abcdef"
    assert run.length == 6
    assert run.end_index() == 4


def test_locate():
    run = _run("<a>ab<![CDATA[cd]]>ef</a>")
    node, offset = run.locate(4)
    assert node.value == "cd"
    assert offset == 1
    with pytest.raises(PatchFormatError):
        run.locate(7)


def test_split_inside_a_node():
    a = root("<a>hello</a>")
    run = TextRun.starting_at(a.children[0])
    assert run.split_at(3) == 1
    assert values(a) == ["he", "llo"]


def test_split_on_boundaries():
    a = root("<a>ab<![CDATA[cd]]></a>")
    run = TextRun.starting_at(a.children[0])
    assert run.split_at(1) == 0
    assert run.split_at(3) == 1
    assert run.split_at(5) == 2
    assert values(a) == ["ab", "cd"]


def test_split_past_end_fails():
    run = _run("<a>ab</a>")
    with pytest.raises(PatchFormatError, match="past end"):
        run.split_at(4)
    with pytest.raises(PatchFormatError):
        run.split_at(0)


def test_insert_element_splits_text():
    a = root("<a>text</a>")
    TextRun.starting_at(a.children[0]).insert(2, Element("b"))
    assert values(a) == ["t", None, "ext"]


def test_insert_cdata_into_cdata_merges():
    a = root("<a><![CDATA[abcd]]></a>")
    TextRun.starting_at(a.children[0]).insert(3, CDATA("X"))
    assert values(a) == ["abXcd"]
    assert a.children[0].kind == NodeKind.CDATA


def test_insert_text_into_cdata_splits():
    a = root("<a><![CDATA[abcd]]></a>")
    TextRun.starting_at(a.children[0]).insert(3, Text("X"))
    assert values(a) == ["ab", "X", "cd"]
    assert [n.kind for n in a.children] == [NodeKind.CDATA, NodeKind.TEXT,
                                            NodeKind.CDATA]


def test_excise_spanning_nodes_drops_consumed_cdata():
    a = root("<a>ab<![CDATA[cd]]>ef</a>")
    run = TextRun.starting_at(a.children[0])
    fragment = run.excise(2, 4)
    assert fragment.value == "bcde"
    assert fragment.kind == NodeKind.TEXT
    assert fragment.parent is None
    assert values(a) == ["a", "f"]
    run.merge_adjacent()
    assert values(a) == ["af"]


def test_excise_inside_cdata_keeps_its_kind():
    a = root("<a>ab<![CDATA[cdef]]>gh</a>")
    fragment = TextRun.starting_at(a.children[0]).excise(4, 2)
    assert fragment.value == "de"
    assert fragment.kind == NodeKind.CDATA
    assert values(a) == ["ab", "cf", "gh"]
    assert a.children[1].kind == NodeKind.CDATA


def test_excise_defaults_to_rest_of_run():
    a = root("<a>abc<b/></a>")
    fragment = TextRun.starting_at(a.children[0]).excise(2)
    assert fragment.value == "bc"
    assert values(a) == ["a", None]


@pytest.mark.parametrize(
    "offset, length, message",
    [(5, 1, "charpos not within text"), (2, 4, "length past end of text")],
)
def test_excise_out_of_range(offset: int, length: int, message: str):
    run = _run("<a>ab<![CDATA[cd]]><b/></a>")
    with pytest.raises(PatchFormatError, match=message):
        run.excise(offset, length)


def test_starting_at_non_text_fails():
    with pytest.raises(PatchFormatError, match="non-text node"):
        TextRun.starting_at(root("<a><b/></a>").children[0])
