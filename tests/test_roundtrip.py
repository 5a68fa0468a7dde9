from __future__ import annotations

import pytest

from diffxml import DiffConfig, diff, parse_xml

from helpers import diff_text, roundtrip, xml_of

CASES = [
    ("<a><b/></a>", "<a><b/><c/></a>"),
    ("<a><b/><c/></a>", "<a><b/></a>"),
    ("<a><b><c/></b><d/></a>", "<a><b/><d><c/></d></a>"),
    ("<a>text</a>", "<a>text<b/></a>"),
    ("<a>one<b/>two</a>", "<a>two<b/>one</a>"),
    ("<a>hello</a>", "<a>hello<b>new</b>world</a>"),
    ("<a>ab<b/>cd</a>", "<a>abcd</a>"),
    ("<a><b/><c/><d/></a>", "<a><d/><b/><c/></a>"),
    ('<a x="1" k="0"><b/></a>', '<z x="2" y="3"><b/></z>'),
    ('<a><b x="1"/></a>', '<a><b x="2"/></a>'),
    ("<?style a?><a/>", "<a/><!--end-->"),
    ("<a><b>x</b><c>y</c></a>", "<a><c>y</c><b>z</b></a>"),
    ('<a xmlns="urn:x"><b/></a>', '<a xmlns="urn:x"><b/><c/></a>'),
    ("<a><!--x--><?p d?></a>", "<a><?p d?><!--y--></a>"),
    ("<a>x<![CDATA[y]]>z</a>", "<a>x<![CDATA[y]]>z<b/></a>"),
    ("<r><a><b>1</b><b>2</b></a><c/></r>",
     "<r><c><b>2</b></c><a><b>1</b></a></r>"),
    ("<a>\n  <b/>\n  <c/>\n</a>", "<a>\n  <c/>\n  <b/>\n</a>"),
]


@pytest.mark.parametrize("a, b", CASES)
def test_patch_reproduces_target(a: str, b: str):
    doc = roundtrip(a, b)
    assert xml_of(doc) == b
    assert diff(doc, parse_xml(b)).is_empty


@pytest.mark.parametrize("a, b", CASES)
def test_diff_against_itself_is_empty(a: str, b: str):
    assert diff_text(a, a).is_empty
    assert diff_text(b, b).is_empty


def test_diff_leaves_inputs_alone():
    doc1 = parse_xml("<!DOCTYPE a><a><b/>x</a>")
    doc2 = parse_xml("<!DOCTYPE a><a>x<c/></a>")
    before = (xml_of(doc1), xml_of(doc2))
    diff(doc1, doc2)
    assert (xml_of(doc1), xml_of(doc2)) == before


def test_doctype_is_never_addressed():
    script = diff_text("<!DOCTYPE a><!--c--><a><b/></a>",
                       "<!DOCTYPE a><a><c/></a><!--c-->")
    for op in script:
        for locator in (getattr(op, "node", None), getattr(op, "parent", None)):
            assert locator is None or locator.startswith("/")
    doc = roundtrip("<!DOCTYPE a><!--c--><a><b/></a>",
                    "<!DOCTYPE a><a><c/></a><!--c-->")
    assert doc.doctype is not None
    assert xml_of(doc) == "<!DOCTYPE a>\n<a><c/></a><!--c-->"


def test_roundtrip_with_ignored_comments_keeps_them():
    config = DiffConfig(ignore_comments=True)
    doc = roundtrip("<a><!--keep--><b/></a>", "<a><c/></a>", config)
    assert xml_of(doc) == "<a><c/><!--keep--></a>"


def test_ignored_node_between_texts_leaves_one_run():
    # the comment is never inserted, so x and y end up in a single text node
    config = DiffConfig(ignore_comments=True)
    target = "<a>x<!--c-->y</a>"
    doc = roundtrip("<a/>", target, config)
    assert xml_of(doc) == "<a>xy</a>"
    assert not diff(doc, parse_xml(target), config).is_empty
