from __future__ import annotations

import pytest

from diffxml import PatchFormatError, parse_xml
from diffxml.locator import addressable_children, get_xpath, resolve
from diffxml.nodes import NodeKind


def test_get_xpath_collapses_text_runs():
    doc = parse_xml("<a>x<![CDATA[y]]><b><c/></b>z</a>")
    a = doc.document_element
    b = a.children[2]
    assert get_xpath(a) == "/node()[1]"
    assert get_xpath(a.children[1]) == "/node()[1]/node()[1]"
    assert get_xpath(b.children[0]) == "/node()[1]/node()[2]/node()[1]"
    assert get_xpath(a.children[3]) == "/node()[1]/node()[3]"


def test_get_xpath_counts_prolog_nodes():
    doc = parse_xml("<!--c--><a/>")
    assert get_xpath(doc.document_element) == "/node()[2]"


def test_get_xpath_of_doctype_fails():
    doc = parse_xml("<!DOCTYPE a><a/>")
    with pytest.raises(ValueError):
        get_xpath(doc.doctype)
    # the DOCTYPE takes no position itself
    assert get_xpath(doc.document_element) == "/node()[1]"


def test_addressable_children():
    a = parse_xml("<a>x<![CDATA[y]]><b/><!--c--></a>").document_element
    units = addressable_children(a)
    assert [n.kind for n in units] == [NodeKind.TEXT, NodeKind.ELEMENT,
                                      NodeKind.COMMENT]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/node()[1]/node()[2]", "c"),
        ("/a/b", "b1"),
        ("/a/b[2]", "b2"),
        ("/a/*[1]", "c"),
        ("/a/text()", "t"),
        ("/a/comment()", "note"),
        ("/a/processing-instruction('pi')", "data"),
    ],
)
def test_resolve(path: str, expected: str):
    doc = parse_xml('<a>t<c/><b id="b1"/><!--note--><?pi data?>'
                    '<b id="b2"/></a>')
    node = resolve(doc, path)
    got = node.get("id") or node.name if node.kind == NodeKind.ELEMENT \
        else node.value
    assert got == expected


def test_resolve_document_and_attribute():
    doc = parse_xml('<a x="1"><b y="2"/></a>')
    assert resolve(doc, "/") is doc
    assert resolve(doc, "/a/@x").value == "1"
    assert resolve(doc, "/node()[1]/node()[1]/@y").value == "2"


def test_resolve_prefixed_names():
    doc = parse_xml('<p:a xmlns:p="urn:p"><p:b q:x="1" xmlns:q="urn:q"/></p:a>')
    b = resolve(doc, "/p:a/p:b")
    assert b.name == "b"
    assert resolve(doc, "/a/b").namespace == "urn:p"
    assert resolve(doc, "/p:a/p:b/@q:x").value == "1"


@pytest.mark.parametrize(
    "path",
    ["", "//a", "/a/c", "/a/node()[5]", "/a/@missing", "/a/@x/b",
     "/a/node()[1]/node()[1]", "/a/b[0]"],
)
def test_resolve_failures(path: str):
    doc = parse_xml('<a x="1">t<b/></a>')
    with pytest.raises(PatchFormatError):
        resolve(doc, path)
