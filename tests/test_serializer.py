from __future__ import annotations

from diffxml import parse_xml, serialize
from diffxml.nodes import CDATA, Comment, Element, ProcessingInstruction, Text
from diffxml.serializer import doctype_declaration

from helpers import root, xml_of


def test_namespaces_keep_their_prefixes():
    xml = '<p:a xmlns:p="urn:p" xmlns="urn:d"><b p:x="1"/></p:a>'
    assert xml_of(parse_xml(xml)) == xml


def test_new_nodes_get_the_declarations_they_need():
    doc = parse_xml('<a xmlns="urn:x"/>')
    a = doc.document_element
    a.append(Element("b"))
    a.append(Element("c", "urn:q", "q"))
    assert xml_of(doc) == ('<a xmlns="urn:x"><b xmlns=""/>'
                           '<q:c xmlns:q="urn:q"/></a>')


def test_text_and_attributes_are_escaped():
    a = root('<a x="a&quot;b&lt;"/>')
    a.append(Text('1 < 2 & "q"'))
    assert serialize(a) == '<a x="a&quot;b&lt;">1 &lt; 2 &amp; "q"</a>'


def test_cdata_stays_between_its_neighbours():
    doc = parse_xml("<a>x<![CDATA[<y>]]>z<b/><![CDATA[w]]></a>")
    assert xml_of(doc) == "<a>x<![CDATA[<y>]]>z<b/><![CDATA[w]]></a>"


def test_cdata_end_marker_is_split():
    doc = parse_xml("<a/>")
    doc.document_element.append(CDATA("a]]>b"))
    assert xml_of(doc) == "<a><![CDATA[a]]]]><![CDATA[>b]]></a>"


def test_comments_and_processing_instructions():
    xml = "<?p d?><!--c--><a><!--x--><?q?></a><!--e-->"
    assert xml_of(parse_xml(xml)) == xml
    a = root("<a/>")
    a.append(Comment("n"))
    a.append(ProcessingInstruction("t", "v"))
    assert serialize(a) == "<a><!--n--><?t v?></a>"


def test_doctype_internal_subset_is_written_back():
    doc = parse_xml('<!DOCTYPE a [<!ENTITY e "v">]><a>&e;</a>')
    assert doc.doctype.internal_subset == '<!ENTITY e "v">'
    assert xml_of(doc) == '<!DOCTYPE a [<!ENTITY e "v">]>\n<a>v</a>'


def test_unexpanded_entities_are_written_as_references():
    doc = parse_xml('<!DOCTYPE a [<!ENTITY e "v">]><a>x&e;y</a>',
                    resolve_entities=False)
    assert doc.document_element.children[0].value == "x&e;y"
    assert xml_of(doc) == '<!DOCTYPE a [<!ENTITY e "v">]>\n<a>x&e;y</a>'


def test_xml_declaration():
    out = serialize(parse_xml("<a>é</a>"), xml_declaration=True)
    assert out == "<?xml version='1.0' encoding='UTF-8'?>\n<a>é</a>"


def test_doctype_declaration_ids():
    doc = parse_xml('<!DOCTYPE a PUBLIC "-//X//Y" "a.dtd"><a/>')
    assert doctype_declaration(doc.doctype) == \
        '<!DOCTYPE a PUBLIC "-//X//Y" "a.dtd">'
