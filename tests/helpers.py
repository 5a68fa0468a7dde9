from __future__ import annotations

from diffxml import DiffConfig, diff, parse_xml, serialize
from diffxml.delta import EditScript, decode, encode
from diffxml.nodes import Document, Element
from diffxml.patch import apply_patch


def root(xml: str) -> Element:
    return parse_xml(xml).document_element


def diff_text(a: str, b: str, config: DiffConfig | None = None) -> EditScript:
    return diff(parse_xml(a), parse_xml(b), config)


def patched(a: str, script: EditScript | str) -> Document:
    return apply_patch(parse_xml(a), script)


def roundtrip(a: str, b: str, config: DiffConfig | None = None) -> Document:
    """Diff, go through the wire format, and patch a fresh copy of ``a``."""
    script = decode(encode(diff_text(a, b, config)))
    return patched(a, script)


def values(parent: Element) -> list:
    return [getattr(n, "value", None) for n in parent.children]


def xml_of(doc: Document) -> str:
    return serialize(doc)
