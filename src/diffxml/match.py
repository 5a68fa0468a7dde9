# -*- coding: utf-8 -*-
"""
Fast match: pairs up equal nodes of two documents.

Deepest nodes are matched first.  For every node of the original document
the first still unmatched equal node of the modified document wins; there
is no attempt to pick the "nearest" candidate when several are equal.
"""
import logging

from .config import DiffConfig
from .nodes import NodeKind, depth
from .pairs import NodePairs

log = logging.getLogger(__name__)


def _depth_sorted(doc):
    """Preorder node list of ``doc``, stable sorted deepest first."""
    root = doc.document_element
    found = [node for node in doc.iter()
             if node is not doc and node is not root
             and node.kind != NodeKind.DOCTYPE]
    found.sort(key=lambda node: -depth(node))
    return found


def _attribute_map(element):
    return dict(((a.namespace, a.name), a.value)
                for a in element.content_attributes())


def compare_elements(a, b):
    """
    Same namespace URI, same local name and the same attributes, ignoring
    namespace declarations and prefixes.
    """
    return (a.namespace == b.namespace and a.name == b.name
            and _attribute_map(a) == _attribute_map(b))


def _comparable_text(s, config):
    if config.ignore_all_whitespace:
        s = ''.join(s.split())
    elif config.ignore_leading_whitespace:
        s = s.strip()
    if config.ignore_case:
        s = s.lower()
    return s


def compare_text(a, b, config=None):
    config = config or DiffConfig()
    return _comparable_text(a.value, config) == _comparable_text(b.value, config)


def compare_nodes(a, b, config=None):
    if a.kind != b.kind:
        return False
    kind = a.kind
    if kind == NodeKind.DOCUMENT:
        return True
    if kind == NodeKind.ELEMENT:
        return compare_elements(a, b)
    if kind in (NodeKind.TEXT, NodeKind.CDATA):
        return compare_text(a, b, config)
    if kind == NodeKind.PROCESSING_INSTRUCTION:
        return a.target == b.target and a.value == b.value
    if kind == NodeKind.ATTRIBUTE:
        return (a.namespace == b.namespace and a.name == b.name
                and a.value == b.value)
    return a.value == b.value


def match_documents(doc1, doc2, config=None):
    """
    Match ``doc1`` against ``doc2``.

    Both document elements are normalized first.  The documents and their
    document elements are always paired.  DOCTYPE nodes are removed from
    both documents.
    """
    config = config or DiffConfig()
    pairs = NodePairs()
    root1 = doc1.document_element
    root2 = doc2.document_element
    for root in (root1, root2):
        if root is not None:
            root.normalize()

    pairs.add(doc1, doc2)
    if root1 is not None and root2 is not None:
        pairs.add(root1, root2)

    # DOCTYPEs cannot be addressed by a locator, so they leave the diff here
    for doc in (doc1, doc2):
        doctype = doc.doctype
        if doctype is not None:
            doc.remove(doctype)

    candidates = _depth_sorted(doc2)
    for a in _depth_sorted(doc1):
        for i, b in enumerate(candidates):
            if compare_nodes(a, b, config):
                pairs.add(a, b)
                del candidates[i]
                log.debug('matched %r with %r', a, b)
                break
    log.debug('%d nodes matched', len(pairs))
    return pairs
