# -*- coding: utf-8 -*-
"""
Applies an edit script to a document.

Operations are replayed in order against the live tree.  The tree is
normalized before each one so that locators see the same text runs the
differ saw when it recorded them.
"""
import logging

from .config import DiffConfig
from .delta import EditScript, decode, encode_operation
from .exceptions import PatchFormatError
from .locator import resolve
from .nodes import (
    NodeKind, Element, Attribute, Text, CDATA, Comment, ProcessingInstruction,
    ParentNode, is_text_like, is_empty_text,
)
from .textrun import TextRun

log = logging.getLogger(__name__)


def _split_qname(qname):
    if ':' in qname:
        prefix, local = qname.split(':', 1)
        return prefix, local
    return None, qname


def dom_child_index(parent, childno):
    """
    DOM index of the ``childno``-th XPath child of ``parent``; one past the
    last child when ``childno`` is just after the end.
    """
    if childno < 1:
        raise PatchFormatError('Child number must be >= 1')
    xpath = 0
    prev = None
    for i, child in enumerate(parent.children):
        if is_empty_text(child) or child.kind == NodeKind.DOCTYPE:
            continue
        if not (is_text_like(child) and is_text_like(prev)):
            xpath += 1
        if xpath == childno:
            return i
        prev = child
    if childno == xpath + 1:
        return len(parent.children)
    raise PatchFormatError('Child number past end of nodes')


def place(parent, index, node, charpos=None):
    """
    Put ``node`` at DOM ``index`` of ``parent``.  Right after text, the
    character position picks the spot inside the text run.
    """
    if parent.kind not in (NodeKind.ELEMENT, NodeKind.DOCUMENT):
        raise PatchFormatError('Parent must be an element or the document')
    if index > 0 and is_text_like(parent.children[index - 1]):
        run = TextRun.ending_before(parent, index)
        return run.insert(charpos or 1, node)
    return parent.insert(index, node)


def _is_ancestor_or_self(node, other):
    while other is not None:
        if other is node:
            return True
        other = other.parent
    return False


class PatchApplier(object):
    """
    Replays edit scripts on ``document``, which is modified in place.

    Any failure is reported as a PatchFormatError naming the operation that
    could not be applied; operations before it stay applied.
    """

    def __init__(self, document, config=None):
        self.document = document
        self.config = config or DiffConfig()

    def apply(self, script):
        if not isinstance(script, EditScript):
            script = decode(script)
        for op in script:
            self.document.normalize()
            log.debug('applying %s', encode_operation(op))
            handler = getattr(self, 'do_' + op.tag)
            try:
                handler(op)
            except PatchFormatError as e:
                raise PatchFormatError('Error at operation: %s: %s'
                                       % (encode_operation(op), e)) from e
        self.document.normalize()
        return self.document

    def _resolve(self, path):
        return resolve(self.document, path)

    def _new_node(self, op):
        kind = op.nodetype
        value = op.value or ''
        if kind == NodeKind.ELEMENT:
            if not op.name:
                raise PatchFormatError('Element insert needs a name')
            prefix, local = _split_qname(op.name)
            return Element(local, op.namespace, prefix)
        if kind == NodeKind.TEXT:
            return Text(value)
        if kind == NodeKind.CDATA:
            return CDATA(value)
        if kind == NodeKind.COMMENT:
            return Comment(value)
        if kind == NodeKind.PROCESSING_INSTRUCTION:
            if not op.name:
                raise PatchFormatError('Processing instruction insert needs a name')
            return ProcessingInstruction(op.name, value)
        raise PatchFormatError('Cannot insert node of type %d' % kind)

    def do_insert(self, op):
        parent = self._resolve(op.parent)
        if op.nodetype == NodeKind.ATTRIBUTE:
            if parent.kind != NodeKind.ELEMENT:
                raise PatchFormatError('Attributes can only be added to elements')
            if not op.name:
                raise PatchFormatError('Attribute insert needs a name')
            prefix, local = _split_qname(op.name)
            parent.add_attribute(Attribute(local, op.value or '', op.namespace,
                                           prefix))
            return
        if not isinstance(parent, ParentNode):
            raise PatchFormatError('Parent must be an element or the document')
        node = self._new_node(op)
        index = dom_child_index(parent, op.childno or 1)
        place(parent, index, node, op.charpos)

    def do_delete(self, op):
        node = self._resolve(op.node)
        if node.kind == NodeKind.ATTRIBUTE:
            node.detach()
        elif is_text_like(node):
            run = TextRun.starting_at(node)
            run.excise(op.charpos or 1, op.length)
            run.merge_adjacent()
        elif node.kind in (NodeKind.DOCUMENT, NodeKind.DOCTYPE):
            raise PatchFormatError('Cannot delete node of type %d' % node.kind)
        else:
            node.detach()

    def do_move(self, op):
        node = self._resolve(op.node)
        parent = self._resolve(op.parent)
        if node.kind in (NodeKind.ATTRIBUTE, NodeKind.DOCUMENT,
                         NodeKind.DOCTYPE):
            raise PatchFormatError('Cannot move node of type %d' % node.kind)
        if not isinstance(parent, ParentNode):
            raise PatchFormatError('Parent must be an element or the document')
        if _is_ancestor_or_self(node, parent):
            raise PatchFormatError('Cannot move a node inside itself')

        if is_text_like(node):
            run = TextRun.starting_at(node)
            node = run.excise(op.old_charpos or 1, op.length)
            run.merge_adjacent()
        else:
            node.detach()
        index = dom_child_index(parent, op.childno)
        place(parent, index, node, op.new_charpos)

    def do_update(self, op):
        node = self._resolve(op.node)
        if node.kind == NodeKind.ELEMENT:
            prefix, local = _split_qname(op.value)
            if not local:
                raise PatchFormatError('Element update needs a name')
            new = Element(local, op.namespace, prefix,
                          [a.shallow_copy() for a in node.attributes])
            while node.children:
                new.append(node.children[0])
            node.parent.replace(node, new)
        elif node.kind in (NodeKind.DOCUMENT, NodeKind.DOCTYPE):
            raise PatchFormatError('Cannot update node of type %d' % node.kind)
        else:
            node.value = op.value


def apply_patch(document, script, config=None):
    """Apply ``script`` (an EditScript or DUL text) to ``document`` in place."""
    return PatchApplier(document, config).apply(script)
