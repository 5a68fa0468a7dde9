# -*- coding: utf-8 -*-
"""
Edit scripts and their DUL encoding.

An :class:`EditScript` is an immutable, ordered list of :class:`Insert`,
:class:`Delete`, :class:`Move` and :class:`Update` operations.  It is only
valid when replayed front to back.  :func:`encode` and :func:`decode`
convert it to and from the DUL delta document::

    <delta xmlns="http://www.adrianmouat.com/dul">
      <insert parent="/node()[1]" nodetype="1" childno="2" name="c"/>
      <delete node="/node()[1]/node()[1]"/>
    </delta>
"""
import logging
from collections import namedtuple

from lxml import etree

from .config import (
    DiffConfig, DUL_NAMESPACE, DELTA, INSERT, DELETE, MOVE, UPDATE,
    PARENT, NODE, NODETYPE, CHILDNO, NAME, NAMESPACE, CHARPOS, OLD_CHARPOS,
    NEW_CHARPOS, LENGTH, SIBLING_CONTEXT, PARENT_CONTEXT,
    PARENT_SIBLING_CONTEXT, REVERSE_PATCH, RESOLVE_ENTITIES, TRUE, FALSE,
)
from .exceptions import PatchFormatError
from .locator import get_xpath
from .nodes import NodeKind, is_text_like
from .position import char_offset

log = logging.getLogger(__name__)


def _attrs(*pairs):
    return [(k, v if isinstance(v, str) else str(v))
            for k, v in pairs if v is not None]


class Insert(namedtuple('Insert', 'parent nodetype childno name namespace '
                                  'charpos value')):
    __slots__ = ()
    tag = INSERT

    def __new__(cls, parent, nodetype, childno=None, name=None, namespace=None,
                charpos=None, value=None):
        return super().__new__(cls, parent, nodetype, childno, name,
                               namespace, charpos, value)

    @property
    def payload(self):
        return self.value

    def to_attributes(self):
        charpos = self.charpos if self.charpos and self.charpos > 1 else None
        return _attrs((PARENT, self.parent), (NODETYPE, int(self.nodetype)),
                      (CHILDNO, self.childno), (NAME, self.name),
                      (NAMESPACE, self.namespace), (CHARPOS, charpos))


class Delete(namedtuple('Delete', 'node charpos length')):
    __slots__ = ()
    tag = DELETE
    payload = None

    def __new__(cls, node, charpos=None, length=None):
        return super().__new__(cls, node, charpos, length)

    def to_attributes(self):
        return _attrs((NODE, self.node), (CHARPOS, self.charpos),
                      (LENGTH, self.length))


class Move(namedtuple('Move', 'node parent childno old_charpos new_charpos '
                              'length')):
    __slots__ = ()
    tag = MOVE
    payload = None

    def __new__(cls, node, parent, childno, old_charpos=1, new_charpos=1,
                length=None):
        return super().__new__(cls, node, parent, childno, old_charpos,
                               new_charpos, length)

    def to_attributes(self):
        return _attrs((NODE, self.node), (OLD_CHARPOS, self.old_charpos),
                      (NEW_CHARPOS, self.new_charpos), (LENGTH, self.length),
                      (PARENT, self.parent), (CHILDNO, self.childno))


class Update(namedtuple('Update', 'node value namespace')):
    __slots__ = ()
    tag = UPDATE

    def __new__(cls, node, value, namespace=None):
        return super().__new__(cls, node, value, namespace)

    @property
    def payload(self):
        return self.value

    def to_attributes(self):
        return _attrs((NODE, self.node), (NAMESPACE, self.namespace))


class EditScript(object):
    """
    Ordered operations plus the metadata written on the delta root.

    ``context`` is ``None`` or a ``(sibling, parent, parent_sibling)``
    triple.  None of the metadata changes how the script is applied.
    """

    def __init__(self, operations=(), reverse_patch=False,
                 resolve_entities=True, context=None):
        self._operations = tuple(operations)
        self.reverse_patch = reverse_patch
        self.resolve_entities = resolve_entities
        self.context = tuple(context) if context is not None else None

    @classmethod
    def from_config(cls, operations, config):
        context = None
        if config.context:
            context = (config.sibling_context, config.parent_context,
                       config.parent_sibling_context)
        return cls(operations, reverse_patch=config.reverse_patch,
                   resolve_entities=config.resolve_entities, context=context)

    @property
    def operations(self):
        return self._operations

    @property
    def is_empty(self):
        return not self._operations

    def __iter__(self):
        return iter(self._operations)

    def __len__(self):
        return len(self._operations)

    def __getitem__(self, index):
        return self._operations[index]

    def __eq__(self, other):
        if not isinstance(other, EditScript):
            return NotImplemented
        return (self._operations == other._operations
                and self.reverse_patch == other.reverse_patch
                and self.resolve_entities == other.resolve_entities
                and self.context == other.context)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '<EditScript %d operations>' % len(self)


def _child_path(parent_path, childno):
    if parent_path == '/':
        return '/node()[%d]' % childno
    return '%s/node()[%d]' % (parent_path, childno)


class DeltaRecorder(object):
    """Builds operations from live nodes while an edit script is created."""

    def __init__(self, config=None):
        self.config = config or DiffConfig()
        self.operations = []

    def _add(self, op):
        self.operations.append(op)
        log.debug('recorded %s', op)
        return op

    def insert(self, node, parent, childno, charpos=1):
        """Record the insertion of ``node`` (not yet attached) under ``parent``."""
        parent_path = parent if isinstance(parent, str) else get_xpath(parent)
        kind = node.kind
        name = namespace = None
        if kind in (NodeKind.ELEMENT, NodeKind.ATTRIBUTE):
            name, namespace = node.qname, node.namespace
        elif kind == NodeKind.PROCESSING_INSTRUCTION:
            name = node.target
        if kind == NodeKind.ATTRIBUTE:
            childno = None
        op = self._add(Insert(parent_path, int(kind), childno, name, namespace,
                              charpos if charpos > 1 else None, node.value))
        if kind == NodeKind.ELEMENT:
            path = _child_path(parent_path, childno)
            for attr in node.content_attributes():
                self.insert(attr, path, 0)
        return op

    def delete(self, node):
        charpos = length = None
        if is_text_like(node):
            charpos = char_offset(node)
            length = len(node.value)
        return self._add(Delete(get_xpath(node), charpos, length))

    def move(self, node, parent, childno, new_charpos):
        if new_charpos < 1:
            raise ValueError('New character position must be >= 1')
        length = len(node.value) if is_text_like(node) else None
        return self._add(Move(get_xpath(node), get_xpath(parent), childno,
                              char_offset(node), new_charpos, length))

    def update(self, w, x):
        """Record that ``w`` takes the name and attributes, or value, of ``x``."""
        if w.kind == NodeKind.ELEMENT:
            op = self._add(Update(get_xpath(w), x.qname, x.namespace))
            self._update_attributes(w, x)
            return op
        return self._add(Update(get_xpath(w), x.value))

    def _update_attributes(self, w, x):
        for attr in w.content_attributes():
            other = x.get_attribute(attr.name, attr.namespace)
            if other is None:
                self.delete(attr)
            elif other.value != attr.value:
                self.update(attr, other)
        for attr in x.content_attributes():
            if w.get_attribute(attr.name, attr.namespace) is None:
                self.insert(attr, w, 0)

    def build(self):
        return EditScript.from_config(self.operations, self.config)


def _dul(tag):
    return '{%s}%s' % (DUL_NAMESPACE, tag)


def to_element(script):
    """The delta as an lxml element."""
    root = etree.Element(_dul(DELTA), nsmap={None: DUL_NAMESPACE})
    if script.context is not None:
        sibling, parent, parent_sibling = script.context
        root.set(SIBLING_CONTEXT, str(sibling))
        root.set(PARENT_CONTEXT, str(parent))
        root.set(PARENT_SIBLING_CONTEXT, str(parent_sibling))
    if script.reverse_patch:
        root.set(REVERSE_PATCH, TRUE)
    if not script.resolve_entities:
        root.set(RESOLVE_ENTITIES, FALSE)
    for op in script:
        el = etree.SubElement(root, _dul(op.tag))
        for name, value in op.to_attributes():
            el.set(name, value)
        if op.payload is not None:
            el.text = op.payload
    return root


def encode(script, pretty_print=True):
    """
    Serialize ``script`` as a DUL delta document.

    >>> print(encode(EditScript([Delete('/node()[1]/node()[2]')])).strip())
    <delta xmlns="http://www.adrianmouat.com/dul">
      <delete node="/node()[1]/node()[2]"/>
    </delta>
    """
    return etree.tostring(to_element(script), pretty_print=pretty_print,
                          encoding='unicode')


def encode_operation(op):
    el = etree.Element(op.tag)
    for name, value in op.to_attributes():
        el.set(name, value)
    if op.payload is not None:
        el.text = op.payload
    return etree.tostring(el, encoding='unicode')


def _get(el, name, required=False):
    value = el.get(name)
    if value is None and required:
        raise PatchFormatError('%s operation is missing the %s attribute'
                               % (etree.QName(el).localname, name))
    return value


def _get_int(el, name, required=False, default=None, minimum=0):
    raw = _get(el, name, required)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise PatchFormatError('Invalid %s attribute: %r' % (name, raw))
    if value < minimum:
        raise PatchFormatError('%s must be >= %d, got %d'
                               % (name, minimum, value))
    return value


def _read_insert(el):
    nodetype = _get_int(el, NODETYPE, required=True)
    try:
        nodetype = NodeKind(nodetype)
    except ValueError:
        raise PatchFormatError('Unknown NodeType %d' % nodetype)
    return Insert(_get(el, PARENT, required=True), nodetype,
                  _get_int(el, CHILDNO, minimum=1), _get(el, NAME),
                  _get(el, NAMESPACE), _get_int(el, CHARPOS, minimum=1),
                  el.text)


def _read_delete(el):
    return Delete(_get(el, NODE, required=True),
                  _get_int(el, CHARPOS, minimum=1),
                  _get_int(el, LENGTH, minimum=0))


def _read_move(el):
    return Move(_get(el, NODE, required=True), _get(el, PARENT, required=True),
                _get_int(el, CHILDNO, required=True, minimum=1),
                _get_int(el, OLD_CHARPOS, default=1, minimum=1),
                _get_int(el, NEW_CHARPOS, default=1, minimum=1),
                _get_int(el, LENGTH, minimum=0))


def _read_update(el):
    return Update(_get(el, NODE, required=True), el.text or '',
                  _get(el, NAMESPACE))


_readers = {
    INSERT: _read_insert,
    DELETE: _read_delete,
    MOVE: _read_move,
    UPDATE: _read_update,
}


def from_element(root):
    """Build an EditScript from a parsed delta root element."""
    if etree.QName(root).localname != DELTA:
        raise PatchFormatError('All deltas must begin with a %s element.'
                               % DELTA)
    operations = []
    for el in root:
        if not isinstance(el.tag, str):
            continue
        tag = etree.QName(el).localname
        reader = _readers.get(tag)
        if reader is None:
            raise PatchFormatError('Invalid element: %s' % tag)
        if len(el):
            raise PatchFormatError('Operation %s may only contain text' % tag)
        operations.append(reader(el))

    context = None
    if any(root.get(n) is not None for n in
           (SIBLING_CONTEXT, PARENT_CONTEXT, PARENT_SIBLING_CONTEXT)):
        context = (_get_int(root, SIBLING_CONTEXT, default=2),
                   _get_int(root, PARENT_CONTEXT, default=1),
                   _get_int(root, PARENT_SIBLING_CONTEXT, default=0))
    return EditScript(operations,
                      reverse_patch=root.get(REVERSE_PATCH) == TRUE,
                      resolve_entities=root.get(RESOLVE_ENTITIES) != FALSE,
                      context=context)


def decode(data):
    """Parse a DUL delta document (text or bytes) into an EditScript."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    parser = etree.XMLParser(resolve_entities=False, remove_comments=True,
                             remove_pis=True, no_network=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        raise PatchFormatError('Invalid delta document: %s' % e) from e
    return from_element(root)
