# -*- coding: utf-8 -*-
"""
Tree model used by the differ and the patcher.

Nodes are small mutable objects with a parent back reference and a
process-unique ``nid``.  Everything the algorithms need to remember about a
node (partner, in-order flag) is kept in side tables keyed by ``nid``, never
on the node itself.
"""
import itertools
from enum import IntEnum

from .config import XMLNS_NAMESPACE

_node_ids = itertools.count(1)


class NodeKind(IntEnum):
    """Node kind codes, as written in the ``nodetype`` attribute of a delta."""
    ELEMENT = 1
    ATTRIBUTE = 2
    TEXT = 3
    CDATA = 4
    PROCESSING_INSTRUCTION = 7
    COMMENT = 8
    DOCUMENT = 9
    DOCTYPE = 10


TEXT_KINDS = frozenset([NodeKind.TEXT, NodeKind.CDATA])


def is_text_like(node):
    """Text and CDATA share character positions and coalesce into runs."""
    return node is not None and node.kind in TEXT_KINDS


def is_empty_text(node):
    """Only plain Text can be empty for numbering purposes; empty CDATA counts."""
    return node.kind == NodeKind.TEXT and not node.value


def depth(node):
    d = 0
    while node.parent is not None:
        d += 1
        node = node.parent
    return d


class Node(object):
    kind = None
    value = None

    def __init__(self):
        self.nid = next(_node_ids)
        self.parent = None

    @property
    def previous_sibling(self):
        if self.parent is None or self.kind == NodeKind.ATTRIBUTE:
            return None
        i = self.parent.index(self)
        return self.parent.children[i - 1] if i > 0 else None

    @property
    def next_sibling(self):
        if self.parent is None or self.kind == NodeKind.ATTRIBUTE:
            return None
        siblings = self.parent.children
        i = self.parent.index(self)
        return siblings[i + 1] if i + 1 < len(siblings) else None

    def detach(self):
        if self.parent is not None:
            if self.kind == NodeKind.ATTRIBUTE:
                self.parent.remove_attribute(self)
            else:
                self.parent.remove(self)
        return self

    def shallow_copy(self):
        raise NotImplementedError

    def clone(self):
        return self.shallow_copy()

    def __repr__(self):
        return '<%s #%d %r>' % (type(self).__name__, self.nid, self.value)


class ParentNode(Node):
    """A node that owns an ordered list of children (Document and Element)."""

    def __init__(self):
        super().__init__()
        self.children = []

    def index(self, node):
        for i, child in enumerate(self.children):
            if child is node:
                return i
        raise ValueError('%r is not a child of %r' % (node, self))

    def append(self, node):
        return self.insert(len(self.children), node)

    def insert(self, index, node):
        """
        Insert ``node`` at ``index``.  A node that already has a parent is
        detached first, so ``index`` refers to the list after detaching.
        """
        node.detach()
        node.parent = self
        self.children.insert(index, node)
        return node

    def remove(self, node):
        del self.children[self.index(node)]
        node.parent = None
        return node

    def replace(self, old, new):
        new.detach()
        i = self.index(old)
        self.children[i] = new
        old.parent = None
        new.parent = self
        return old

    def iter(self):
        """Preorder walk over this node and its descendants (no attributes)."""
        yield self
        for child in self.children:
            if isinstance(child, ParentNode):
                for node in child.iter():
                    yield node
            else:
                yield child

    def normalize(self):
        """Merge adjacent Text nodes and drop empty ones, recursively."""
        merged = []
        for child in self.children:
            if child.kind == NodeKind.TEXT:
                if not child.value:
                    child.parent = None
                    continue
                if merged and merged[-1].kind == NodeKind.TEXT:
                    merged[-1].value += child.value
                    child.parent = None
                    continue
            elif isinstance(child, ParentNode):
                child.normalize()
            merged.append(child)
        self.children[:] = merged

    def clone(self):
        copy = self.shallow_copy()
        for child in self.children:
            copy.append(child.clone())
        return copy


class Document(ParentNode):
    kind = NodeKind.DOCUMENT

    def __init__(self):
        super().__init__()
        # names of entity references kept as ``&name;`` text by the parser
        self.unresolved_entities = set()

    @property
    def document_element(self):
        for child in self.children:
            if child.kind == NodeKind.ELEMENT:
                return child
        return None

    @property
    def doctype(self):
        for child in self.children:
            if child.kind == NodeKind.DOCTYPE:
                return child
        return None

    def shallow_copy(self):
        copy = Document()
        copy.unresolved_entities = set(self.unresolved_entities)
        return copy

    def __repr__(self):
        return '<Document #%d>' % self.nid


def _qname(prefix, name):
    return '%s:%s' % (prefix, name) if prefix else name


class Element(ParentNode):
    kind = NodeKind.ELEMENT

    def __init__(self, name, namespace=None, prefix=None, attributes=None,
                 namespaces=None):
        super().__init__()
        self.name = name
        self.namespace = namespace or None
        self.prefix = prefix or None
        # ordered (prefix, uri) declarations made on this element
        self.namespaces = list(namespaces or ())
        self.attributes = []
        for attr in attributes or ():
            self.add_attribute(attr)

    @property
    def qname(self):
        return _qname(self.prefix, self.name)

    def content_attributes(self):
        return [a for a in self.attributes if not a.is_namespace_declaration]

    def get_attribute(self, name, namespace=None):
        namespace = namespace or None
        for attr in self.attributes:
            if attr.name == name and attr.namespace == namespace:
                return attr
        return None

    def get(self, name, default=None):
        attr = self.get_attribute(name)
        return attr.value if attr is not None else default

    def add_attribute(self, attr):
        attr.detach()
        existing = self.get_attribute(attr.name, attr.namespace)
        if existing is not None:
            self.remove_attribute(existing)
        attr.parent = self
        self.attributes.append(attr)
        return attr

    def set_attribute(self, name, value, namespace=None, prefix=None):
        attr = self.get_attribute(name, namespace)
        if attr is None:
            return self.add_attribute(Attribute(name, value, namespace, prefix))
        attr.value = value
        return attr

    def remove_attribute(self, attr):
        for i, a in enumerate(self.attributes):
            if a is attr:
                del self.attributes[i]
                attr.parent = None
                return attr
        raise ValueError('%r is not an attribute of %r' % (attr, self))

    def shallow_copy(self):
        return Element(self.name, self.namespace, self.prefix,
                       [a.shallow_copy() for a in self.attributes],
                       self.namespaces)

    def __repr__(self):
        return '<Element #%d %s>' % (self.nid, self.qname)


class Attribute(Node):
    kind = NodeKind.ATTRIBUTE

    def __init__(self, name, value, namespace=None, prefix=None):
        super().__init__()
        self.name = name
        self.value = value
        self.namespace = namespace or None
        self.prefix = prefix or None

    @property
    def qname(self):
        return _qname(self.prefix, self.name)

    @property
    def is_namespace_declaration(self):
        return (self.namespace == XMLNS_NAMESPACE or self.name == 'xmlns'
                or self.prefix == 'xmlns')

    def shallow_copy(self):
        return Attribute(self.name, self.value, self.namespace, self.prefix)

    def __repr__(self):
        return '<Attribute #%d %s=%r>' % (self.nid, self.qname, self.value)


class Text(Node):
    kind = NodeKind.TEXT

    def __init__(self, value=''):
        super().__init__()
        self.value = value

    def shallow_copy(self):
        return type(self)(self.value)


class CDATA(Text):
    kind = NodeKind.CDATA


class Comment(Node):
    kind = NodeKind.COMMENT

    def __init__(self, value=''):
        super().__init__()
        self.value = value

    def shallow_copy(self):
        return Comment(self.value)


class ProcessingInstruction(Node):
    kind = NodeKind.PROCESSING_INSTRUCTION

    def __init__(self, target, value=''):
        super().__init__()
        self.target = target
        self.value = value

    @property
    def name(self):
        return self.target

    def shallow_copy(self):
        return ProcessingInstruction(self.target, self.value)

    def __repr__(self):
        return '<ProcessingInstruction #%d %s %r>' % (self.nid, self.target,
                                                      self.value)


class DocType(Node):
    kind = NodeKind.DOCTYPE

    def __init__(self, name, public_id=None, system_id=None,
                 internal_subset=None):
        super().__init__()
        self.name = name
        self.public_id = public_id
        self.system_id = system_id
        # markup between the brackets, kept verbatim
        self.internal_subset = internal_subset

    def shallow_copy(self):
        return DocType(self.name, self.public_id, self.system_id,
                       self.internal_subset)

    def __repr__(self):
        return '<DocType #%d %s>' % (self.nid, self.name)


_KIND_CLASSES = {
    NodeKind.TEXT: Text,
    NodeKind.CDATA: CDATA,
    NodeKind.COMMENT: Comment,
}


def make_text(kind, value):
    """Build a Text, CDATA or Comment node from its kind code."""
    return _KIND_CLASSES[kind](value)
