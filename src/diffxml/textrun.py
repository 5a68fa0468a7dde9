# -*- coding: utf-8 -*-
"""
Text runs: maximal sequences of adjacent Text/CDATA siblings.

Deltas address text by the first node of a run plus a 1-based character
offset into the whole run, so every text edit of the patcher goes through
the primitives here.
"""
from .exceptions import PatchFormatError
from .nodes import NodeKind, is_text_like, make_text


class TextRun(object):
    """
    The run that starts at ``parent.children[start]``.

    The node list is read from the parent on every access, so the run stays
    valid while its nodes are split or removed.

    >>> from diffxml.parser import parse_xml
    >>> a = parse_xml('<a>text1<![CDATA[text2]]>text3</a>').document_element
    >>> run = TextRun.starting_at(a.children[1])
    >>> run.text, run.length
    ('text1text2text3', 15)
    >>> run.excise(3, 4).value
    'xt1t'
    >>> [n.value for n in run.nodes]
    ['te', 'ext2', 'text3']
    """

    def __init__(self, parent, start):
        self.parent = parent
        self.start = start

    @classmethod
    def starting_at(cls, node):
        """The run containing ``node``, starting at its first node."""
        if not is_text_like(node):
            raise PatchFormatError('Attempt to delete text from non-text node.')
        siblings = node.parent.children
        i = node.parent.index(node)
        while i > 0 and is_text_like(siblings[i - 1]):
            i -= 1
        return cls(node.parent, i)

    @classmethod
    def ending_before(cls, parent, index):
        """The run that contains ``parent.children[index - 1]``."""
        return cls.starting_at(parent.children[index - 1])

    @property
    def nodes(self):
        run = []
        for node in self.parent.children[self.start:]:
            if not is_text_like(node):
                break
            run.append(node)
        return run

    @property
    def text(self):
        return ''.join(n.value for n in self.nodes)

    @property
    def length(self):
        return sum(len(n.value) for n in self.nodes)

    def end_index(self):
        return self.start + len(self.nodes)

    def locate(self, offset):
        """Return ``(node, index)`` of the character at ``offset``."""
        if offset < 1:
            raise PatchFormatError('charpos must be >= 1')
        cp = offset
        for node in self.nodes:
            if cp <= len(node.value):
                return node, cp - 1
            cp -= len(node.value)
        raise PatchFormatError('charpos not within text')

    def split_at(self, offset):
        """
        Split so that ``offset`` starts a node; return that node's index in
        the parent (one past the run when ``offset`` is just after the end).
        """
        if offset < 1:
            raise PatchFormatError('charpos must be >= 1')
        if offset == self.length + 1:
            return self.end_index()
        if offset > self.length:
            raise PatchFormatError('charpos past end of text')
        node, i = self.locate(offset)
        if i == 0:
            return self.parent.index(node)
        right = make_text(node.kind, node.value[i:])
        node.value = node.value[:i]
        index = self.parent.index(node) + 1
        self.parent.insert(index, right)
        return index

    def insert(self, offset, node):
        """
        Place ``node`` at ``offset``.  CDATA going into the middle of CDATA is
        merged into it instead of splitting.
        """
        if node.kind == NodeKind.CDATA and 1 < offset <= self.length:
            target, i = self.locate(offset)
            if target.kind == NodeKind.CDATA and i > 0:
                target.value = target.value[:i] + node.value + target.value[i:]
                return target
        index = self.split_at(offset)
        return self.parent.insert(index, node)

    def excise(self, offset, length=None):
        """
        Remove ``length`` characters at ``offset`` (default: to the end of
        the run) and return them as a detached node of the kind of the node
        the deletion starts in.  Emptied nodes are dropped.
        """
        if offset < 1:
            raise PatchFormatError('charpos must be >= 1')
        total = self.length
        if offset > total and not (offset == 1 and total == 0):
            raise PatchFormatError('charpos not within text')
        if length is None:
            length = total - offset + 1
        if length < 0:
            raise PatchFormatError('length must be >= 0')
        if offset + length - 1 > total:
            raise PatchFormatError('length past end of text')

        kind = None
        deleted = []
        cp = offset
        remaining = length
        for node in self.nodes:
            size = len(node.value)
            if cp > size:
                cp -= size
                continue
            if kind is None:
                kind = node.kind
            start = cp - 1
            end = min(size, start + remaining)
            deleted.append(node.value[start:end])
            remaining -= end - start
            node.value = node.value[:start] + node.value[end:]
            cp = 1
            if not node.value:
                self.parent.remove(node)
            if remaining == 0:
                break
        return make_text(kind or self.nodes[0].kind, ''.join(deleted))

    def merge_adjacent(self):
        """Coalesce neighbouring plain Text nodes and drop empty ones."""
        prev = None
        for node in self.nodes:
            if node.kind == NodeKind.TEXT and not node.value:
                self.parent.remove(node)
                continue
            if prev is not None and prev.kind == NodeKind.TEXT \
                    and node.kind == NodeKind.TEXT:
                prev.value += node.value
                self.parent.remove(node)
                continue
            prev = node

    def __repr__(self):
        return '<TextRun %r>' % self.text
