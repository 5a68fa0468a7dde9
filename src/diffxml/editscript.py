# -*- coding: utf-8 -*-
"""
Edit script construction (FMES).

The modified document is walked breadth first.  Each node is inserted,
updated or moved in the original document until both trees agree, and the
children of every visited pair are re-aligned with a longest common
subsequence.  Whatever is left unmatched in the original is deleted at the
end, bottom up.  Every change applied to the original is recorded, so the
resulting script replays the same steps.
"""
import logging
from collections import deque

from .config import DiffConfig
from .delta import DeltaRecorder
from .match import compare_elements
from .nodes import NodeKind, ParentNode, is_text_like
from .pairs import InOrder
from .position import find_position

log = logging.getLogger(__name__)


def common_sequence(kids, others, pairs):
    """Children in ``kids`` whose partner is one of ``others``, in order."""
    other_ids = set(n.nid for n in others)
    return [n for n in kids
            if pairs.is_matched(n) and pairs.partner(n).nid in other_ids]


def lcs(seq1, seq2, pairs):
    """
    Longest common subsequence of two partner sequences, as nodes of
    ``seq1``.  On ties the backtrack steps through ``seq2`` first.
    """
    n, m = len(seq1), len(seq2)
    num = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        for j in range(1, m + 1):
            if pairs.partner(seq1[i - 1]) is seq2[j - 1]:
                num[i][j] = num[i - 1][j - 1] + 1
            else:
                num[i][j] = max(num[i][j - 1], num[i - 1][j])

    result = []
    i, j = n, m
    while i > 0 and j > 0:
        if pairs.partner(seq1[i - 1]) is seq2[j - 1]:
            result.append(seq1[i - 1])
            i -= 1
            j -= 1
        elif num[i][j - 1] >= num[i - 1][j]:
            j -= 1
        else:
            i -= 1
    result.reverse()
    return result


class EditScriptBuilder(object):
    """
    Turns ``doc1`` into ``doc2`` and records how.

    ``doc1`` is modified in place; callers that need the original keep a
    copy.  ``pairs`` comes from :func:`diffxml.match.match_documents` and is
    updated as nodes are inserted.
    """

    def __init__(self, doc1, doc2, pairs, config=None):
        self.doc1 = doc1
        self.doc2 = doc2
        self.pairs = pairs
        self.config = config or DiffConfig()
        self.in_order = InOrder()
        self.delta = DeltaRecorder(self.config)

    def is_banned(self, node):
        """Nodes the active ignore options keep out of the edit script."""
        config = self.config
        if config.ignore_whitespace_nodes and is_text_like(node) \
                and not node.value.strip():
            return True
        if config.ignore_comments and node.kind == NodeKind.COMMENT:
            return True
        if config.ignore_processing_instructions \
                and node.kind == NodeKind.PROCESSING_INSTRUCTION:
            return True
        return False

    def _visible_children(self, node):
        if not isinstance(node, ParentNode):
            return []
        return [c for c in node.children if not self.is_banned(c)]

    def create(self):
        fifo = deque(self._visible_children(self.doc2))
        root2 = self.doc2.document_element
        self.align_children(self.doc1, self.doc2)

        while fifo:
            x = fifo.popleft()
            fifo.extend(self._visible_children(x))
            y = x.parent
            z = self.pairs.partner(y)
            w = self.pairs.partner(x)
            if w is None:
                w = self.do_insert(x, z)
            elif x is root2 and not compare_elements(w, x):
                w = self.do_update(w, x)
            elif z is not w.parent:
                self.do_move(w, x, z)
            if isinstance(x, ParentNode):
                self.align_children(w, x)

        self.delete_phase(self.doc1)
        script = self.delta.build()
        log.debug('edit script has %d operations', len(script))
        return script

    def do_insert(self, x, z):
        if x.kind == NodeKind.DOCTYPE:
            raise ValueError('DOCTYPE nodes cannot be inserted')
        pos = find_position(x, self.pairs, self.in_order)
        w = x.shallow_copy()
        self.in_order.mark(w, x)
        self.delta.insert(w, z, pos.xpath, pos.charpos)
        z.insert(pos.dom, w)
        self.pairs.add(w, x)
        return w

    def do_update(self, w, x):
        """Replace document element ``w`` by one named and attributed like ``x``."""
        self.delta.update(w, x)
        new_w = x.shallow_copy()
        while w.children:
            new_w.append(w.children[0])
        w.parent.replace(w, new_w)
        self.pairs.remove(w)
        self.pairs.add(new_w, x)
        return new_w

    def do_move(self, w, x, z):
        if w.kind == NodeKind.DOCTYPE:
            raise ValueError('DOCTYPE nodes cannot be moved')
        assert w.parent is not z
        pos = find_position(x, self.pairs, self.in_order)
        self.in_order.mark(w, x)
        self.delta.move(w, z, pos.xpath, pos.charpos)
        z.insert(pos.dom, w)

    def align_children(self, w, x):
        self.in_order.mark_children(w, False)
        self.in_order.mark_children(x, False)
        w_seq = common_sequence(w.children, x.children, self.pairs)
        x_seq = common_sequence(x.children, w.children, self.pairs)
        stay = lcs(w_seq, x_seq, self.pairs)
        for node in stay:
            self.in_order.mark(node, self.pairs.partner(node))

        stay_ids = set(n.nid for n in stay)
        for a in w_seq:
            if a.nid in stay_ids:
                continue
            b = self.pairs.partner(a)
            pos = find_position(b, self.pairs, self.in_order)
            self.delta.move(a, w, pos.xpath, pos.charpos)
            w.insert(pos.dom, a)
            self.in_order.mark(a, b)

        self.in_order.mark_children(w)
        self.in_order.mark_children(x)

    def delete_phase(self, node):
        if isinstance(node, ParentNode):
            for child in reversed(list(node.children)):
                self.delete_phase(child)
        if not self.pairs.is_matched(node) and node.kind != NodeKind.DOCTYPE \
                and not self.is_banned(node):
            self.delta.delete(node)
            node.parent.remove(node)
