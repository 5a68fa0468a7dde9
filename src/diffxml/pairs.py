# -*- coding: utf-8 -*-
"""
Side tables for a diff run: match partners and the in-order flag.

Both are keyed by ``Node.nid`` and live only as long as one edit script is
being built.
"""


class NodePairs(object):
    """
    One-to-one matching between the nodes of two trees.

    ``len()`` counts matched nodes, so every pair contributes two.
    """

    def __init__(self):
        self._partners = {}
        self._nodes = {}

    def add(self, a, b):
        if a is None or b is None:
            raise ValueError('Cannot pair with None')
        self.remove(a)
        self.remove(b)
        self._partners[a.nid] = b.nid
        self._partners[b.nid] = a.nid
        self._nodes[a.nid] = a
        self._nodes[b.nid] = b

    def remove(self, node):
        other = self._partners.pop(node.nid, None)
        self._nodes.pop(node.nid, None)
        if other is not None:
            self._partners.pop(other, None)
            self._nodes.pop(other, None)

    def partner(self, node):
        if node is None:
            return None
        other = self._partners.get(node.nid)
        return self._nodes[other] if other is not None else None

    def is_matched(self, node):
        return node.nid in self._partners

    def __contains__(self, node):
        return self.is_matched(node)

    def __len__(self):
        return len(self._partners)

    def __repr__(self):
        return '<NodePairs %d pairs>' % (len(self) // 2)


class InOrder(object):
    """Per node in-order flag.  Nodes never marked count as in order."""

    def __init__(self):
        self._flags = {}

    def is_in_order(self, node):
        return self._flags.get(node.nid, True)

    __call__ = is_in_order

    def mark(self, *nodes):
        for node in nodes:
            if node is not None:
                self._flags[node.nid] = True

    def mark_out(self, *nodes):
        for node in nodes:
            if node is not None:
                self._flags[node.nid] = False

    def mark_children(self, parent, in_order=True):
        for child in parent.children:
            self._flags[child.nid] = in_order
