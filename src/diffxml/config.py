# -*- coding: utf-8 -*-
"""
Configuración y constantes para diffxml.
"""

# Wire format (DUL) names
DUL_NAMESPACE = 'http://www.adrianmouat.com/dul'
DELTA = 'delta'
INSERT = 'insert'
DELETE = 'delete'
MOVE = 'move'
UPDATE = 'update'

PARENT = 'parent'
NODE = 'node'
NODETYPE = 'nodetype'
CHILDNO = 'childno'
NAME = 'name'
NAMESPACE = 'ns'
CHARPOS = 'charpos'
OLD_CHARPOS = 'old_charpos'
NEW_CHARPOS = 'new_charpos'
LENGTH = 'length'

SIBLING_CONTEXT = 'sib_context'
PARENT_CONTEXT = 'par_context'
PARENT_SIBLING_CONTEXT = 'par_sib_context'
REVERSE_PATCH = 'reverse_patch'
RESOLVE_ENTITIES = 'resolve_entities'
TRUE = 'true'
FALSE = 'false'

# Namespaces that are never part of the diffed content
XMLNS_NAMESPACE = 'http://www.w3.org/2000/xmlns/'
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'

VERSION = '0.9.0'


class DiffConfig(object):
    """
    Options for a single diff or patch run.

    Defaults live on the class. Pass keyword arguments to override them; the
    instance cannot be changed afterwards, use :meth:`replace` to derive a new
    one.

    >>> DiffConfig(ignore_case=True).ignore_case
    True
    >>> DiffConfig().replace(sibling_context=4).sibling_context
    4
    """

    # Text comparison
    ignore_all_whitespace = False
    ignore_leading_whitespace = False
    ignore_case = False

    # Nodes never visited in the modified document
    ignore_whitespace_nodes = False
    ignore_comments = False
    ignore_processing_instructions = False

    # Parsing
    resolve_entities = True

    # Only written as metadata on the delta root
    reverse_patch = False
    context = False
    sibling_context = 2
    parent_context = 1
    parent_sibling_context = 0

    _aliases = {
        'ignore_whitespace_only_nodes': 'ignore_whitespace_nodes',
    }
    _context_options = ('sibling_context', 'parent_context',
                        'parent_sibling_context')

    def __init__(self, **options):
        for key, value in options.items():
            key = self._aliases.get(key, key)
            if key.startswith('_') or not hasattr(type(self), key) \
                    or callable(getattr(type(self), key)):
                raise TypeError('Unknown diff option %r' % key)
            if key in self._context_options and value < 0:
                raise ValueError('%s must be >= 0, got %r' % (key, value))
            object.__setattr__(self, key, value)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError('DiffConfig is read-only, use replace()')
        object.__setattr__(self, name, value)

    def options(self):
        """Return every option and its current value as a dict."""
        names = [n for n in dir(type(self))
                 if not n.startswith('_') and not callable(getattr(type(self), n))]
        return dict((n, getattr(self, n)) for n in names)

    def replace(self, **options):
        merged = self.options()
        merged.update(options)
        return DiffConfig(**merged)

    def __eq__(self, other):
        if not isinstance(other, DiffConfig):
            return NotImplemented
        return self.options() == other.options()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        changed = ['%s=%r' % (k, v) for k, v in sorted(self.options().items())
                   if getattr(type(self), k) != v]
        return 'DiffConfig(%s)' % ', '.join(changed)
