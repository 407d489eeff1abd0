r"""@package pyremez.exprs.expression

The Expression class wrapping a parsed formula of one variable.


@b Examples

```
    >>> f = Expression.parse("atan(exp(1+x))")
    >>> f.is_constant()
    False
    >>> print(f(Real(0)))
    1.2182829050172776218
    >>> f.print_tree()
    root [Call atan]
    . 0 [Call exp]
    . . 0 [BinaryOp +]
    . . . left [Constant 1.0]
    . . . right [Variable x]
```
"""

from ..real import Real
from .nodes import Constant, Variable, UnaryOp, BinaryOp, Call
from .nodes import evaluate, contains_variable
from .parser import parse


__all__ = [
    "Expression",
]


def _describe(node):
    kind = type(node)
    if kind is Constant:
        return "Constant %s" % node.value
    if kind is Variable:
        return "Variable x"
    if kind in (UnaryOp, BinaryOp):
        return "%s %s" % (kind.__name__, node.op)
    if kind is Call:
        return "Call %s" % node.name
    return kind.__name__


def _named_children(node):
    kind = type(node)
    if kind is UnaryOp:
        return [("operand", node.operand)]
    if kind is BinaryOp:
        return [("left", node.left), ("right", node.right)]
    if kind is Call:
        return [(str(i), a) for i, a in enumerate(node.args)]
    return []


class Expression(object):
    r"""Immutable function of the single variable `x`.

    Expressions are usually created from text using parse(). They can be
    evaluated any number of times at different Real points and are never
    modified after construction.
    """

    __slots__ = ("_root", "_text", "_constant")

    def __init__(self, root, text=None):
        r"""Create an expression from the root node of a tree.

        @param root
            Node of the tree, see the nodes module.
        @param text
            Optional source text this tree was parsed from.
        """
        object.__setattr__(self, "_root", root)
        object.__setattr__(self, "_text", text)
        object.__setattr__(self, "_constant", not contains_variable(root))

    def __setattr__(self, name, value):
        raise AttributeError("Expression objects are immutable")

    def __reduce__(self):
        return (type(self), (self._root, self._text))

    @classmethod
    def parse(cls, text):
        r"""Parse a formula, raising parser.ParseError if it is malformed."""
        return cls(parse(text), text=text)

    @classmethod
    def constant(cls, value):
        r"""Create the expression of a constant function."""
        value = Real(value)
        return cls(Constant(value), text=value.to_str(20))

    @property
    def root(self):
        r"""Root node of the expression tree."""
        return self._root

    @property
    def text(self):
        r"""Source text, or `None` if not created by parsing."""
        return self._text

    def is_constant(self):
        r"""Return whether the expression does not depend on `x`."""
        return self._constant

    def eval(self, x):
        r"""Evaluate the expression at `x` (converted to Real if needed)."""
        if not isinstance(x, Real):
            x = Real(x)
        return evaluate(self._root, x)

    def __call__(self, x):
        return self.eval(x)

    def traverse_tree(self):
        r"""Generator yielding ``(parents, name, node)`` for all sub-nodes.

        The `parents` are a list of nodes from the root to the immediate
        parent and `name` is the role of the node in its parent (e.g.
        ``'left'`` or the argument index of a call).
        """
        def _walk(node, parents):
            parents = parents + [node]
            for name, child in _named_children(node):
                yield parents, name, child
                for item in _walk(child, parents):
                    yield item
        return _walk(self._root, [])

    def print_tree(self, root_name='root'):
        r"""Print the whole expression tree, one node per line."""
        print("%s [%s]" % (root_name, _describe(self._root)))
        for parents, name, node in self.traverse_tree():
            print("%s%s [%s]" % (". " * len(parents), name, _describe(node)))

    def str(self):
        r"""Return the source text or a rendering of the tree."""
        if self._text is not None:
            return self._text
        return repr(self._root)

    def __str__(self):
        return self.str()

    def __repr__(self):
        return "<Expression(%s)>" % self.str()

    def __eq__(self, other):
        if not isinstance(other, Expression):
            return NotImplemented
        return self._root == other._root

    def __hash__(self):
        return hash(self._root)
