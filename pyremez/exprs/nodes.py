r"""@package pyremez.exprs.nodes

Immutable syntax tree nodes and their evaluation.

The tree is built from a closed set of node kinds:

    * Constant: a Real literal
    * Variable: the free variable `x`
    * UnaryOp:  `-a` or `+a`
    * BinaryOp: `a + b`, `a - b`, `a * b`, `a / b`, `a ^ b`
    * Call:     a named function applied to an ordered tuple of arguments

Nodes are never modified after construction, so subtrees may be shared
freely. Evaluation is done by the single function evaluate(), which
dispatches on the node kind.
"""

from .. import real
from ..real import Real


__all__ = [
    "EvalError",
    "UnknownFunctionError",
    "Constant",
    "Variable",
    "UnaryOp",
    "BinaryOp",
    "Call",
    "FUNCTIONS",
    "CONSTANTS",
    "evaluate",
    "contains_variable",
    "walk",
    "children",
]


class EvalError(Exception):
    r"""Raised when an expression tree cannot be evaluated."""
    pass


class UnknownFunctionError(EvalError):
    r"""Raised when evaluating a call to a function that does not exist."""
    pass


## Functions known to the parser and the evaluator, mapping the name to the
## number of arguments and the implementation.
FUNCTIONS = {
    "abs": (1, real.fabs),
    "sqrt": (1, real.sqrt),
    "cbrt": (1, real.cbrt),
    "exp": (1, real.exp),
    "exp2": (1, real.exp2),
    "log": (1, real.log),
    "ln": (1, real.log),
    "log2": (1, real.log2),
    "log10": (1, real.log10),
    "sin": (1, real.sin),
    "cos": (1, real.cos),
    "tan": (1, real.tan),
    "asin": (1, real.asin),
    "acos": (1, real.acos),
    "atan": (1, real.atan),
    "sinh": (1, real.sinh),
    "cosh": (1, real.cosh),
    "tanh": (1, real.tanh),
    "erf": (1, real.erf),
    "floor": (1, real.floor),
    "ceil": (1, real.ceil),
    "atan2": (2, real.atan2),
    "pow": (2, real.pow),
    "min": (2, real.fmin),
    "max": (2, real.fmax),
    "fmod": (2, real.fmod),
}

## Named constants. Values are created on use since the precision may not be
## configured yet when this module is imported.
CONSTANTS = {
    "pi": Real.pi,
    "e": Real.e,
}


class _Node(object):
    r"""Base class of all node kinds.

    Provides structural equality, hashing and immutability based on the
    `_fields` declared by the subclasses.
    """
    __slots__ = ()
    _fields = ()

    def __init__(self, *args):
        if len(args) != len(self._fields):
            raise TypeError("%s takes %d arguments"
                            % (type(self).__name__, len(self._fields)))
        for name, value in zip(self._fields, args):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError("expression nodes are immutable")

    def __delattr__(self, name):
        raise AttributeError("expression nodes are immutable")

    def _values(self):
        return tuple(getattr(self, f) for f in self._fields)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._values() == other._values()

    def __ne__(self, other):
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    def __hash__(self):
        return hash((type(self).__name__,) + self._values())

    def __reduce__(self):
        return (type(self), self._values())

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__,
                           ", ".join(repr(v) for v in self._values()))


class Constant(_Node):
    r"""A literal number."""
    __slots__ = ("value",)
    _fields = ("value",)

    def __init__(self, value):
        if not isinstance(value, Real):
            value = Real(value)
        super(Constant, self).__init__(value)


class Variable(_Node):
    r"""The free variable `x`."""
    __slots__ = ()
    _fields = ()


class UnaryOp(_Node):
    r"""Unary plus or minus applied to an operand."""
    __slots__ = ("op", "operand")
    _fields = ("op", "operand")


class BinaryOp(_Node):
    r"""One of the binary operators ``+ - * / ^``."""
    __slots__ = ("op", "left", "right")
    _fields = ("op", "left", "right")


class Call(_Node):
    r"""A function call with an ordered tuple of argument nodes."""
    __slots__ = ("name", "args")
    _fields = ("name", "args")

    def __init__(self, name, args):
        super(Call, self).__init__(name, tuple(args))


def _binary(op, a, b):
    if op == '+':
        return a + b
    if op == '-':
        return a - b
    if op == '*':
        return a * b
    if op == '/':
        return a / b
    if op == '^':
        return real.pow(a, b)
    raise EvalError("unknown binary operator %r" % (op,))


def evaluate(node, x):
    r"""Evaluate an expression tree at the Real point `x`.

    @b Raises

    UnknownFunctionError for calls to unknown functions, EvalError for
    malformed trees and common.DomainError if a Real operation is applied
    outside its domain.
    """
    kind = type(node)
    if kind is Constant:
        return node.value
    if kind is Variable:
        return x
    if kind is UnaryOp:
        value = evaluate(node.operand, x)
        if node.op == '-':
            return -value
        if node.op == '+':
            return value
        raise EvalError("unknown unary operator %r" % (node.op,))
    if kind is BinaryOp:
        return _binary(node.op, evaluate(node.left, x),
                       evaluate(node.right, x))
    if kind is Call:
        try:
            arity, func = FUNCTIONS[node.name]
        except KeyError:
            raise UnknownFunctionError("unknown function %r" % (node.name,))
        if len(node.args) != arity:
            raise EvalError("%s() takes %d argument%s, got %d"
                            % (node.name, arity, "" if arity == 1 else "s",
                               len(node.args)))
        return func(*[evaluate(arg, x) for arg in node.args])
    raise EvalError("not an expression node: %r" % (node,))


def children(node):
    r"""Return the direct sub-nodes of a node."""
    kind = type(node)
    if kind is UnaryOp:
        return (node.operand,)
    if kind is BinaryOp:
        return (node.left, node.right)
    if kind is Call:
        return node.args
    return ()


def walk(node, depth=0):
    r"""Generator yielding ``(depth, node)`` for all nodes, parents first."""
    yield depth, node
    for child in children(node):
        for item in walk(child, depth+1):
            yield item


def contains_variable(node):
    r"""Return whether the free variable is reachable from `node`."""
    return any(type(n) is Variable for _, n in walk(node))
