r"""@package pyremez.exprs

Expression system for formulas of one variable.

A formula such as ``"atan(exp(1+x))"`` is parsed into an immutable tree of
nodes (see the nodes module), which is wrapped in an expression.Expression
object. Expressions evaluate the tree using real.Real arithmetic, i.e. at the
configured arbitrary precision.

The parser checks function names and argument counts, so that a formula that
is accepted can only fail at evaluation time if an operation is applied
outside its domain (raising common.DomainError).
"""

from .nodes import EvalError, UnknownFunctionError
from .parser import ParseError
from .expression import Expression
