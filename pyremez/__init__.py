r"""@package pyremez

Minimax polynomial approximations using the Remez exchange algorithm.

The solver.RemezSolver computes the polynomial of a given degree that
minimizes the maximum (optionally weighted) error against a function given
as formula text, e.g. ``"atan(exp(1+x))"``, on an interval.

Since the exchange iteration amplifies rounding errors far beyond what
floating point numbers can handle at higher degrees, all computations are
done using the fixed arbitrary precision real.Real type. Its precision has
to be configured (using real.set_precision()) before any computation.

The formulas are parsed by the exprs package into immutable expression
trees that are evaluated using real.Real arithmetic.
"""

from .common import ConfigError, DomainError
from .real import Real, set_precision, get_precision
from .numutils import NumericalError, SingularSystemError
from .numutils import LostAlternationError, StepLimitExceeded
from .exprs import Expression, ParseError, EvalError, UnknownFunctionError
from .solver import RemezSolver, SolverState, PrintFormat


__version__ = "0.1.0"
