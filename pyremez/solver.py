r"""@package pyremez.solver

Remez exchange algorithm for minimax polynomial approximations.

Given a target function \f$ f \f$, an optional weight \f$ w \f$, a degree
\f$ n \f$ and an interval \f$ [a, b] \f$, the RemezSolver computes the
polynomial \f$ p \f$ of degree \f$ n \f$ minimizing
\f[
    \max_{x \in [a, b]} |w(x) (f(x) - p(x))|.
\f]

The solver is a finite state machine (see SolverState) driven by the caller:

~~~.py
solver = RemezSolver(order=4, xrange=(-1, 1), func="atan(exp(1+x))")
solver.do_init()
while solver.do_step():
    solver.do_print(PrintFormat.PROGRESS)
if solver.state is SolverState.CONVERGED:
    solver.do_print(PrintFormat.RESULT)
~~~

Each call of do_step() performs one complete exchange: the linear system
for the current control points is solved (linsolve.fit_polynomial()) and
the extrema of the resulting error become the new control points
(extrema.find_extrema()). Between two steps, control returns to the caller,
which can report progress or simply stop iterating.

The leveled error is expected to converge quadratically. Once its relative
change falls below the tolerance, the solver is CONVERGED. Any numerical
problem, a function that cannot be evaluated on the interval, or reaching
the step limit moves it to FAILED instead, with the cause stored in
RemezSolver.failure.
"""

from enum import Enum
import sys

from .common import ConfigError, DomainError
from .real import Real, get_precision
from .numutils import NumericalError, LostAlternationError, StepLimitExceeded
from .numutils import chebyshev_extrema, inf_norm1d
from .exprs import Expression, EvalError
from .linsolve import fit_polynomial
from .extrema import find_extrema
from .printing import progress_text, horner_source


__all__ = [
    "SolverState",
    "PrintFormat",
    "RemezSolver",
]


class SolverState(Enum):
    r"""States of a RemezSolver run."""
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    FAILED = "failed"

    @property
    def terminal(self):
        r"""Whether no further steps can be taken in this state."""
        return self in (SolverState.CONVERGED, SolverState.FAILED)


class PrintFormat(Enum):
    r"""Output formats of RemezSolver.do_print()."""
    PROGRESS = "progress"
    RESULT = "result"


class RemezSolver(object):
    r"""Step-wise minimax polynomial solver.

    The configuration setters may only be used before do_init(). The solver
    is not thread safe: do_init() and do_step() of one instance must be
    called by a single caller in sequence. Independent instances share no
    mutable data and may be used in parallel.
    """

    def __init__(self, order=None, xrange=None, func=None, weight=None,
                 tol=None, max_steps=50, xtol=None, ftol=None,
                 pivot_tol=None, verbose=False):
        r"""Create a new solver.

        All arguments are optional here and may be set later via the
        corresponding setters (before calling do_init()).

        @param order
            Degree of the polynomial (at least `1`). Default is `4`.
        @param xrange
            Pair ``(xmin, xmax)`` of the interval to approximate on. See
            set_range(). Default is ``(-1, 1)``.
        @param func
            Text of the function to approximate. Required before do_init().
        @param weight
            Text of the weight function. Default is the constant `1`.
        @param tol
            Relative change of the leveled error below which the iteration
            is considered converged. Default is ``2**-(P//3)``, where `P` is
            the current precision in bits.
        @param max_steps
            Maximum number of steps. Reaching it without convergence moves
            the solver into the FAILED state. Default is `50`.
        @param xtol
            Absolute width below which zero and extremum brackets are
            considered converged. Default is ``(xmax-xmin) * 2**-(P//2)``.
        @param ftol
            Optional relative function value tolerance for the extremum
            search. By default only `xtol` is used.
        @param pivot_tol
            Relative pivot threshold of the linear solves. See
            linsolve.solve_linear_system().
        @param verbose
            Whether to print information about each step.
        """
        self._state = SolverState.UNINITIALIZED
        self._order = 4
        self._xmin = None
        self._xmax = None
        self._func = None
        self._weight = None
        self._control_points = None
        self._control_values = None
        self._fit = None
        self._error = None
        self._peak_error = None
        self._delta = None
        self._iteration = 0
        self._failure = None
        self._tol = tol
        self._xtol = xtol
        self._ftol = ftol
        self._pivot_tol = pivot_tol
        self._exact_tol = None
        self._restarted = False
        if (isinstance(max_steps, bool) or not isinstance(max_steps, int)
                or max_steps < 1):
            raise ConfigError("max_steps must be a positive integer")
        ## Maximum number of steps before giving up.
        self.max_steps = max_steps
        ## Whether to print information about each step.
        self.verbose = verbose
        if order is not None:
            self.set_order(order)
        if xrange is not None:
            self.set_range(*xrange)
        if func is not None:
            self.set_func(func)
        if weight is not None:
            self.set_weight(weight)

    def _p(self, msg):
        if self.verbose:
            print(msg)

    def _check_configurable(self):
        if self._state is not SolverState.UNINITIALIZED:
            raise ConfigError("solver is already initialized")

    def set_order(self, order):
        r"""Set the degree of the polynomial (an integer of at least `1`)."""
        self._check_configurable()
        if isinstance(order, bool) or not isinstance(order, int) or order < 1:
            raise ConfigError("invalid degree %r: must be an integer >= 1"
                              % (order,))
        self._order = order

    def set_range(self, xmin, xmax):
        r"""Set the interval to approximate on.

        Both endpoints may be numbers, Real objects or texts of constant
        expressions like ``"pi/4"``.

        @b Raises

        common.ConfigError if an endpoint is not constant or not finite or if
        ``xmin >= xmax``. Malformed texts raise exprs.ParseError.
        """
        self._check_configurable()
        xmin = _constant_value(xmin, "xmin")
        xmax = _constant_value(xmax, "xmax")
        if xmin >= xmax:
            raise ConfigError("invalid range: xmin >= xmax")
        self._xmin = xmin
        self._xmax = xmax

    def set_func(self, text):
        r"""Set the function to approximate from formula text."""
        self._check_configurable()
        self._func = _as_expression(text)

    def set_weight(self, text):
        r"""Set the weight function from formula text.

        Passing `None` restores the default constant weight `1`.
        """
        self._check_configurable()
        self._weight = None if text is None else _as_expression(text)

    @property
    def state(self):
        r"""Current SolverState."""
        return self._state

    @property
    def order(self):
        r"""Degree of the polynomial."""
        return self._order

    @property
    def xmin(self):
        return self._xmin

    @property
    def xmax(self):
        return self._xmax

    @property
    def func(self):
        r"""The function Expression (or `None` if not set yet)."""
        return self._func

    @property
    def weight(self):
        r"""The weight Expression, defaulting to the constant `1`."""
        if self._weight is None:
            return Expression.constant(1)
        return self._weight

    @property
    def control_points(self):
        r"""Current control points as tuple of Real (or `None`)."""
        return self._control_points

    @property
    def control_values(self):
        r"""Weighted error of the current fit at the control points."""
        return self._control_values

    @property
    def fit(self):
        r"""The most recent linsolve.PolynomialFit (or `None`)."""
        return self._fit

    @property
    def coeffs(self):
        r"""Coefficients of the most recent fit in increasing powers."""
        return None if self._fit is None else self._fit.coeffs

    @property
    def error(self):
        r"""Magnitude of the most recent leveled error."""
        return self._error

    @property
    def peak_error(self):
        r"""Largest weighted error magnitude found at the control points."""
        return self._peak_error

    @property
    def delta(self):
        r"""Relative change of the leveled error in the last step."""
        return self._delta

    @property
    def iteration(self):
        r"""Number of completed steps."""
        return self._iteration

    @property
    def failure(self):
        r"""The exception that moved the solver into the FAILED state."""
        return self._failure

    @property
    def tol(self):
        return self._tol

    @property
    def xtol(self):
        return self._xtol

    def do_init(self):
        r"""Validate the configuration and place the initial control points.

        The ``n+2`` initial control points are the Chebyshev extrema mapped
        to the interval.

        @b Raises

        common.ConfigError if called more than once or if no function has
        been set.
        """
        if self._state is not SolverState.UNINITIALIZED:
            raise ConfigError("do_init() may only be called once")
        if self._func is None:
            raise ConfigError("no function specified")
        if self._xmin is None:
            self._xmin, self._xmax = Real(-1), Real(1)
        prec = get_precision()
        if self._tol is None:
            self._tol = Real.ldexp(1, -(prec // 3))
        else:
            self._tol = Real(self._tol)
        if self._xtol is None:
            self._xtol = (self._xmax - self._xmin) * Real.ldexp(1, -(prec // 2))
        else:
            self._xtol = Real(self._xtol)
        if self._ftol is not None:
            self._ftol = Real(self._ftol)
        self._exact_tol = Real.ldexp(1, 16 - prec)
        self._control_points = chebyshev_extrema(
            self._xmin, self._xmax, self._order + 2
        )
        self._state = SolverState.INITIALIZED
        self._p("Approximating f(x) = %s with degree %d on [%s, %s]"
                % (self._func, self._order, self._xmin, self._xmax))

    def do_step(self):
        r"""Perform one exchange step.

        @return Whether the caller should call do_step() again. This is
            `False` once the solver is CONVERGED or FAILED (in which case the
            call has no effect).

        @b Raises

        common.ConfigError if do_init() has not been called.
        """
        if self._state.terminal:
            return False
        if self._state is SolverState.UNINITIALIZED:
            raise ConfigError("do_init() has not been called")
        try:
            return self._step()
        except (NumericalError, DomainError, EvalError) as e:
            self._fail(e)
            return False

    def _step(self):
        points = self._control_points
        weight = self._weight
        fit = fit_polynomial(points, self._func, weight,
                             pivot_tol=self._pivot_tol)
        err = self._error_function(fit)
        self._fit = fit
        E = abs(fit.error)
        tiny = self._exact_tol * self._scale(points)
        if E <= tiny:
            mids = [(a + b) / 2 for a, b in zip(points[:-1], points[1:])]
            tiny = max(tiny, self._exact_tol * self._scale(mids))
            if any(abs(err(m)) > tiny for m in mids):
                # Symmetric points and a target of matching parity give
                # E = 0 for a mere interpolant.
                if self._restarted:
                    raise LostAlternationError(
                        "error vanishes at the control points only"
                    )
                return self._restart(err)
            self._iteration += 1
            self._delta = None
            self._error = E
            self._control_values = tuple(err(x) for x in points)
            self._peak_error = max(abs(v) for v in self._control_values)
            self._state = SolverState.CONVERGED
            self._p("Exact fit found (leveled error %s)" % E.to_str(6))
            return False
        xs, ys = find_extrema(err, points, self._xmin, self._xmax,
                              self._xtol, ftol=self._ftol)
        self._iteration += 1
        self._control_points = xs
        self._control_values = ys
        self._peak_error = max(abs(y) for y in ys)
        if self._error is None:
            self._delta = None
        else:
            self._delta = abs(E - self._error) / E
        self._error = E
        self._state = SolverState.ITERATING
        self._p("%02d: error %s, peak %s, delta %s" % (
            self._iteration, E.to_str(10), self._peak_error.to_str(10),
            "-" if self._delta is None else self._delta.to_str(3),
        ))
        if self._delta is not None and self._delta <= self._tol:
            self._state = SolverState.CONVERGED
            self._p("Converged after %d steps" % self._iteration)
            return False
        if self._iteration >= self.max_steps:
            raise StepLimitExceeded(
                "no convergence after %d steps (relative change %s)"
                % (self._iteration, self._delta.to_str(6)
                   if self._delta is not None else "unknown")
            )
        return True

    def _scale(self, points):
        r"""Largest weighted function value magnitude at the given points."""
        func = self._func
        weight = self._weight
        scale = Real(0)
        for x in points:
            v = func(x)
            if weight is not None:
                v = v * weight(x)
            scale = max(scale, abs(v))
        return scale

    def _restart(self, err):
        r"""Continue from control points without reflection symmetry.

        One of the ``n+3`` Chebyshev extrema is left out, which makes the
        leveled error of a target with the same parity as the degree
        non-zero.
        """
        self._restarted = True
        pts = chebyshev_extrema(self._xmin, self._xmax, self._order + 3)
        self._control_points = pts[:-2] + pts[-1:]
        self._control_values = tuple(err(x) for x in self._control_points)
        self._iteration += 1
        self._state = SolverState.ITERATING
        self._p("%02d: leveled error vanishes, restarting from asymmetric "
                "control points" % self._iteration)
        if self._iteration >= self.max_steps:
            raise StepLimitExceeded(
                "no convergence after %d steps" % self._iteration
            )
        return True

    def _fail(self, exc):
        self._failure = exc
        self._state = SolverState.FAILED
        self._p("Stopping Remez iteration: %s" % exc)

    def _error_function(self, fit):
        r"""Return the weighted error function of a fit."""
        func = self._func
        weight = self._weight
        if weight is None:
            def err(x):
                x = Real(x)
                return func(x) - fit(x)
        else:
            def err(x):
                x = Real(x)
                return weight(x) * (func(x) - fit(x))
        return err

    def solve(self):
        r"""Run the complete iteration and return the coefficients.

        This calls do_init() if necessary and then do_step() until it returns
        `False`.

        @b Raises

        The stored failure if the solver ends up in the FAILED state.
        """
        if self._state is SolverState.UNINITIALIZED:
            self.do_init()
        while self.do_step():
            pass
        if self._state is SolverState.FAILED:
            raise self._failure
        return self.coeffs

    def error_function(self):
        r"""Return the weighted error `x -> w(x) (f(x) - p(x))` of the fit."""
        if self._fit is None:
            raise ConfigError("no polynomial available yet")
        return self._error_function(self._fit)

    def verify(self, Ns=200, xatol=1e-12):
        r"""Estimate the global peak error in floating point precision.

        This is an independent check that the control points actually capture
        the largest errors on the whole interval. Since it uses floating
        point arithmetic, it is meaningful only for errors well above the
        floating point resolution.

        @return A pair ``(x, error)`` of floats.
        """
        err = self.error_function()
        return inf_norm1d(err, domain=(self._xmin, self._xmax), Ns=Ns,
                          xatol=xatol)

    def do_print(self, fmt=PrintFormat.RESULT, file=None, digits=20,
                 ctype="double"):
        r"""Print progress information or the resulting polynomial.

        This never changes the state of the solver.

        @param fmt
            A PrintFormat or its value (``"progress"`` or ``"result"``).
        @param file
            Stream to write to. Default is `sys.stdout`.
        @param digits
            Significant digits for printed numbers.
        @param ctype
            Type name used in the generated source of the RESULT format.
        """
        fmt = PrintFormat(fmt)
        if file is None:
            file = sys.stdout
        if fmt is PrintFormat.PROGRESS:
            if self._control_points is None:
                raise ConfigError("do_init() has not been called")
            text = progress_text(self._iteration, self._error,
                                 self._control_points, self._control_values,
                                 digits=digits)
        else:
            if self._fit is None:
                raise ConfigError("no polynomial available yet")
            text = horner_source(
                self._fit.coeffs, peak_error=self._peak_error, digits=digits,
                ctype=ctype, description=self._description(),
            )
        print(text, end='', file=file)

    def _description(self):
        lines = ["Approximation of f(x) = %s" % self._func]
        if self._weight is not None:
            lines.append("with weight function w(x) = %s" % self._weight)
        lines.append("on interval [ %s, %s ]" % (self._xmin, self._xmax))
        lines.append("with a polynomial of degree %d." % self._order)
        return lines

    def __repr__(self):
        return "<RemezSolver(order=%d, state=%s, iteration=%d)>" % (
            self._order, self._state.value, self._iteration
        )


def _as_expression(text):
    if isinstance(text, Expression):
        return text
    return Expression.parse(text)


def _constant_value(value, name):
    r"""Convert a range endpoint to a finite Real."""
    if isinstance(value, (str, Expression)):
        expr = _as_expression(value)
        if not expr.is_constant():
            raise ConfigError("invalid range: %s must be constant" % name)
        value = expr.eval(Real(0))
    value = Real(value)
    if not value.is_finite():
        raise ConfigError("invalid range: %s must be finite" % name)
    return value
