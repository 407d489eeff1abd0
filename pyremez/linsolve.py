r"""@package pyremez.linsolve

Dense linear solves in Real arithmetic and the Remez polynomial fit.

For each control point \f$ x_i \f$, \f$ i = 0, \ldots, n+1 \f$, the Remez
system consists of the equation
\f[
    \sum_{k=0}^n c_k x_i^k + (-1)^i \frac{E}{w(x_i)} = f(x_i)
\f]
in the unknowns \f$ c_0, \ldots, c_n \f$ and \f$ E \f$. Its solution is the
polynomial whose weighted error \f$ w(x)(f(x) - p(x)) \f$ takes the values
\f$ (-1)^i E \f$ at the control points.
"""

import numpy as np

from .real import Real
from .numutils import SingularSystemError, horner


__all__ = [
    "solve_linear_system",
    "remez_system",
    "fit_polynomial",
    "PolynomialFit",
]


def default_pivot_tol():
    r"""Relative pivot threshold used when none is given: `2^(16-P)`."""
    return Real.eps() * 2**15


def solve_linear_system(A, b, pivot_tol=None):
    r"""Solve ``A x = b`` using Gaussian elimination with partial pivoting.

    In each elimination step, the row with the largest magnitude entry in the
    active column is chosen as pivot row. The inputs are not modified.

    @param A
        Square matrix as a sequence of rows of Real (or convertible) values.
    @param b
        Right hand side vector.
    @param pivot_tol
        Relative threshold. A pivot with magnitude not exceeding
        ``pivot_tol * max|A|`` is treated as zero. Default is
        default_pivot_tol().

    @return List of Real values.

    @b Raises

    numutils.SingularSystemError if no usable pivot exists in some step.
    """
    n = len(A)
    if len(b) != n or any(len(row) != n for row in A):
        raise ValueError("matrix must be square and match the vector size")
    M = [[Real(v) for v in row] + [Real(bi)] for row, bi in zip(A, b)]
    if pivot_tol is None:
        pivot_tol = default_pivot_tol()
    scale = max([abs(v) for row in M for v in row[:n]] or [Real(0)])
    threshold = Real(pivot_tol) * scale
    for col in range(n):
        p = max(range(col, n), key=lambda r: abs(M[r][col]))
        pivot = M[p][col]
        if abs(pivot) <= threshold:
            raise SingularSystemError(
                "no usable pivot in column %d (|pivot| = %s)"
                % (col, abs(pivot).to_str(5))
            )
        if p != col:
            M[col], M[p] = M[p], M[col]
        row = M[col]
        for r in range(col+1, n):
            factor = M[r][col] / pivot
            if not factor:
                continue
            other = M[r]
            M[r] = other[:col] + [Real(0)] + [
                other[k] - factor * row[k] for k in range(col+1, n+1)
            ]
    x = [Real(0)] * n
    for i in reversed(range(n)):
        row = M[i]
        s = row[n]
        for k in range(i+1, n):
            s = s - row[k] * x[k]
        x[i] = s / row[i]
    return x


def remez_system(points, func, weight=None):
    r"""Build the linear system for a set of control points.

    @param points
        The ``n+2`` control points.
    @param func
        Callable returning Real values of the target function.
    @param weight
        Optional callable for the weight function. Default is the constant
        `1`.

    @return A pair ``(A, b)`` with `A` a list of rows.
    """
    num = len(points)
    n = num - 2
    if n < 0:
        raise ValueError("need at least two control points")
    A = []
    b = []
    for i, x in enumerate(points):
        x = Real(x)
        row = [Real(1)]
        for _ in range(n):
            row.append(row[-1] * x)
        w = Real(1) if weight is None else weight(x)
        e = 1 / w
        row.append(e if i % 2 == 0 else -e)
        A.append(row)
        b.append(func(x))
    return A, b


def fit_polynomial(points, func, weight=None, pivot_tol=None):
    r"""Solve the Remez system for the given control points.

    @return A PolynomialFit with ``len(points)-1`` coefficients.
    """
    A, b = remez_system(points, func, weight)
    solution = solve_linear_system(A, b, pivot_tol=pivot_tol)
    return PolynomialFit(solution[:-1], solution[-1])


class PolynomialFit(object):
    r"""Polynomial coefficients together with the leveled error.

    The coefficients are stored in increasing powers of `x`. The leveled
    error `error` is signed: the weighted error at the i'th control point of
    the fit is ``(-1)**i * error``.
    """

    __slots__ = ("_coeffs", "_error")

    def __init__(self, coeffs, error):
        object.__setattr__(self, "_coeffs", tuple(Real(c) for c in coeffs))
        object.__setattr__(self, "_error", Real(error))

    def __setattr__(self, name, value):
        raise AttributeError("PolynomialFit objects are immutable")

    @property
    def coeffs(self):
        r"""Coefficients `c_0, ..., c_n` as tuple of Real."""
        return self._coeffs

    @property
    def error(self):
        r"""Signed leveled error `E`."""
        return self._error

    @property
    def degree(self):
        return len(self._coeffs) - 1

    def __call__(self, x):
        r"""Evaluate the polynomial using Horner's scheme."""
        return horner(self._coeffs, x)

    def as_array(self):
        r"""Coefficients as NumPy array of floats."""
        return np.array([float(c) for c in self._coeffs])

    def __repr__(self):
        return "<PolynomialFit(degree=%d, error=%s)>" % (
            self.degree, self._error.to_str(6)
        )
