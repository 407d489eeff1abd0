r"""@package pyremez.numutils

Miscellaneous numerical utilities and helpers.


@b Examples

```
    >>> [float(x) for x in chebyshev_extrema(0, 1, 3)]
    [0.0, 0.5, 1.0]
    >>> float(horner([1, 2, 3], 2))
    17.0
```
"""

from scipy import optimize
import numpy as np

from .real import Real, cos


__all__ = [
    "NumericalError",
    "SingularSystemError",
    "LostAlternationError",
    "StepLimitExceeded",
    "isclose",
    "horner",
    "chebyshev_extrema",
    "inf_norm1d",
]


class NumericalError(Exception):
    r"""Exception raised for problems with numerical evaluation.

    Subclasses indicate the specific reason. None of these are retried
    automatically, since repeating the same computation would reproduce the
    same failure.
    """
    pass


class SingularSystemError(NumericalError):
    r"""Raised when a linear system has no usable pivot.

    For the Remez system this indicates a degenerate set of control points.
    """
    pass


class LostAlternationError(NumericalError):
    r"""Raised when the error extrema do not alternate in sign."""
    pass


class StepLimitExceeded(NumericalError):
    r"""Raised when convergence is not achieved within the step count limit."""
    pass


def isclose(a, b, rel_tol=None, abs_tol=None):
    r"""Test if two Real numbers agree within an absolute/relative tolerance.

    The default relative tolerance is a few hundred units in the last place
    of the current precision and the default absolute tolerance is zero.
    """
    a, b = Real(a), Real(b)
    if rel_tol is None:
        rel_tol = 256 * Real.eps()
    if abs_tol is None:
        abs_tol = 0
    return abs(a-b) <= max(rel_tol * max(abs(a), abs(b)), Real(abs_tol))


def horner(coeffs, x):
    r"""Evaluate a polynomial with coefficients in increasing powers.

    The polynomial \f$ c_0 + c_1 x + \ldots + c_n x^n \f$ is evaluated as
    \f$ c_0 + x (c_1 + x (\ldots + x c_n)) \f$.
    """
    result = Real(0)
    for c in reversed(coeffs):
        result = result * x + c
    return result


def chebyshev_extrema(a, b, num):
    r"""Return `num` Chebyshev extrema mapped to the interval [a, b].

    The points are the extrema of the Chebyshev polynomial of degree
    ``num-1``, mapped linearly from [-1, 1] to [a, b] and sorted in
    increasing order:

        x_i = (a+b)/2 - (b-a)/2 * cos(i*pi / (num-1)),  i = 0, ..., num-1

    Both interval endpoints and, for odd `num`, the midpoint are included
    exactly.
    """
    if num < 2:
        raise ValueError("need at least two points")
    a, b = Real(a), Real(b)
    if a >= b:
        raise ValueError("Require a < b")
    mid = (a + b) / 2
    half = (b - a) / 2
    pi = Real.pi()
    pts = [a]
    for i in range(1, num-1):
        if 2*i == num-1:
            pts.append(mid)
        else:
            pts.append(mid - half * cos(pi * i / (num-1)))
    pts.append(b)
    return tuple(pts)


def inf_norm1d(f1, f2=None, domain=None, Ns=50, xatol=1e-12):
    r"""Compute the L^inf norm of f1-f2 in floating point precision.

    The `scipy.optimize.brute` method is used to find a candidate close to the
    global maximum difference. This is then taken as starting point for a
    search for the local maximum difference. Setting the number of samples
    `Ns` high enough should lead to the global maximum difference being found.

    @param f1
        First function. May return Real values.
    @param f2
        Second function. If not given, simply finds the maximum absolute value
        of `f1`.
    @param domain
        Domain ``[a, b]`` inside which to search for the maximum difference.
    @param Ns
        Number of initial samples for the `scipy.optimize.brute` call. In case
        ``Ns <= 2``, the `brute()` step is skipped an a local extremum is
        found inside the given `domain`. Default is `50`.
    @param xatol
        Absolute tolerance of the final bounded local search.

    @return A pair ``(x, delta)``, where `x` is the point at which the maximum
        difference was found and `delta` is the difference at that point.
    """
    if domain is None:
        raise TypeError("a domain is required")
    if f2 is None:
        f2 = lambda x: 0.0
    a, b = float(domain[0]), float(domain[1])
    def func(x):
        # brute() passes 1-element arrays
        x = float(np.asarray(x).ravel()[0])
        if not a <= x <= b:
            return 0.
        return -abs(float(f1(x)) - float(f2(x)))
    if Ns <= 2:
        bounds = [a, b]
    else:
        x0 = optimize.brute(func, [(a, b)], Ns=Ns, finish=None)
        x0 = float(np.asarray(x0).ravel()[0])
        step = (b-a)/(Ns-1)
        bounds = [max(a, x0-step), min(b, x0+step)]
    res = optimize.minimize_scalar(
        func, bounds=bounds, method='bounded',
        options=dict(xatol=xatol),
    )
    x, val = res.x, -res.fun
    # The bounded search never evaluates the interval ends.
    for end in (a, b):
        if -func(end) > val:
            x, val = end, -func(end)
    return x, val
