r"""@package pyremez.extrema

Root and extremum searches on brackets of one real variable.

These are used by the Remez exchange to locate the next set of control
points: the sign changes of the error between the current control points
split the interval into brackets, each containing one extremum of the error.
"""

from .real import Real, sqrt
from .numutils import LostAlternationError


__all__ = [
    "find_zero",
    "find_extremum",
    "find_extrema",
]


def find_zero(f, a, b, xtol, fa=None, fb=None):
    r"""Find a sign change of `f` inside ``[a, b]`` by bisection.

    @param f
        Callable returning Real values.
    @param a,b
        Bracket with ``a < b``. The function values at these points must not
        have the same sign.
    @param xtol
        The search stops once the bracket is at most this wide.
    @param fa,fb
        Optional known values of `f` at `a` and `b`.

    @return Point inside the final bracket.
    """
    a, b = Real(a), Real(b)
    fa = f(a) if fa is None else fa
    fb = f(b) if fb is None else fb
    if not fa:
        return a
    if not fb:
        return b
    if fa.sign() == fb.sign():
        raise LostAlternationError("no sign change in [%s, %s]" % (a, b))
    while b - a > xtol:
        m = (a + b) / 2
        if m <= a or m >= b:
            break
        fm = f(m)
        if not fm:
            return m
        if fm.sign() == fa.sign():
            a, fa = m, fm
        else:
            b, fb = m, fm
    return (a + b) / 2


def find_extremum(f, a, b, sign, xtol, ftol=None):
    r"""Find the maximum of ``sign * f(x)`` on the closed interval ``[a, b]``.

    A golden section search is performed, assuming ``sign * f`` is unimodal
    on the bracket. The interval endpoints are candidates too, since the
    extremum of an error function is often attained at the boundary.

    @param f
        Callable returning Real values.
    @param a,b
        Bracket with ``a <= b``.
    @param sign
        `1` to search for a maximum, `-1` to search for a minimum.
    @param xtol
        Stop once the bracket is at most this wide.
    @param ftol
        Optional relative tolerance. If given, the search stops as soon as
        the two interior function values differ relatively by no more than
        this.

    @return A pair ``(x, f(x))``.
    """
    if not Real(xtol) > 0:
        raise ValueError("xtol must be positive")
    a, b = Real(a), Real(b)
    g = lambda x: f(x) if sign > 0 else -f(x)
    ga, gb = g(a), g(b)
    best_x, best_g = (a, ga) if ga >= gb else (b, gb)
    invphi = (sqrt(5) - 1) / 2
    c = b - invphi * (b - a)
    d = a + invphi * (b - a)
    gc, gd = g(c), g(d)
    while b - a > xtol:
        if ftol is not None and abs(gc - gd) <= ftol * max(abs(gc), abs(gd)):
            break
        if gc >= gd:
            b, d, gd = d, c, gc
            c = b - invphi * (b - a)
            gc = g(c)
        else:
            a, c, gc = c, d, gd
            d = a + invphi * (b - a)
            gd = g(d)
        if not (a < c < b and a < d < b):
            # bracket cannot shrink further at this precision
            break
    x, gx = (c, gc) if gc >= gd else (d, gd)
    if gx > best_g:
        best_x, best_g = x, gx
    return best_x, (best_g if sign > 0 else -best_g)


def find_extrema(error_func, points, xmin, xmax, xtol, ftol=None):
    r"""Locate the alternating extrema of an error function.

    The sign of `error_func` at the given control points is expected to
    alternate. Between each pair of consecutive control points, a sign change
    is located, giving ``len(points)-1`` zeros. Together with the interval
    endpoints, these form ``len(points)`` brackets in each of which the
    extremum having the sign of the enclosed control point is searched.

    @param error_func
        Callable returning Real values of the (weighted) error.
    @param points
        Current control points, strictly increasing.
    @param xmin,xmax
        Interval on which to search.
    @param xtol
        Width below which brackets are considered converged.
    @param ftol
        Optional relative function value tolerance for find_extremum().

    @return A pair ``(xs, values)`` of tuples with the new control points and
        the error values there.

    @b Raises

    numutils.LostAlternationError if the error does not change sign between
    consecutive points or the extrema found do not strictly alternate.
    """
    values = [error_func(x) for x in points]
    signs = [v.sign() for v in values]
    for i, s in enumerate(signs):
        if s == 0:
            raise LostAlternationError(
                "error vanishes at control point %d (x = %s)" % (i, points[i])
            )
    zeros = []
    for i in range(len(points) - 1):
        if signs[i] == signs[i+1]:
            raise LostAlternationError(
                "error has the same sign at control points %d and %d" % (i, i+1)
            )
        zeros.append(find_zero(error_func, points[i], points[i+1], xtol,
                               fa=values[i], fb=values[i+1]))
    bounds = [Real(xmin)] + zeros + [Real(xmax)]
    xs = []
    ys = []
    for i, s in enumerate(signs):
        x, y = find_extremum(error_func, bounds[i], bounds[i+1], s, xtol,
                             ftol=ftol)
        xs.append(x)
        ys.append(y)
    for i in range(len(xs)):
        if ys[i].sign() != signs[i]:
            raise LostAlternationError(
                "extremum %d (x = %s) does not have the expected sign"
                % (i, xs[i])
            )
        if i and xs[i] <= xs[i-1]:
            raise LostAlternationError(
                "extrema %d and %d are not strictly increasing" % (i-1, i)
            )
    return tuple(xs), tuple(ys)
