r"""@package pyremez.real

Fixed precision real numbers and elementary functions.

The Real class is an immutable value type wrapping an `mpmath` number of a
private `mpmath` context. All Real values of a process share one binary
precision, which is configured using set_precision() *before* the first
Real is created. Once a value exists the precision is locked, since mixing
values computed at different precisions would make results depend on the
order of computations.

All operations are deterministic, i.e. identical inputs always produce
bit-identical outputs. Operations outside their valid domain raise a
common.DomainError instead of silently producing `nan` or complex values.

Ordering is total on all representable values: `-inf` is below and `+inf`
above every finite value. There is no negative zero, `Real(-0.0)` equals
(and formats like) `Real(0)`. Not-a-number values cannot be constructed.


@b Examples

```
    >>> set_precision(128)
    >>> x = Real("0.5")
    >>> print(exp(x) * 2)
    3.2974425414002562937
    >>> sqrt(Real(-1))
    Traceback (most recent call last):
      ...
    DomainError: sqrt of negative value
```
"""

import math
import numbers

from mpmath.ctx_mp import MPContext

from .common import ConfigError, DomainError


__all__ = [
    "Real",
    "PrecisionLockedError",
    "set_precision",
    "get_precision",
    "precision_locked",
    "exp",
    "exp2",
    "log",
    "log2",
    "log10",
    "sqrt",
    "cbrt",
    "pow",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "atan2",
    "sinh",
    "cosh",
    "tanh",
    "erf",
    "fabs",
    "floor",
    "ceil",
    "fmin",
    "fmax",
    "fmod",
]


## Default precision in bits.
DEFAULT_PRECISION = 256

## Smallest precision accepted by set_precision().
MIN_PRECISION = 53

_ctx = MPContext()
_ctx.prec = DEFAULT_PRECISION
_locked = False


class PrecisionLockedError(ConfigError):
    r"""Raised when changing the precision after Real values exist."""
    pass


def set_precision(bits):
    r"""Configure the process-wide precision of Real values in bits.

    This has to happen before any Real is constructed. Setting the precision
    that is already active is always allowed and has no effect.

    @param bits
        Number of mantissa bits. Must be an integer of at least
        #MIN_PRECISION.

    @b Raises

    common.ConfigError for invalid values and PrecisionLockedError when
    trying to change the precision after Real values have been created.
    """
    if isinstance(bits, bool) or not isinstance(bits, numbers.Integral):
        raise ConfigError("precision must be an integer number of bits")
    bits = int(bits)
    if bits < MIN_PRECISION:
        raise ConfigError("precision must be at least %d bits" % MIN_PRECISION)
    if bits == _ctx.prec:
        return
    if _locked:
        raise PrecisionLockedError(
            "cannot change precision from %d to %d bits: Real values already "
            "exist" % (_ctx.prec, bits)
        )
    _ctx.prec = bits


def get_precision():
    r"""Return the current precision in bits."""
    return _ctx.prec


def precision_locked():
    r"""Return whether Real values exist, i.e. the precision is fixed."""
    return _locked


def _lock():
    global _locked # pylint: disable=global-statement
    _locked = True


def _check(v):
    r"""Turn `nan` results into a DomainError."""
    if _ctx.isnan(v):
        raise DomainError("result is not a number")
    return v


def _convert(value):
    r"""Convert a supported value to an `mpf` of our context."""
    if isinstance(value, Real):
        return value._v
    if isinstance(value, bool):
        return _ctx.mpf(int(value))
    if isinstance(value, numbers.Integral):
        return _ctx.mpf(int(value))
    if isinstance(value, float):
        if math.isnan(value):
            raise DomainError("cannot represent nan")
        return _ctx.mpf(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            v = _ctx.mpf(text)
        except (ValueError, TypeError):
            raise ValueError("could not convert string to Real: %r" % value)
        if _ctx.isnan(v):
            raise DomainError("cannot represent nan")
        return v
    if hasattr(value, '_mpf_'):
        return _check(_ctx.mpf(value))
    raise TypeError("cannot convert %s to Real" % type(value).__name__)


def _coerce(value):
    r"""Like _convert(), but return `None` for unsupported types."""
    if isinstance(value, (Real, numbers.Integral, float)):
        return _convert(value)
    return None


class Real(object):
    r"""Immutable real number at the process-wide precision.

    Instances are created from `int`, `float`, decimal strings (e.g.
    ``"1.25e-3"`` or ``"-inf"``), `mpmath` numbers or other Real objects.
    Arithmetic with plain `int` and `float` operands is supported and
    always returns Real objects.
    """

    __slots__ = ("_v",)

    def __init__(self, value=0):
        v = _convert(value)
        _lock()
        object.__setattr__(self, "_v", v)

    @classmethod
    def _from_mpf(cls, v):
        r"""Wrap an `mpf` of our context without conversion."""
        obj = cls.__new__(cls)
        object.__setattr__(obj, "_v", _check(v))
        return obj

    @classmethod
    def pi(cls):
        r"""The constant pi rounded to the current precision."""
        _lock()
        return cls._from_mpf(+_ctx.pi)

    @classmethod
    def e(cls):
        r"""Euler's number rounded to the current precision."""
        _lock()
        return cls._from_mpf(+_ctx.e)

    @classmethod
    def ldexp(cls, m, n):
        r"""Return `m * 2**n` for an integer exponent `n`."""
        m = _convert(m)
        _lock()
        return cls._from_mpf(_ctx.ldexp(m, int(n)))

    @classmethod
    def eps(cls):
        r"""Distance from 1 to the next larger representable value."""
        return cls.ldexp(1, 1 - _ctx.prec)

    @classmethod
    def inf(cls):
        r"""Positive infinity."""
        _lock()
        return cls._from_mpf(+_ctx.inf)

    def __setattr__(self, name, value):
        raise AttributeError("Real objects are immutable")

    def __delattr__(self, name):
        raise AttributeError("Real objects are immutable")

    def __reduce__(self):
        # The raw (sign, mantissa, exponent, bitcount) tuple is exact.
        return (_real_from_tuple, (self._v._mpf_,))

    @property
    def mpf(self):
        r"""The underlying `mpmath` number."""
        return self._v

    def is_finite(self):
        r"""Return whether this is neither `+inf` nor `-inf`."""
        return not _ctx.isinf(self._v)

    def is_integer(self):
        r"""Return whether this value is a (finite) integer."""
        return bool(_ctx.isint(self._v))

    def is_zero(self):
        return not self._v

    def sign(self):
        r"""Return `-1`, `0` or `1` as a plain `int`."""
        if self._v > 0:
            return 1
        if self._v < 0:
            return -1
        return 0

    def to_str(self, digits=None, sci=False):
        r"""Format the value with a number of significant digits.

        @param digits
            Significant decimal digits. Default is all digits the current
            precision provides.
        @param sci
            If `True`, always use exponent notation. By default, `mpmath`
            chooses depending on the magnitude.
        """
        if digits is None:
            digits = _ctx.dps
        kw = dict()
        if sci:
            kw.update(min_fixed=0, max_fixed=0, show_zero_exponent=True)
        return _ctx.nstr(self._v, int(digits), **kw)

    def __repr__(self):
        return "Real('%s')" % self.to_str()

    def __str__(self):
        return self.to_str(20)

    def __float__(self):
        return float(self._v)

    def __int__(self):
        if not self.is_finite():
            raise DomainError("cannot convert infinity to int")
        return int(self._v)

    def __bool__(self):
        return bool(self._v)

    def __hash__(self):
        return hash(self._v)

    def __neg__(self):
        return Real._from_mpf(-self._v)

    def __pos__(self):
        return self

    def __abs__(self):
        return Real._from_mpf(abs(self._v))

    def __add__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(self._v + o)

    def __radd__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(o + self._v)

    def __sub__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(self._v - o)

    def __rsub__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(o - self._v)

    def __mul__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(self._v * o)

    def __rmul__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(o * self._v)

    def __truediv__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(_div(self._v, o))

    def __rtruediv__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return Real._from_mpf(_div(o, self._v))

    def __pow__(self, other):
        if _coerce(other) is None:
            return NotImplemented
        return pow(self, other)

    def __rpow__(self, other):
        if _coerce(other) is None:
            return NotImplemented
        return pow(other, self)

    def __eq__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v == o

    def __ne__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v != o

    def __lt__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v < o

    def __le__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v <= o

    def __gt__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v > o

    def __ge__(self, other):
        o = _coerce(other)
        if o is None:
            return NotImplemented
        return self._v >= o


def _real_from_tuple(t):
    r"""Restore a pickled Real from its raw `mpmath` tuple."""
    _lock()
    return Real._from_mpf(_ctx.mpf(tuple(t)))


def _div(a, b):
    if not b:
        raise DomainError("division by zero")
    return a / b


def _arg(x):
    r"""Convert a function argument, returning the `mpf`."""
    if not isinstance(x, Real):
        x = Real(x)
    return x._v


def exp(x):
    r"""Exponential function."""
    return Real._from_mpf(_ctx.exp(_arg(x)))


def exp2(x):
    r"""Power of two, `2**x`."""
    return Real._from_mpf(_ctx.power(2, _arg(x)))


def _log_arg(x, name):
    v = _arg(x)
    if v <= 0:
        raise DomainError("%s of non-positive value" % name)
    return v


def log(x):
    r"""Natural logarithm."""
    return Real._from_mpf(_ctx.ln(_log_arg(x, "log")))


def log2(x):
    r"""Base-2 logarithm."""
    return Real._from_mpf(_ctx.log(_log_arg(x, "log2"), 2))


def log10(x):
    r"""Base-10 logarithm."""
    return Real._from_mpf(_ctx.log10(_log_arg(x, "log10")))


def sqrt(x):
    r"""Square root of a non-negative value."""
    v = _arg(x)
    if v < 0:
        raise DomainError("sqrt of negative value")
    return Real._from_mpf(_ctx.sqrt(v))


def cbrt(x):
    r"""Real cube root, defined for negative values too."""
    v = _arg(x)
    if v < 0:
        return Real._from_mpf(-_ctx.cbrt(-v))
    return Real._from_mpf(_ctx.cbrt(v))


def pow(x, y): # pylint: disable=redefined-builtin
    r"""Compute `x**y` for real results only.

    Negative bases require an integer exponent and zero may not be raised
    to a negative power.
    """
    a = _arg(x)
    b = _arg(y)
    if a < 0 and not _ctx.isint(b):
        raise DomainError("pow of negative base with non-integer exponent")
    if not a and b < 0:
        raise DomainError("pow of zero with negative exponent")
    return Real._from_mpf(_ctx.power(a, b))


def sin(x):
    return Real._from_mpf(_ctx.sin(_arg(x)))


def cos(x):
    return Real._from_mpf(_ctx.cos(_arg(x)))


def tan(x):
    return Real._from_mpf(_ctx.tan(_arg(x)))


def _unit_arg(x, name):
    v = _arg(x)
    if v < -1 or v > 1:
        raise DomainError("%s argument outside [-1, 1]" % name)
    return v


def asin(x):
    return Real._from_mpf(_ctx.asin(_unit_arg(x, "asin")))


def acos(x):
    return Real._from_mpf(_ctx.acos(_unit_arg(x, "acos")))


def atan(x):
    return Real._from_mpf(_ctx.atan(_arg(x)))


def atan2(y, x):
    r"""Angle of the point `(x, y)`, in `(-pi, pi]`."""
    return Real._from_mpf(_ctx.atan2(_arg(y), _arg(x)))


def sinh(x):
    return Real._from_mpf(_ctx.sinh(_arg(x)))


def cosh(x):
    return Real._from_mpf(_ctx.cosh(_arg(x)))


def tanh(x):
    return Real._from_mpf(_ctx.tanh(_arg(x)))


def erf(x):
    r"""Error function."""
    return Real._from_mpf(_ctx.erf(_arg(x)))


def fabs(x):
    return abs(Real(x))


def floor(x):
    return Real._from_mpf(_ctx.floor(_arg(x)))


def ceil(x):
    return Real._from_mpf(_ctx.ceil(_arg(x)))


def fmin(x, y):
    x, y = Real(x), Real(y)
    return x if x <= y else y


def fmax(x, y):
    x, y = Real(x), Real(y)
    return x if x >= y else y


def fmod(x, y):
    r"""Remainder of `x/y` with the sign of `x`, like C's `fmod()`."""
    a = _arg(x)
    b = _arg(y)
    if not b:
        raise DomainError("fmod by zero")
    if _ctx.isinf(a):
        raise DomainError("fmod of infinity")
    if _ctx.isinf(b):
        return Real._from_mpf(a)
    r = a % b
    if r and (r < 0) != (a < 0):
        r -= b
    return Real._from_mpf(r)
