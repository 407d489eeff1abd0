r"""@package pyremez.common

Exceptions used by multiple modules in pyremez.
"""


__all__ = [
    "ConfigError",
    "DomainError",
]


class ConfigError(ValueError):
    r"""Raised for invalid or late configuration.

    Examples are a polynomial degree below one, an empty range, a missing
    function expression or an attempt to reconfigure a solver that has
    already been initialized.
    """
    pass


class DomainError(ArithmeticError):
    r"""Raised when an operation is applied outside its valid domain.

    This covers division by zero, logarithms of non-positive values, square
    roots of negative values and any operation that would produce a result
    that is not a number.
    """
    pass
