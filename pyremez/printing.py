r"""@package pyremez.printing

Text renderings of solver progress and results.

Progress output is a block of ``x e(x)`` lines which can be fed directly to
plotting tools such as gnuplot. Results are rendered as a C-like function
evaluating the polynomial in Horner form.
"""

from .real import Real


__all__ = [
    "format_real",
    "progress_text",
    "horner_source",
]


def format_real(value, digits=20):
    r"""Format a number in exponent notation with `digits` significant digits."""
    return Real(value).to_str(digits, sci=True)


def progress_text(iteration, error, points, values, digits=20):
    r"""Render one progress block.

    @param iteration
        Iteration count to put into the header line.
    @param error
        Leveled error magnitude, or `None` if not known yet.
    @param points
        Current control points.
    @param values
        Weighted errors at the control points, or `None` to print only the
        abscissas.
    """
    if error is None:
        header = "# iteration %d" % iteration
    else:
        header = "# iteration %d, error %s" % (iteration, format_real(error, 8))
    lines = [header]
    if values is None:
        lines += [format_real(x, digits) for x in points]
    else:
        lines += ["%s %s" % (format_real(x, digits), format_real(y, digits))
                  for x, y in zip(points, values)]
    return "\n".join(lines) + "\n\n"


def _term(c, digits):
    txt = format_real(c, digits)
    if txt.startswith('-'):
        return "- " + txt[1:]
    return "+ " + txt


def horner_source(coeffs, peak_error=None, digits=20, ctype="double",
                  name="f", description=()):
    r"""Render polynomial coefficients as a function in Horner form.

    @param coeffs
        Coefficients in increasing powers of `x`. At least two are required.
    @param peak_error
        Optional peak error magnitude to state in the leading comment.
    @param digits
        Significant digits to print for each coefficient.
    @param ctype
        Type name to use for the argument, the result and the accumulator.
    @param name
        Name of the generated function.
    @param description
        Further comment lines to put before the peak error line.

    @b Examples

    ```
        >>> print(horner_source([1, 2, 3], digits=3))
        double f(double x)
        {
            double u = 3.0e+0;
            u = u * x + 2.0e+0;
            return u * x + 1.0e+0;
        }
    ```
    """
    if len(coeffs) < 2:
        raise ValueError("need at least two coefficients")
    lines = ["// %s" % line for line in description]
    if peak_error is not None:
        lines.append("// peak error: %s" % format_real(peak_error, 8))
    lines.append("%s %s(%s x)" % (ctype, name, ctype))
    lines.append("{")
    lines.append("    %s u = %s;" % (ctype, format_real(coeffs[-1], digits)))
    for c in reversed(coeffs[1:-1]):
        lines.append("    u = u * x %s;" % _term(c, digits))
    lines.append("    return u * x %s;" % _term(coeffs[0], digits))
    lines.append("}")
    return "\n".join(lines) + "\n"
