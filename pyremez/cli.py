r"""@package pyremez.cli

Command line interface of the Remez solver.

@b Examples

```
    $ pyremez -d 4 -r -1:1 "atan(exp(1+x))"
    $ pyremez -d 4 -r -1:1 "atan(exp(1+x))" "exp(1+x)"
    $ pyremez --progress -d 6 -r 0:pi/4 "sin(x)"
```
"""

import argparse
import logging
import sys

from . import __version__
from .common import ConfigError, DomainError
from .real import Real, set_precision, DEFAULT_PRECISION
from .solver import RemezSolver, SolverState, PrintFormat
from .utils import timethis


__all__ = [
    "main",
]


EXAMPLES = """\
examples:
  pyremez -d 4 -r -1:1 "atan(exp(1+x))"
  pyremez -d 4 -r -1:1 "atan(exp(1+x))" "exp(1+x)"
"""


def _make_parser():
    parser = argparse.ArgumentParser(
        prog="pyremez",
        description="Find a polynomial approximation for x-expression.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("func", metavar="x-expression",
                        help="function to approximate")
    parser.add_argument("weight", metavar="x-weight", nargs="?", default=None,
                        help="weight function of the error (default: 1)")
    parser.add_argument("-d", "--degree", type=int, default=None,
                        help="degree of final polynomial (default: 4)")
    parser.add_argument("-r", "--range", metavar="XMIN:XMAX", default=None,
                        help="range over which to approximate "
                             "(default: -1:1)")
    parser.add_argument("-p", "--precision", type=int,
                        default=DEFAULT_PRECISION,
                        help="working precision in bits (default: %(default)s)")
    parser.add_argument("--tol", default=None,
                        help="relative change of the error at which to stop")
    parser.add_argument("--max-steps", type=int, default=50,
                        help="maximum number of iterations "
                             "(default: %(default)s)")
    parser.add_argument("--digits", type=int, default=20,
                        help="significant digits of printed coefficients "
                             "(default: %(default)s)")
    parser.add_argument("--type", dest="ctype", default="double",
                        help="type name used in the generated code "
                             "(default: %(default)s)")
    parser.add_argument("--progress", action="store_true",
                        help="print progress")
    parser.add_argument("--stats", action="store_true",
                        help="print timing statistics")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log informational messages")
    parser.add_argument("-V", "--version", action="version",
                        version="pyremez %s" % __version__)
    return parser


def _join_range_args(argv):
    r"""Allow ``-r -1:1``, which argparse would take for an option."""
    result = []
    args = iter(argv)
    for arg in args:
        if arg in ("-r", "--range"):
            value = next(args, None)
            if value is not None:
                arg = "--range=%s" % value
        result.append(arg)
    return result


def _split_range(text):
    parts = text.split(":")
    if len(parts) != 2:
        raise ConfigError("invalid range %r: expected XMIN:XMAX" % text)
    return parts


def _configure(args):
    set_precision(args.precision)
    tol = None if args.tol is None else Real(args.tol)
    solver = RemezSolver(tol=tol, max_steps=args.max_steps)
    if args.degree is not None:
        solver.set_order(args.degree)
    if args.range is not None:
        solver.set_range(*_split_range(args.range))
    solver.set_func(args.func)
    if args.weight is not None:
        solver.set_weight(args.weight)
    return solver


def main(argv=None):
    r"""Run the command line tool and return the exit status."""
    argv = sys.argv[1:] if argv is None else list(argv)
    args = _make_parser().parse_args(_join_range_args(argv))
    logging.basicConfig(format="%(levelname)s: %(message)s")
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)
    try:
        solver = _configure(args)
    except (ValueError, DomainError) as e:
        logging.error("%s", e)
        print("Try 'pyremez --help' for more information.", file=sys.stderr)
        return 1
    logging.info("Precision: %d bits", args.precision)
    logging.info("Function: %s", solver.func)
    with timethis("Started: {now}", "Total time: {}", silent=not args.stats):
        solver.do_init()
        while True:
            with timethis(None, "Step time: {}", silent=not args.stats):
                more = solver.do_step()
            logging.info("Step %d: error %s", solver.iteration,
                         solver.error.to_str(10) if solver.error is not None
                         else "-")
            if args.progress:
                solver.do_print(PrintFormat.PROGRESS)
                sys.stdout.flush()
            if not more:
                break
    if solver.state is SolverState.FAILED:
        logging.error("no approximation found: %s", solver.failure)
        return 1
    logging.info("Converged after %d steps", solver.iteration)
    solver.do_print(PrintFormat.RESULT, digits=args.digits, ctype=args.ctype)
    return 0
