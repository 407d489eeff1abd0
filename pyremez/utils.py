r"""@package pyremez.utils

General utilities for simplifying certain tasks in Python.
"""

from contextlib import contextmanager
from timeit import default_timer
import datetime
import sys
import time


__all__ = [
    "timethis",
]


@contextmanager
def timethis(start_msg=None, end_msg="Elapsed time: {}", silent=False,
             eol=True, file=None):
    r"""Context manager for timing code execution.

    @param start_msg
        String to print at the beginning. May contain the placeholder
        ``'{now}'``, which will be replaced by the current date and time. A
        value of `True` will be taken to mean ``"Started: {now}``.
    @param end_msg
        String to print after execution. Default is ``"Elapsed time: {}"``.
    @param silent
        Whether to print anything at all. May be useful when a function has a
        verbosity setting to conditionally time its results.
    @param eol
        Whether to print a newline after each message. May be useful to print
        execution time in line with the starting message.
    @param file
        Stream to print to. Default is `sys.stderr`, so that timing output
        does not mix with generated results on standard output.
    """
    if silent:
        yield
        return
    if file is None:
        file = sys.stderr
    if start_msg is True:
        start_msg = "Started: {now}"
    if start_msg is not None:
        print(start_msg.format(now=time.strftime('%Y-%m-%d %H:%M:%S')),
              end='\n' if eol else '', flush=not eol, file=file)
    start = default_timer()
    try:
        yield
    finally:
        if end_msg is not None:
            time_str = datetime.timedelta(seconds=default_timer()-start)
            print(end_msg.format(time_str), file=file)
