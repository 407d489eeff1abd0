r"""@package testutils

Utilities to add more features to `unittest` classes.

This module provides a custom subclass of `unittest.TestCase`, namely
RemezTestCase, which obeys the global configuration settings in
TestSettings and knows how to compare real.Real numbers. The settings can be
configured by the script invoking the test run.

This module also introduces a new decorator slowtest, which, when applied,
leads to the test being skipped on normal runs. The script starting the test
must set `TestSettings.skipslow` to `False` for the slow tests to be run.
"""

import sys
import functools
import unittest
import time


__all__ = [
    "RemezTestCase",
    "TestSettings",
    "slowtest",
]


def slowtest(func):
    """Decorator for skipping a test if TestSettings.skipslow is true."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("skipping slow tests")
        return func(*args, **kwargs)
    return wrapper


class RemezTestCase(unittest.TestCase):
    """Tweaked baseclass for unit tests.

    By deriving from this class, you:
        * Get timed individual tests (needs `verbosity=2`) if
          TestSettings.timing is true.
        * Can compare real.Real numbers (or lists of them) with a relative or
          absolute tolerance using assertRealAlmostEqual() and
          assertListAlmostEqual().
    """
    @classmethod
    def setUpClass(cls):
        if cls is not RemezTestCase and cls.setUp is not RemezTestCase.setUp:
            setUp = cls.setUp
            @functools.wraps(setUp)
            def setUpWrapper(self, *args, **kwargs):
                RemezTestCase.setUp(self)
                return setUp(self, *args, **kwargs)
            cls.setUp = setUpWrapper

    def run(self, result=None):
        # Other runners (e.g. pytest) may pass their own result objects.
        if isinstance(result, unittest.TestResult):
            self.__result = result
            self.__prevIssues = self.__issueCount(result)
        else:
            self.__result = None
            self.__prevIssues = 0
        unittest.TestCase.run(self, result)
        if self.__shouldPrintTiming():
            duration = time.time() - self.startTime
            print("(%.4f seconds) ... " % (duration), file=sys.stderr, end='')

    @staticmethod
    def __issueCount(result):
        return len(result.errors) + len(result.failures) + len(result.skipped)

    def __shouldPrintTiming(self):
        r"""Return whether timing information should be printed."""
        if not TestSettings.timing or not hasattr(self, "startTime"):
            return False
        if self.__result is None:
            return True
        if self.__issueCount(self.__result) > self.__prevIssues:
            return False
        return not self.__result.dots and self.__result.showAll

    def setUp(self):
        self.startTime = time.time()

    def assertIsType(self, obj, cls):
        r"""Assert that an object is exactly of a certain type."""
        self.assertIs(type(obj), cls)

    def assertRealAlmostEqual(self, a, b, rel_tol=None, abs_tol=None,
                              msg=None):
        r"""Assert that two numbers agree within the given tolerances.

        The numbers may be Real objects or anything Real can be constructed
        from. By default, a relative tolerance of `1e-12` is used. If only
        `abs_tol` is given, no relative tolerance is applied.
        """
        from pyremez.real import Real
        from pyremez.numutils import isclose
        if rel_tol is None:
            rel_tol = 0 if abs_tol is not None else Real("1e-12")
        if abs_tol is None:
            abs_tol = 0
        if not isclose(Real(a), Real(b), rel_tol=rel_tol, abs_tol=abs_tol):
            std_msg = "%s != %s within rel_tol=%s, abs_tol=%s" % (
                a, b, rel_tol, abs_tol
            )
            raise self.failureException(self._formatMessage(msg, std_msg))

    def assertListAlmostEqual(self, a, b, places=None, delta=None):
        r"""Assert that two iterables contain (almost) the same values."""
        if places is not None and delta is not None:
            raise TypeError("Cannot use delta and places at the same time")
        if places is None and delta is None:
            places = 7
        a = list(a)
        b = list(b)
        if len(a) != len(b):
            raise self.failureException(
                "Lists have different lengths (%d != %d)" % (len(a), len(b))
            )
        fails = []
        for i, (x, y) in enumerate(zip(a, b)):
            if x == y:
                continue
            diff = abs(float(x) - float(y))
            if delta is not None:
                if diff > delta:
                    fails.append(i)
            elif round(diff, places) != 0:
                fails.append(i)
        if fails:
            msg = "%d elements differ.\n" % len(fails)
            maxN = 9
            if len(fails) <= maxN:
                msg += "Differing elements:\n"
            else:
                msg += "First few differing elements:\n"
            msg += "\n".join(
                ["  [{i}] {a} != {b}    (difference: {d})".format(
                    i=i, a=a[i], b=b[i], d=float(b[i])-float(a[i])
                ) for i in fails[:maxN]]
            )
            raise self.failureException(msg)


class TestSettings(object):
    """Global settings for tests."""
    ## Stop test run on first fail/error.
    failfast = False
    ## Whether output is buffered.\ Just information, cannot be used to toggle output buffering.
    buffering = False
    ## Whether the timing for each test case should be printed.
    timing = False
    ## Control whether tests marked as slowtest should be skipped.
    skipslow = True
