#!/usr/bin/env python3

import unittest
import sys

import numpy as np

from testutils import RemezTestCase
from .real import Real, exp
from .numutils import SingularSystemError, chebyshev_extrema
from .linsolve import solve_linear_system, remez_system, fit_polynomial
from .linsolve import PolynomialFit, default_pivot_tol


class TestSolveLinearSystem(RemezTestCase):
    def test_solve(self):
        A = [[2, 1, -1], [-3, -1, 2], [-2, 1, 2]]
        b = [8, -11, -3]
        x = solve_linear_system(A, b)
        self.assertEqual(len(x), 3)
        self.assertRealAlmostEqual(x[0], 2)
        self.assertRealAlmostEqual(x[1], 3)
        self.assertRealAlmostEqual(x[2], -1)
        self.assertIsType(x[0], Real)

    def test_inputs_unchanged(self):
        A = [[Real(1), Real(2)], [Real(3), Real(4)]]
        b = [Real(5), Real(6)]
        solve_linear_system(A, b)
        self.assertEqual(A, [[1, 2], [3, 4]])
        self.assertEqual(b, [5, 6])

    def test_pivoting(self):
        # Without row exchanges, the zero pivot would stop the elimination.
        x = solve_linear_system([[0, 1], [1, 0]], [2, 3])
        self.assertEqual(x, [3, 2])
        tiny = Real("1e-60")
        x = solve_linear_system([[tiny, 1], [1, 1]], [1, 2])
        self.assertRealAlmostEqual(x[0], 1)
        self.assertRealAlmostEqual(x[1], 1)

    def test_residual(self):
        n = 8
        # Hilbert matrix, badly conditioned but still fine at this precision
        A = [[Real(1) / (i + j + 1) for j in range(n)] for i in range(n)]
        b = [Real(1)] * n
        x = solve_linear_system(A, b)
        for row, bi in zip(A, b):
            r = sum((a*xi for a, xi in zip(row, x)), Real(0)) - bi
            self.assertLess(abs(r), Real("1e-50"))

    def test_singular(self):
        with self.assertRaises(SingularSystemError):
            solve_linear_system([[1, 2], [2, 4]], [1, 2])
        with self.assertRaises(SingularSystemError):
            solve_linear_system([[0, 0], [0, 0]], [0, 0])
        A = [[1, 1], [1, 1 + Real.eps()]]
        with self.assertRaises(SingularSystemError):
            solve_linear_system(A, [1, 1])
        # The threshold is configurable.
        x = solve_linear_system(A, [1, 1], pivot_tol=0)
        self.assertRealAlmostEqual(x[0], 1)

    def test_shape(self):
        with self.assertRaises(ValueError):
            solve_linear_system([[1, 2], [3, 4]], [1])
        with self.assertRaises(ValueError):
            solve_linear_system([[1, 2]], [1])
        self.assertEqual(solve_linear_system([], []), [])

    def test_default_pivot_tol(self):
        self.assertEqual(default_pivot_tol(), Real.eps() * 2**15)


class TestRemezSystem(RemezTestCase):
    def test_system(self):
        pts = [Real(-1), Real(0), Real(1)]
        A, b = remez_system(pts, exp)
        self.assertEqual(A, [[1, -1, 1], [1, 0, -1], [1, 1, 1]])
        self.assertEqual(b, [exp(-1), 1, exp(1)])

    def test_weighted_system(self):
        pts = [Real(1), Real(2)]
        A, b = remez_system(pts, lambda x: x, weight=lambda x: 2*x)
        self.assertEqual(A[0], [1, Real("0.5")])
        self.assertEqual(A[1], [1, Real("-0.25")])

    def test_fit_alternates(self):
        pts = chebyshev_extrema(-1, 1, 6)
        fit = fit_polynomial(pts, exp)
        self.assertEqual(fit.degree, 4)
        E = fit.error
        for i, x in enumerate(pts):
            err = exp(x) - fit(x)
            self.assertRealAlmostEqual(err, E if i % 2 == 0 else -E,
                                       rel_tol=1e-60)

    def test_fit_exact_polynomial(self):
        pts = chebyshev_extrema(0, 2, 5)
        fit = fit_polynomial(pts, lambda x: 1 - 2*x + x**3)
        self.assertListAlmostEqual(fit.coeffs, [1, -2, 0, 1], delta=1e-60)
        self.assertLess(abs(fit.error), Real("1e-60"))


class TestPolynomialFit(RemezTestCase):
    def test_fit_object(self):
        fit = PolynomialFit([1, 2, 3], Real("-0.5"))
        self.assertEqual(fit.coeffs, (1, 2, 3))
        self.assertIsType(fit.coeffs[0], Real)
        self.assertEqual(fit.error, Real("-0.5"))
        self.assertEqual(fit.degree, 2)
        self.assertEqual(fit(2), 17)
        self.assertTrue(np.array_equal(fit.as_array(), [1.0, 2.0, 3.0]))
        self.assertEqual(repr(fit), "<PolynomialFit(degree=2, error=-0.5)>")
        with self.assertRaises(AttributeError):
            fit.foo = 1


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
