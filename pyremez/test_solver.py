#!/usr/bin/env python3

import unittest
import sys
from contextlib import redirect_stdout
from io import StringIO

from testutils import RemezTestCase, slowtest
from .common import ConfigError, DomainError
from .real import Real, exp, get_precision
from .numutils import StepLimitExceeded, SingularSystemError
from .exprs import Expression, ParseError
from .solver import RemezSolver, SolverState, PrintFormat


def _solved(*args, **kw):
    solver = RemezSolver(*args, **kw)
    solver.do_init()
    while solver.do_step():
        pass
    return solver


class TestConfiguration(RemezTestCase):
    def test_defaults(self):
        solver = RemezSolver()
        self.assertIs(solver.state, SolverState.UNINITIALIZED)
        self.assertEqual(solver.order, 4)
        self.assertIsNone(solver.func)
        self.assertEqual(solver.weight, Expression.constant(1))
        self.assertIsNone(solver.control_points)
        self.assertIsNone(solver.coeffs)
        self.assertEqual(solver.iteration, 0)
        self.assertEqual(solver.max_steps, 50)
        solver.set_func("exp(x)")
        solver.do_init()
        self.assertEqual((solver.xmin, solver.xmax), (-1, 1))
        self.assertEqual(solver.tol, Real.ldexp(1, -(get_precision()//3)))
        self.assertEqual(len(solver.control_points), 6)

    def test_order(self):
        solver = RemezSolver()
        solver.set_order(7)
        self.assertEqual(solver.order, 7)
        for order in (0, -1, 2.5, "3", True):
            with self.assertRaises(ConfigError, msg=repr(order)):
                solver.set_order(order)

    def test_range(self):
        solver = RemezSolver()
        solver.set_range("0", "pi/4")
        self.assertEqual(solver.xmin, 0)
        self.assertEqual(solver.xmax, Real.pi()/4)
        solver.set_range(Real(-2), 3)
        self.assertEqual((solver.xmin, solver.xmax), (-2, 3))
        with self.assertRaises(ConfigError):
            solver.set_range(1, 0)
        with self.assertRaises(ConfigError):
            solver.set_range(1, 1)
        with self.assertRaises(ConfigError):
            solver.set_range("x", 1)
        with self.assertRaises(ConfigError):
            solver.set_range(0, Real.inf())
        with self.assertRaises(ParseError):
            solver.set_range("1+", 2)
        # Failed attempts leave the previous range in place.
        self.assertEqual((solver.xmin, solver.xmax), (-2, 3))

    def test_functions(self):
        solver = RemezSolver(func="atan(exp(1+x))", weight="exp(1+x)")
        self.assertEqual(str(solver.func), "atan(exp(1+x))")
        self.assertEqual(str(solver.weight), "exp(1+x)")
        solver.set_weight(None)
        self.assertEqual(solver.weight, Expression.constant(1))
        with self.assertRaises(ParseError):
            solver.set_func("atan(")
        with self.assertRaises(ParseError):
            solver.set_func("foo(x)")

    def test_max_steps(self):
        for value in (0, -3, 2.0, None):
            with self.assertRaises(ConfigError):
                RemezSolver(max_steps=value)

    def test_init(self):
        solver = RemezSolver()
        with self.assertRaises(ConfigError):
            solver.do_init()
        with self.assertRaises(ConfigError):
            solver.do_step()
        with self.assertRaises(ConfigError):
            solver.do_print(PrintFormat.PROGRESS)
        solver.set_func("sin(x)")
        solver.do_init()
        self.assertIs(solver.state, SolverState.INITIALIZED)
        with self.assertRaises(ConfigError):
            solver.do_init()
        with self.assertRaises(ConfigError):
            solver.set_order(3)
        with self.assertRaises(ConfigError):
            solver.set_range(0, 1)
        with self.assertRaises(ConfigError):
            solver.set_func("cos(x)")
        with self.assertRaises(ConfigError):
            solver.set_weight("x")
        with self.assertRaises(ConfigError):
            solver.do_print(PrintFormat.RESULT)

    def test_initial_points(self):
        solver = RemezSolver(order=2, xrange=(0, 2), func="x")
        solver.do_init()
        pts = solver.control_points
        self.assertEqual(pts[0], 0)
        self.assertEqual(pts[-1], 2)
        self.assertRealAlmostEqual(pts[1], Real("0.5"))
        self.assertRealAlmostEqual(pts[2], Real("1.5"))


class TestSolver(RemezTestCase):
    def _assert_equioscillation(self, solver, rel_tol=1e-20):
        ys = solver.control_values
        self.assertEqual(len(ys), solver.order + 2)
        E = solver.error
        for i, y in enumerate(ys):
            self.assertEqual(y.sign(), -ys[i-1].sign() if i else y.sign())
            self.assertRealAlmostEqual(abs(y), E, rel_tol=rel_tol)
        self.assertRealAlmostEqual(solver.peak_error, E, rel_tol=rel_tol)

    def test_atan_exp(self):
        solver = _solved(order=4, xrange=(-1, 1), func="atan(exp(1+x))")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertIsNone(solver.failure)
        self.assertLess(solver.iteration, 20)
        self.assertLessEqual(solver.delta, solver.tol)
        self.assertEqual(len(solver.coeffs), 5)
        self.assertEqual(len(solver.control_points), 6)
        self._assert_equioscillation(solver)
        xs = solver.control_points
        self.assertEqual((xs[0], xs[-1]), (-1, 1))
        for a, b in zip(xs[:-1], xs[1:]):
            self.assertLess(a, b)
        self.assertLess(solver.error, Real("1e-2"))
        self.assertGreater(solver.error, 0)

    def test_verify(self):
        solver = _solved(order=4, func="atan(exp(1+x))")
        x, peak = solver.verify()
        self.assertAlmostEqual(peak / float(solver.error), 1.0, delta=1e-6)
        self.assertTrue(-1 <= x <= 1)

    def test_known_solution(self):
        # Best linear approximation of x^2 on [0, 1] is x - 1/8.
        solver = _solved(order=1, xrange=(0, 1), func="x^2")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertListAlmostEqual(solver.coeffs, [-0.125, 1], delta=1e-30)
        self.assertRealAlmostEqual(solver.error, Real("0.125"))
        self.assertRealAlmostEqual(solver.fit.error, Real("0.125"))

    def test_higher_degree_is_better(self):
        e2 = _solved(order=2, func="exp(x)").error
        e4 = _solved(order=4, func="exp(x)").error
        self.assertLess(e4, e2 / 20)

    def test_exact_fit(self):
        solver = _solved(order=2, xrange=(0, 1), func="x")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertEqual(solver.iteration, 1)
        self.assertListAlmostEqual(solver.coeffs, [0, 1, 0], delta=1e-60)
        self.assertLess(solver.error, Real("1e-60"))
        solver = _solved(order=3, xrange=(-2, 1), func="1 - x + 3*x^3")
        self.assertEqual(solver.iteration, 1)
        self.assertListAlmostEqual(solver.coeffs, [1, -1, 0, 3], delta=1e-60)

    def _sampled_peak(self, solver, num=401):
        err = solver.error_function()
        a, b = solver.xmin, solver.xmax
        return max(abs(err(a + (b - a) * i / (num - 1))) for i in range(num))

    def test_symmetric_parity(self):
        # Symmetric control points level these to interpolants with E = 0.
        for func, order in [("cos(x)", 4), ("x^4", 2), ("sin(x)", 3),
                            ("x^3 - x", 1)]:
            with self.subTest(func=func, order=order):
                solver = _solved(order=order, xrange=(-1, 1), func=func)
                self.assertIs(solver.state, SolverState.CONVERGED)
                self.assertGreater(solver.iteration, 1)
                self.assertGreater(solver.error, Real("1e-8"))
                self.assertLessEqual(self._sampled_peak(solver),
                                     solver.peak_error * (1 + Real("1e-6")))

    def test_symmetric_parity_known_solutions(self):
        # x^4 - (x^2 - 1/8) = T_4(x)/8
        solver = _solved(order=2, xrange=(-1, 1), func="x^4")
        self.assertRealAlmostEqual(solver.error, Real("0.125"), rel_tol=1e-10)
        self.assertListAlmostEqual(solver.coeffs, [-0.125, 0, 1], delta=1e-10)
        # x^3 - x - (-x/4) = T_3(x)/4
        solver = _solved(order=1, xrange=(-1, 1), func="x^3 - x")
        self.assertRealAlmostEqual(solver.error, Real("0.25"), rel_tol=1e-10)
        self.assertListAlmostEqual(solver.coeffs, [0, -0.25], delta=1e-10)
        self.assertRealAlmostEqual(self._sampled_peak(solver), Real("0.25"),
                                   rel_tol=1e-10)

    def test_numerical_failure(self):
        solver = RemezSolver(order=2, xrange=(-1, 1), func="exp(x)",
                             pivot_tol=1)
        solver.do_init()
        self.assertFalse(solver.do_step())
        self.assertIs(solver.state, SolverState.FAILED)
        self.assertIsInstance(solver.failure, SingularSystemError)
        self.assertEqual(solver.iteration, 0)
        self.assertIsNone(solver.fit)
        self.assertFalse(solver.do_step())
        self.assertIs(solver.state, SolverState.FAILED)
        self.assertEqual(solver.iteration, 0)
        with self.assertRaises(SingularSystemError):
            RemezSolver(order=2, func="exp(x)", pivot_tol=1).solve()

    def test_constant_target(self):
        solver = _solved(order=3, func="2")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertEqual(solver.iteration, 1)
        self.assertListAlmostEqual(solver.coeffs, [2, 0, 0, 0], delta=1e-60)
        solver = _solved(order=1, func="0")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertEqual(solver.error, 0)

    def test_weight(self):
        # Relative error approximation of exp(x).
        solver = _solved(order=3, xrange=(0, 1), func="exp(x)",
                         weight="exp(-x)")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self._assert_equioscillation(solver)
        fit = solver.fit
        for i in range(101):
            x = Real(i) / 100
            rel = abs(exp(x) - fit(x)) / exp(x)
            self.assertLessEqual(rel, solver.error * (1 + Real("1e-6")))

    def test_terminal_step(self):
        solver = _solved(order=3, func="sin(x)")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertTrue(solver.state.terminal)
        coeffs, it = solver.coeffs, solver.iteration
        pts = solver.control_points
        self.assertFalse(solver.do_step())
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertEqual(solver.coeffs, coeffs)
        self.assertEqual(solver.iteration, it)
        self.assertIs(solver.control_points, pts)

    def test_domain_failure(self):
        solver = RemezSolver(order=1, xrange=(-1, 1), func="1/x")
        solver.do_init()
        self.assertFalse(solver.do_step())
        self.assertIs(solver.state, SolverState.FAILED)
        self.assertIsInstance(solver.failure, DomainError)
        self.assertIsNone(solver.fit)
        self.assertFalse(solver.do_step())
        with self.assertRaises(DomainError):
            RemezSolver(func="log(x)").solve()

    def test_step_limit(self):
        solver = _solved(order=4, func="atan(exp(1+x))", max_steps=2)
        self.assertIs(solver.state, SolverState.FAILED)
        self.assertIsInstance(solver.failure, StepLimitExceeded)
        self.assertEqual(solver.iteration, 2)
        # The last fit stays available.
        self.assertEqual(len(solver.coeffs), 5)

    def test_solve(self):
        solver = RemezSolver(order=2, xrange=(0, 1), func="x^3")
        coeffs = solver.solve()
        self.assertIs(solver.state, SolverState.CONVERGED)
        self.assertEqual(coeffs, solver.coeffs)

    def test_verbose(self):
        out = StringIO()
        with redirect_stdout(out):
            _solved(order=1, xrange=(0, 1), func="x^2", verbose=True)
        lines = out.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("Approximating f(x) = x^2"))
        self.assertEqual(lines[-1], "Converged after 2 steps")

    def test_repr(self):
        solver = RemezSolver(order=3)
        self.assertEqual(repr(solver),
                         "<RemezSolver(order=3, state=uninitialized, "
                         "iteration=0)>")

    @slowtest
    def test_high_degree(self):
        solver = _solved(order=12, xrange=(0, "pi/2"), func="sin(x)")
        self.assertIs(solver.state, SolverState.CONVERGED)
        self._assert_equioscillation(solver)
        self.assertLess(solver.error, Real("1e-12"))


class TestPrint(RemezTestCase):
    def setUp(self):
        self.solver = RemezSolver(order=2, xrange=(0, 1), func="exp(x)")
        self.solver.do_init()

    def _output(self, *args, **kw):
        out = StringIO()
        self.solver.do_print(*args, file=out, **kw)
        return out.getvalue()

    def test_progress(self):
        text = self._output(PrintFormat.PROGRESS)
        lines = text.split("\n")
        self.assertEqual(lines[0], "# iteration 0")
        self.assertEqual(len(lines), 1 + 4 + 2)
        self.assertEqual(lines[1], "0.0e+0")
        self.solver.do_step()
        text = self._output("progress", digits=10)
        lines = text.split("\n")
        self.assertTrue(lines[0].startswith("# iteration 1, error "))
        self.assertEqual(len(lines[1].split()), 2)
        self.assertEqual(lines[-2:], ["", ""])

    def test_result(self):
        while self.solver.do_step():
            pass
        text = self._output(PrintFormat.RESULT, digits=8, ctype="float")
        lines = text.splitlines()
        self.assertEqual(lines[0], "// Approximation of f(x) = exp(x)")
        self.assertIn("// on interval [ 0.0, 1.0 ]", lines)
        self.assertIn("// with a polynomial of degree 2.", lines)
        self.assertTrue(any(l.startswith("// peak error: ") for l in lines))
        self.assertIn("float f(float x)", lines)
        self.assertEqual(lines[-1], "}")
        self.assertTrue(lines[-2].startswith("    return u * x "))

    def test_print_does_not_change_state(self):
        self.solver.do_step()
        state, it = self.solver.state, self.solver.iteration
        self._output(PrintFormat.PROGRESS)
        self._output(PrintFormat.RESULT)
        self.assertIs(self.solver.state, state)
        self.assertEqual(self.solver.iteration, it)

    def test_invalid_format(self):
        with self.assertRaises(ValueError):
            self._output("latex")


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
