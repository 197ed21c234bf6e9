from __future__ import annotations

import unittest

from plotlayout.geometry import BoundingBox
from plotlayout.layout import solve_interior


REGION = BoundingBox(0.0, 400.0, 0.0, 300.0)


def _fixed_margin(bb: BoundingBox) -> BoundingBox:
    return bb.deform(top=2.0, bottom=2.0, left=2.0, right=2.0)


def _proportional_margin(bb: BoundingBox) -> BoundingBox:
    return bb.deform(left=0.1 * bb.width, bottom=0.1 * bb.height)


def _crowded_margin(bb: BoundingBox) -> BoundingBox:
    # the label column widens as the interior narrows; no interior fits 400 units
    return bb.deform(left=1e5 / max(bb.width, 1.0))


class SolveInteriorTests(unittest.TestCase):
    def test_fixed_margin_converges_after_one_adjustment(self) -> None:
        solution = solve_interior(_fixed_margin, REGION)
        self.assertTrue(solution.converged)
        self.assertEqual(solution.iterations, 1)
        interior = solution.interior
        self.assertAlmostEqual(interior.xmin, 1.978, places=3)
        self.assertAlmostEqual(interior.xmax, 398.022, places=3)
        self.assertAlmostEqual(interior.ymin, 1.978, places=3)
        self.assertAlmostEqual(interior.ymax, 298.022, places=3)

    def test_exterior_of_solution_fills_region(self) -> None:
        solution = solve_interior(_proportional_margin, REGION)
        self.assertTrue(solution.converged)
        self.assertLessEqual(solution.iterations, 10)
        ext = _proportional_margin(solution.interior)
        tol = 0.005 * REGION.diagonal()
        self.assertLess(abs(ext.xmin - REGION.xmin), tol)
        self.assertLess(abs(ext.ymin - REGION.ymin), tol)
        self.assertLess(abs(ext.xmax - REGION.xmax), tol)
        self.assertLess(abs(ext.ymax - REGION.ymax), tol)

    def test_no_furniture_needs_no_adjustment(self) -> None:
        solution = solve_interior(lambda bb: bb, REGION)
        self.assertEqual(solution.iterations, 0)
        self.assertEqual(solution.interior, REGION)

    def test_non_convergence_is_logged(self) -> None:
        with self.assertLogs("plotlayout.layout", level="WARNING") as logs:
            solution = solve_interior(_crowded_margin, REGION, max_iterations=3)
        self.assertFalse(solution.converged)
        self.assertEqual(solution.iterations, 3)
        self.assertIn("did not converge", logs.output[0])

    def test_aspect_ratio_is_applied_to_the_result(self) -> None:
        solution = solve_interior(_fixed_margin, REGION, aspect_ratio=1.0)
        interior = solution.interior
        self.assertAlmostEqual(interior.width, interior.height)
        self.assertAlmostEqual(interior.center.x, 200.0)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            solve_interior(_fixed_margin, BoundingBox(1.0, 1.0, 1.0, 1.0))
        with self.assertRaises(ValueError):
            solve_interior(_fixed_margin, REGION, max_iterations=0)


if __name__ == "__main__":
    unittest.main()
