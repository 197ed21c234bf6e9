from __future__ import annotations

import unittest

import numpy as np

from plotlayout.errors import DomainError
from plotlayout.ticks import (
    format_ticklabel,
    format_ticklabels,
    magform,
    subticks_linear,
    subticks_log,
    ticklist_linear,
    ticks_default_linear,
    ticks_default_log,
    ticks_num_linear,
    ticks_num_log,
)


class MagformTests(unittest.TestCase):
    def test_decomposes_into_mantissa_and_exponent(self) -> None:
        a, b = magform(2500.0)
        self.assertAlmostEqual(a, 2.5)
        self.assertEqual(b, 3)
        a, b = magform(-0.02)
        self.assertAlmostEqual(a, -2.0)
        self.assertEqual(b, -2)

    def test_exact_powers_of_ten(self) -> None:
        for x in (1.0, 10.0, 1000.0, 1e-3):
            a, _ = magform(x)
            self.assertGreaterEqual(a, 1.0)
            self.assertLess(a, 10.0)


class LinearTickTests(unittest.TestCase):
    def test_default_linear_zero_to_ten(self) -> None:
        np.testing.assert_allclose(ticks_default_linear((0.0, 10.0)), [0, 2, 4, 6, 8, 10])

    def test_default_linear_uses_five_bucket(self) -> None:
        np.testing.assert_allclose(ticks_default_linear((0.0, 25.0)), [0, 5, 10, 15, 20, 25])

    def test_ticklist_handles_descending_limits(self) -> None:
        np.testing.assert_allclose(ticklist_linear(10.0, 0.0, 5.0), [10.0, 5.0, 0.0])

    def test_ticklist_tolerates_rounding_at_the_ends(self) -> None:
        ticks = ticklist_linear(0.1 + 0.2, 0.9, 0.3)
        self.assertEqual(ticks.size, 3)

    def test_zero_separation_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ticklist_linear(0.0, 1.0, 0.0)

    def test_num_linear(self) -> None:
        np.testing.assert_allclose(ticks_num_linear((0.0, 1.0), 5), [0.0, 0.25, 0.5, 0.75, 1.0])
        with self.assertRaises(ValueError):
            ticks_num_linear((0.0, 1.0), 0)

    def test_subticks_divide_major_steps(self) -> None:
        sub = subticks_linear((0.0, 10.0), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])
        # a major step of 2 falls in the (1, 3.5) bucket: three subticks per step
        np.testing.assert_allclose(sub[:5], [0.0, 0.5, 1.0, 1.5, 2.0])
        self.assertEqual(sub.size, 21)

    def test_subticks_need_two_majors(self) -> None:
        self.assertEqual(subticks_linear((0.0, 1.0), [0.5]).size, 0)


class LogTickTests(unittest.TestCase):
    def test_one_to_hundred_gives_powers_of_ten(self) -> None:
        np.testing.assert_allclose(ticks_default_log((1.0, 100.0)), [1.0, 10.0, 100.0])

    def test_single_decade_falls_back_to_linear(self) -> None:
        # only 10 lies inside [2, 50]
        np.testing.assert_allclose(ticks_default_log((2.0, 50.0)), [10.0, 20.0, 30.0, 40.0, 50.0])

    def test_two_decades_give_powers_of_ten(self) -> None:
        np.testing.assert_allclose(ticks_default_log((1.0, 10.0)), [1.0, 10.0])

    def test_nine_decades_give_powers_of_ten(self) -> None:
        ticks = ticks_default_log((1.0, 1e8))
        np.testing.assert_allclose(ticks, [10.0**i for i in range(9)])

    def test_ten_decades_switch_to_log_space(self) -> None:
        ticks = ticks_default_log((1.0, 1e9))
        np.testing.assert_allclose(np.log10(ticks), [0, 2, 4, 6, 8])

    def test_twelve_decades(self) -> None:
        ticks = ticks_default_log((1.0, 1e12))
        np.testing.assert_allclose(np.log10(ticks), [0, 2, 4, 6, 8, 10, 12])

    def test_log_requires_positive_limits(self) -> None:
        with self.assertRaises(DomainError):
            ticks_default_log((0.0, 10.0))
        with self.assertRaises(DomainError):
            ticks_num_log((-1.0, 10.0), 3)

    def test_num_log(self) -> None:
        np.testing.assert_allclose(ticks_num_log((1.0, 100.0), 3), [1.0, 10.0, 100.0])

    def test_log_subticks_are_inside_limits(self) -> None:
        sub = subticks_log((1.0, 100.0), [1.0, 10.0, 100.0])
        self.assertEqual(sub[0], 1.0)
        self.assertEqual(sub[-1], 100.0)
        self.assertIn(20.0, sub.tolist())
        self.assertEqual(sub.size, 19)


class TickLabelTests(unittest.TestCase):
    def test_plain_values(self) -> None:
        self.assertEqual(format_ticklabel(1.5, 10.0), "1.5")
        self.assertEqual(format_ticklabel(20.0, 100.0), "20")
        self.assertEqual(format_ticklabel(-0.25, 1.0), "-0.25")
        self.assertEqual(format_ticklabel(0.0, 1.0), "0")

    def test_large_values_switch_to_scientific(self) -> None:
        self.assertEqual(format_ticklabel(12345678, 0), "1.23457×10^{7}")
        self.assertEqual(format_ticklabel(1e6, 0), "10^{6}")
        self.assertEqual(format_ticklabel(2e-7, 0), "2×10^{-7}")

    def test_small_range_uses_fixed_point(self) -> None:
        self.assertEqual(format_ticklabel(1.0000001, 2e-7), "1.0000001")

    def test_labels_for_tick_list(self) -> None:
        self.assertEqual(format_ticklabels([0.0, 2.0, 4.0]), ["0", "2", "4"])
        self.assertEqual(format_ticklabels([]), [])


if __name__ == "__main__":
    unittest.main()
