from __future__ import annotations

from decimal import Decimal
import math
from typing import Sequence

import numpy as np

from plotlayout.errors import DomainError


TICK_TOLERANCE = 1e-10
MAX_SIGNIFICANT_DIGITS = 5
FIXED_POINT_RANGE = 1e-6

Limits = tuple[float, float]


def magform(x: float) -> tuple[float, int]:
    """Split `x` into ``(a, b)`` with ``x == a * 10**b`` and ``1 <= |a| < 10``."""
    if x == 0:
        return 0.0, 0
    frac, whole = math.modf(math.log10(abs(x)))
    a = 10.0**frac
    b = int(whole)
    if a < 1.0:
        a, b = a * 10.0, b - 1
    if a >= 10.0:
        a, b = a / 10.0, b + 1
    if x < 0:
        a = -a
    return a, b


def ticklist_linear(lo: float, hi: float, sep: float, origin: float = 0.0) -> np.ndarray:
    if sep == 0:
        raise ValueError("tick separation must be non-zero")
    lo_n = (lo - origin) / sep
    hi_n = (hi - origin) / sep
    if lo_n <= hi_n:
        first = math.ceil(lo_n - TICK_TOLERANCE)
        last = math.floor(hi_n + TICK_TOLERANCE)
        steps = range(first, last + 1)
    else:
        first = math.floor(lo_n + TICK_TOLERANCE)
        last = math.ceil(hi_n - TICK_TOLERANCE)
        steps = range(first, last - 1, -1)
    return np.asarray([origin + i * sep for i in steps], dtype=np.float64)


def _nice_step(span: float) -> float:
    a, b = magform(abs(span) / 5.0)
    if a < 1.5:
        x = 1.0
    elif a < 3.5:
        x = 2.0
    elif a < 7.5:
        x = 5.0
    else:
        x = 10.0
    return x * 10.0**b


def ticks_default_linear(lim: Limits) -> np.ndarray:
    lo, hi = float(lim[0]), float(lim[1])
    return ticklist_linear(lo, hi, _nice_step(hi - lo))


def _decades(lim: Limits) -> tuple[float, float, int, int, int]:
    lo, hi = sorted((float(lim[0]), float(lim[1])))
    if lo <= 0:
        raise DomainError(f"log axis limits must be > 0, got {lim!r}")
    nlo = math.ceil(math.log10(lo))
    nhi = math.floor(math.log10(hi))
    return lo, hi, nlo, nhi, nhi - nlo + 1


def ticks_default_log(lim: Limits) -> np.ndarray:
    _, _, nlo, nhi, nn = _decades(lim)
    if nn >= 10:
        log_lim = (math.log10(lim[0]), math.log10(lim[1]))
        return 10.0 ** ticks_default_linear(log_lim)
    if nn >= 2:
        return np.asarray([10.0**i for i in range(nlo, nhi + 1)], dtype=np.float64)
    return ticks_default_linear(lim)


def ticks_num_linear(lim: Limits, num: int) -> np.ndarray:
    if num < 1:
        raise ValueError("number of ticks must be >= 1")
    if num == 1:
        return np.asarray([float(lim[0])], dtype=np.float64)
    return np.linspace(float(lim[0]), float(lim[1]), num)


def ticks_num_log(lim: Limits, num: int) -> np.ndarray:
    _decades(lim)
    return 10.0 ** ticks_num_linear((math.log10(lim[0]), math.log10(lim[1])), num)


def subticks_linear(lim: Limits, ticks: Sequence[float] | np.ndarray, num: int | None = None) -> np.ndarray:
    majors = np.asarray(ticks, dtype=np.float64)
    if majors.size < 2:
        return np.empty(0, dtype=np.float64)
    major_div = (majors[-1] - majors[0]) / (majors.size - 1)
    if major_div == 0:
        return np.empty(0, dtype=np.float64)
    if num is None:
        num = 4
        a, _ = magform(major_div)
        if 1.0 < abs(a) < 3.5:
            num = 3
    minor_div = major_div / (num + 1)
    return ticklist_linear(float(lim[0]), float(lim[1]), minor_div, float(majors[0]))


def subticks_log(lim: Limits, ticks: Sequence[float] | np.ndarray, num: int | None = None) -> np.ndarray:
    lo, hi, nlo, nhi, nn = _decades(lim)
    if nn >= 10:
        log_lim = (math.log10(lim[0]), math.log10(lim[1]))
        majors = np.log10(np.asarray(ticks, dtype=np.float64))
        return 10.0 ** subticks_linear(log_lim, majors, num)
    if nn >= 2:
        minor = [j * 10.0**i for i in range(nlo - 1, nhi + 1) for j in range(1, 10)]
        return np.asarray([z for z in minor if lo <= z <= hi], dtype=np.float64)
    return subticks_linear(lim, ticks, num)


def format_ticklabel(x: float, label_range: float = 0.0) -> str:
    value = float(x)
    if value == 0:
        return "0"
    if not math.isfinite(value):
        return str(value)
    sign = "-" if value < 0 else ""
    digits, point = _shortest_digits(abs(value))
    if len(digits) > MAX_SIGNIFICANT_DIGITS:
        digits, point = _precision_digits(abs(value), MAX_SIGNIFICANT_DIGITS + 1)
    exponent = point - 1
    if abs(exponent) > 4:
        if digits == "1":
            return f"{sign}10^{{{exponent}}}"
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{sign}{mantissa}×10^{{{exponent}}}"
    if 0 < label_range < FIXED_POINT_RANGE:
        _, b = magform(label_range)
        return f"{value:.{abs(b)}f}"
    return sign + _plain(digits, point)


def format_ticklabels(ticks: Sequence[float] | np.ndarray) -> list[str]:
    values = np.asarray(ticks, dtype=np.float64)
    if values.size == 0:
        return []
    label_range = float(values.max() - values.min())
    return [format_ticklabel(v, label_range) for v in values.tolist()]


def _shortest_digits(value: float) -> tuple[str, int]:
    # repr() is the shortest string that round-trips
    _, raw, exp = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in raw).lstrip("0")
    stripped = digits.rstrip("0")
    exp = int(exp) + (len(digits) - len(stripped))
    digits = stripped or "0"
    return digits, len(digits) + exp


def _precision_digits(value: float, precision: int) -> tuple[str, int]:
    mantissa, _, exp = f"{value:.{precision - 1}e}".partition("e")
    digits = mantissa.replace(".", "").rstrip("0") or "0"
    return digits, int(exp) + 1


def _plain(digits: str, point: int) -> str:
    if point <= 0:
        return "0." + "0" * (-point) + digits
    if point >= len(digits):
        return digits + "0" * (point - len(digits))
    return digits[:point] + "." + digits[point:]
