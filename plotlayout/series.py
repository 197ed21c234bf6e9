from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    source_name: str | None = None

    def segments(self) -> list[tuple[np.ndarray, np.ndarray]]:
        """Runs of consecutive finite points; non-finite samples split the series."""
        out: list[tuple[np.ndarray, np.ndarray]] = []
        idx = np.flatnonzero(self.mask)
        if idx.size == 0:
            return out
        breaks = np.flatnonzero(np.diff(idx) > 1) + 1
        for run in np.split(idx, breaks):
            out.append((self.x[run], self.y[run]))
        return out
