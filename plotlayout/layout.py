from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from plotlayout.geometry import BoundingBox


LOGGER = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.005
DEFAULT_MAX_ITERATIONS = 10


@dataclass(frozen=True)
class LayoutSolution:
    interior: BoundingBox
    iterations: int
    converged: bool


def solve_interior(
    exterior_fn: Callable[[BoundingBox], BoundingBox],
    exterior_region: BoundingBox,
    *,
    aspect_ratio: float | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> LayoutSolution:
    """Find the interior box whose furniture exactly fills `exterior_region`.

    `exterior_fn` maps a candidate interior to the bounding box of the
    interior plus everything drawn around it. Each round moves the interior's
    corners by the corner residuals, damped by the ratio of interior to
    exterior diagonal. ``iterations`` counts those adjustments.
    """
    region_diagonal = exterior_region.diagonal()
    if region_diagonal <= 0:
        raise ValueError("exterior region must have a non-zero diagonal")
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    interior = exterior_region
    for i in range(max_iterations):
        bb = exterior_fn(interior)
        dll = exterior_region.lowerleft - bb.lowerleft
        dur = exterior_region.upperright - bb.upperright

        if dll.norm() / region_diagonal < tolerance and dur.norm() / region_diagonal < tolerance:
            if aspect_ratio is not None:
                interior = interior.make_aspect_ratio(aspect_ratio)
            return LayoutSolution(interior=interior, iterations=i, converged=True)

        outer_diagonal = bb.diagonal()
        scale = interior.diagonal() / outer_diagonal if outer_diagonal > 0 else 1.0
        interior = BoundingBox.from_points(
            interior.lowerleft + scale * dll,
            interior.upperright + scale * dur,
        )

    LOGGER.warning(
        "layout did not converge after %d iterations; using best-effort interior %s",
        max_iterations,
        interior,
    )
    return LayoutSolution(interior=interior, iterations=max_iterations, converged=False)
