"""
Tile Colour Clustering – Seeded 5-means in L*a*b*
=================================================

Every tile sample is assigned to one of the five tags ``R G B Y W``.
Starting from the seed centres, each iteration:

  1. **Assign** – every sample goes to the nearest centre (squared
     Euclidean distance).  Centres are scanned in tag order and only a
     strictly smaller distance replaces the best so far, so an exact tie
     resolves to the tag declared first.
  2. **Update** – each centre becomes the mean of its members.  A tag
     that received no members keeps its previous centre.
  3. **Delta** – total squared movement of all five centres.
  4. **Commit** – the new centres replace the old ones.
  5. **Stop?** – ask the caller's ``progress(delta)`` callback, or, if
     none was given, stop once ``delta < delta_threshold``.

``max_iterations`` bounds the loop for inputs that never settle; hitting
it ends the run with ``converged=False`` instead of raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from blokus_vision.errors import InvalidInputError
from blokus_vision.models.colorspace import Color, average, distance_squared
from blokus_vision.models.palette import TAGS, SeedCenters

log = logging.getLogger(__name__)

ProgressCallback = Callable[[float], bool]

# Empirical threshold in L*a*b* units; not derived from anything.
DEFAULT_DELTA_THRESHOLD: float = 0.01
DEFAULT_MAX_ITERATIONS: int = 100


@dataclass
class ClusteringConfig:
    """Stopping policy for ``cluster_colors``.

    Parameters
    ----------
    delta_threshold : float
        Default stop condition when no progress callback is given.
    max_iterations : int, optional
        Hard bound on iterations; ``None`` disables it.
    """
    delta_threshold: float = DEFAULT_DELTA_THRESHOLD
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        if not math.isfinite(self.delta_threshold) or self.delta_threshold <= 0:
            raise InvalidInputError(
                f"delta_threshold must be a positive number, got {self.delta_threshold}"
            )
        if self.max_iterations is not None and self.max_iterations < 1:
            raise InvalidInputError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )


@dataclass
class ClusteringResult:
    """Outcome of one clustering run."""
    labels: List[str]                         # One tag per sample, input order
    centers: Tuple[Color, ...]                # Final L*a*b* centres, TAGS order
    iterations: int                           # Completed iterations
    deltas: List[float] = field(default_factory=list)
    converged: bool = True                    # False if max_iterations was hit
    board: List[List[str]] = field(default_factory=list)


# ── Helpers ────────────────────────────────────────────────────────────

def nearest_tag(sample: Sequence[float], centers: Sequence[Sequence[float]]) -> int:
    """Index of the centre closest to *sample*; the first wins on ties."""
    best_idx = 0
    best_dist = distance_squared(sample, centers[0])
    for idx in range(1, len(centers)):
        d = distance_squared(sample, centers[idx])
        if d < best_dist:
            best_idx, best_dist = idx, d
    return best_idx


def reshape_labels(labels: Sequence[str], width: int) -> List[List[str]]:
    """Split a flat row-major label sequence into rows of *width*."""
    n = len(labels)
    if width <= 0:
        raise InvalidInputError(f"Grid width must be positive, got {width}")
    if n % width != 0:
        raise InvalidInputError(
            f"Grid width {width} does not divide {n} samples"
        )
    return [list(labels[i:i + width]) for i in range(0, n, width)]


def validate_samples(samples: Sequence[Sequence[float]]) -> List[Color]:
    """Check that every sample is a triple of finite numbers."""
    if len(samples) == 0:
        raise InvalidInputError("No samples given")
    checked: List[Color] = []
    for i, s in enumerate(samples):
        if len(s) != 3:
            raise InvalidInputError(
                f"Sample {i} has {len(s)} components (expected 3)"
            )
        try:
            point = (float(s[0]), float(s[1]), float(s[2]))
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Sample {i} is not numeric: {s!r}") from exc
        if not all(math.isfinite(v) for v in point):
            raise InvalidInputError(f"Sample {i} is not finite: {point!r}")
        checked.append(point)
    return checked


# ── Public API ─────────────────────────────────────────────────────────

def cluster_colors(
    samples: Sequence[Sequence[float]],
    seeds: SeedCenters,
    width: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
    config: Optional[ClusteringConfig] = None,
) -> ClusteringResult:
    """Classify L*a*b* samples into the five tile tags.

    Parameters
    ----------
    samples : sequence of (L, a, b)
        Row-major tile samples, already in L*a*b*.
    seeds : SeedCenters
        Initial centres, e.g. ``default_seed_centers()``.
    width : int, optional
        Board width used to reshape the labels.  Defaults to a single row.
    progress : callable, optional
        ``progress(delta) -> bool`` called after every iteration; a truthy
        return stops clustering.  Replaces the default delta threshold.
    config : ClusteringConfig, optional
        Threshold and iteration cap.

    Returns
    -------
    ClusteringResult
    """
    config = config or ClusteringConfig()
    points = validate_samples(samples)
    if width is None:
        width = len(points)
    reshape_labels(points, width)  # fail before doing any work

    centers: List[Color] = list(seeds.centers)
    labels: List[str] = []
    deltas: List[float] = []
    converged = False

    while True:
        members: List[List[Color]] = [[] for _ in TAGS]
        labels = []
        for p in points:
            idx = nearest_tag(p, centers)
            members[idx].append(p)
            labels.append(TAGS[idx])

        new_centers: List[Color] = []
        for tag, old, group in zip(TAGS, centers, members):
            if group:
                new_centers.append(average(group))
            else:
                log.debug("Tag %s has no members; keeping its centre", tag)
                new_centers.append(old)

        delta = sum(distance_squared(o, c) for o, c in zip(centers, new_centers))
        centers = new_centers
        deltas.append(delta)
        log.debug("Iteration %d: delta=%.6f", len(deltas), delta)

        if progress is not None:
            stop = progress(delta)
        else:
            stop = delta < config.delta_threshold
        if stop:
            converged = True
            break

        if config.max_iterations is not None and len(deltas) >= config.max_iterations:
            log.warning(
                "Clustering stopped after %d iterations without converging "
                "(last delta=%.6f)", len(deltas), delta,
            )
            break

    return ClusteringResult(
        labels=labels,
        centers=tuple(centers),
        iterations=len(deltas),
        deltas=deltas,
        converged=converged,
        board=reshape_labels(labels, width),
    )
