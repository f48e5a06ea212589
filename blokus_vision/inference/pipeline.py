"""
Inference Pipeline – Board Image → Tile Colours
===============================================

Single-call entry point tying the stages together:

  1. Sampling        – one RGB sample per tile (``sample_board``)
  2. Lab conversion  – every sample to L*a*b*
  3. Clustering      – seeded 5-means (``cluster_colors``)
  4. Result          – board of tags + converged centres in RGB

The seed centres are an explicit constructor argument; when omitted the
process-wide cached ``default_seed_centers()`` are used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from blokus_vision.inference.clustering import (
    ClusteringConfig,
    ProgressCallback,
    cluster_colors,
    validate_samples,
)
from blokus_vision.inference.sampling import GRID_SIZE, sample_board
from blokus_vision.models.colorspace import Color, lab_to_rgb, rgb_to_lab
from blokus_vision.models.palette import TAGS, SeedCenters, default_seed_centers, rgb_to_hex

log = logging.getLogger(__name__)


# ── Result dataclass ──────────────────────────────────────────────────

@dataclass
class BoardResult:
    """Full output of the board colour pipeline."""
    board: List[List[str]]                 # Rows of R/G/B/Y/W tags
    centers_rgb: Dict[str, Color]          # Converged centres, keyed by tag
    iterations: int                        # Clustering iterations run
    deltas: List[float]                    # Per-iteration centre movement
    converged: bool                        # False if the iteration cap hit

    def to_dict(self) -> Dict:
        """JSON-friendly representation."""
        return {
            "board": ["".join(row) for row in self.board],
            "centers": {
                tag: rgb_to_hex(self.centers_rgb[tag]) for tag in TAGS
            },
            "iterations": self.iterations,
            "converged": self.converged,
            "deltas": [round(d, 6) for d in self.deltas],
        }


# ── Pipeline class ─────────────────────────────────────────────────────

class BoardColorPipeline:
    """End-to-end pixelated board image → tile colour pipeline.

    Parameters
    ----------
    seeds : SeedCenters, optional
        Initial cluster centres.  Defaults to the built-in swatches.
    rows, cols : int
        Board size in tiles (default 20×20).
    config : ClusteringConfig, optional
        Stopping policy for the clustering engine.
    """

    def __init__(
        self,
        seeds: Optional[SeedCenters] = None,
        rows: int = GRID_SIZE,
        cols: int = GRID_SIZE,
        config: Optional[ClusteringConfig] = None,
    ) -> None:
        self.seeds = seeds if seeds is not None else default_seed_centers()
        self.rows = rows
        self.cols = cols
        self.config = config or ClusteringConfig()

        log.info(
            "Pipeline ready  board=%dx%d  threshold=%s  max_iterations=%s",
            self.rows, self.cols,
            self.config.delta_threshold, self.config.max_iterations,
        )

    # ── Public API ─────────────────────────────────────────────────────

    def recognize(
        self,
        image: np.ndarray,
        progress: Optional[ProgressCallback] = None,
    ) -> BoardResult:
        """Classify every tile of a cropped, pixelated board image."""
        samples, width = sample_board(image, rows=self.rows, cols=self.cols)
        return self.classify_samples(samples, width, progress=progress)

    def classify_samples(
        self,
        samples: Sequence[Sequence[float]],
        width: int,
        progress: Optional[ProgressCallback] = None,
    ) -> BoardResult:
        """Classify row-major RGB samples (each channel in [0, 1])."""
        lab = [rgb_to_lab(*s) for s in validate_samples(samples)]
        result = cluster_colors(
            lab, self.seeds, width=width, progress=progress, config=self.config,
        )
        log.info(
            "Clustering finished after %d iteration(s)  converged=%s",
            result.iterations, result.converged,
        )
        return BoardResult(
            board=result.board,
            centers_rgb={
                tag: lab_to_rgb(*c) for tag, c in zip(TAGS, result.centers)
            },
            iterations=result.iterations,
            deltas=result.deltas,
            converged=result.converged,
        )
