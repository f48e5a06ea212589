"""
Colour Space – sRGB ↔ CIE L*a*b* (D65)
======================================

Clustering happens in L*a*b* because Euclidean distance there follows
perceived colour difference far better than in RGB.

Conversion follows the easyrgb.com formulas:

  sRGB (0..1, gamma encoded)
    → linear RGB ×100   (inverse sRGB gamma, knee at 0.04045)
    → XYZ               (sRGB primaries matrix)
    → X/Xn, Y/Yn, Z/Zn  (D65 daylight white)
    → L*, a*, b*        (cube root, linear segment below 0.008856)

``lab_to_rgb`` walks the same chain backwards.  The XYZ → RGB matrix is
the exact inverse of the forward matrix, not the usual four-digit
rounded table, so a round trip reconstructs the input to well below
1e-4 per channel.

No range checks are made: out-of-gamut values simply propagate through
the arithmetic.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from blokus_vision.errors import InvalidInputError

Color = Tuple[float, float, float]


# ── Constants ──────────────────────────────────────────────────────────

# D65 (daylight) reference white, in the ×100 scale used below
WHITE_D65: Color = (95.047, 100.000, 108.883)

_RGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)

_RGB_TO_XYZ_ROWS: list[list[float]] = _RGB_TO_XYZ.tolist()
_XYZ_TO_RGB_ROWS: list[list[float]] = _XYZ_TO_RGB.tolist()

# sRGB transfer function
_GAMMA_KNEE = 0.04045
_LINEAR_KNEE = 0.0031308
_GAMMA_SLOPE = 12.92
_GAMMA_OFFSET = 0.055
_GAMMA_SCALE = 1.055
_GAMMA_EXP = 2.4

# L*a*b* companding
_LAB_EPSILON = 0.008856
_LAB_KAPPA = 7.787
_LAB_OFFSET = 0.13793


# ── Transfer helpers ───────────────────────────────────────────────────

def _srgb_to_linear(c: float) -> float:
    if c > _GAMMA_KNEE:
        return ((c + _GAMMA_OFFSET) / _GAMMA_SCALE) ** _GAMMA_EXP
    return c / _GAMMA_SLOPE


def _linear_to_srgb(c: float) -> float:
    if c > _LINEAR_KNEE:
        return _GAMMA_SCALE * c ** (1 / _GAMMA_EXP) - _GAMMA_OFFSET
    return _GAMMA_SLOPE * c


def _lab_f(t: float) -> float:
    if t > _LAB_EPSILON:
        return t ** (1 / 3)
    return _LAB_KAPPA * t + _LAB_OFFSET


def _lab_f_inv(t: float) -> float:
    cube = t ** 3
    if cube > _LAB_EPSILON:
        return cube
    return (t - _LAB_OFFSET) / _LAB_KAPPA


def _mat3(rows: list[list[float]], v: Sequence[float]) -> Color:
    return (
        rows[0][0] * v[0] + rows[0][1] * v[1] + rows[0][2] * v[2],
        rows[1][0] * v[0] + rows[1][1] * v[1] + rows[1][2] * v[2],
        rows[2][0] * v[0] + rows[2][1] * v[1] + rows[2][2] * v[2],
    )


# ── Public API ─────────────────────────────────────────────────────────

def rgb_to_lab(r: float, g: float, b: float) -> Color:
    """Convert a gamma-encoded RGB triple in [0, 1] to ``(L, a, b)``."""
    linear = [100 * _srgb_to_linear(c) for c in (r, g, b)]
    x, y, z = _mat3(_RGB_TO_XYZ_ROWS, linear)

    fx = _lab_f(x / WHITE_D65[0])
    fy = _lab_f(y / WHITE_D65[1])
    fz = _lab_f(z / WHITE_D65[2])

    return (116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz))


def lab_to_rgb(L: float, a: float, b: float) -> Color:
    """Convert ``(L, a, b)`` back to a gamma-encoded RGB triple.

    Only used to present converged centres; results may fall slightly
    outside [0, 1] for colours outside the sRGB gamut.
    """
    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    xyz = (
        _lab_f_inv(fx) * WHITE_D65[0] / 100,
        _lab_f_inv(fy) * WHITE_D65[1] / 100,
        _lab_f_inv(fz) * WHITE_D65[2] / 100,
    )
    r, g, bl = _mat3(_XYZ_TO_RGB_ROWS, xyz)
    return (_linear_to_srgb(r), _linear_to_srgb(g), _linear_to_srgb(bl))


def distance_squared(c1: Sequence[float], c2: Sequence[float]) -> float:
    """Squared Euclidean distance between two points of equal length."""
    if len(c1) != len(c2):
        raise InvalidInputError(
            f"Cannot compare points of length {len(c1)} and {len(c2)}"
        )
    return sum((p - q) ** 2 for p, q in zip(c1, c2))


def average(points: Sequence[Sequence[float]]) -> Tuple[float, ...]:
    """Coordinate-wise mean of *points*.

    Raises
    ------
    InvalidInputError
        If *points* is empty or the points differ in length.
    """
    if len(points) == 0:
        raise InvalidInputError("Cannot average an empty collection of points")

    dim = len(points[0])
    sums = [0.0] * dim
    for p in points:
        if len(p) != dim:
            raise InvalidInputError(
                f"Cannot average points of length {dim} and {len(p)}"
            )
        for i, v in enumerate(p):
            sums[i] += v

    n = len(points)
    return tuple(s / n for s in sums)
