"""Escape-time computation and smooth polynomial palette."""

from __future__ import annotations

import numpy as np

INTERIOR_COLOR = 0xFF000000


def escape_counts(
    center: tuple[float, float],
    span: tuple[float, float],
    width: int,
    height: int,
    max_iterations: int,
) -> np.ndarray:
    """Iterate ``z <- z^2 + c`` for every sample and return iteration counts.

    Samples are spread linearly across ``center +/- span / 2`` including both
    edges. A sample stops counting once ``|z|^2 > 4``; samples that never
    escape end with ``max_iterations``.
    """
    min_x = center[0] - span[0] / 2.0
    min_y = center[1] - span[1] / 2.0
    xs = min_x + span[0] * (np.arange(width, dtype=np.float64) / max(width - 1, 1))
    ys = min_y + span[1] * (np.arange(height, dtype=np.float64) / max(height - 1, 1))
    c_re, c_im = np.meshgrid(xs, ys)

    z_re = np.zeros_like(c_re)
    z_im = np.zeros_like(c_im)
    counts = np.zeros(c_re.shape, dtype=np.int64)
    active = np.ones(c_re.shape, dtype=bool)

    for _ in range(max_iterations):
        active &= (z_re * z_re + z_im * z_im) <= 4.0
        if not active.any():
            break
        # Escaped samples are frozen so their values never overflow.
        next_re = np.where(active, z_re * z_re - z_im * z_im + c_re, z_re)
        z_im = np.where(active, 2.0 * z_re * z_im + c_im, z_im)
        z_re = next_re
        counts += active
    return counts


def colorize(counts: np.ndarray, max_iterations: int) -> np.ndarray:
    """Map iteration counts to ARGB ``uint32`` colors."""
    t = np.clip(counts / float(max_iterations), 0.0, 1.0)
    inv = 1.0 - t
    r = np.clip((9.0 * inv * t * t * t * 255.0).astype(np.int64), 0, 255)
    g = np.clip((15.0 * inv * inv * t * t * 255.0).astype(np.int64), 0, 255)
    b = np.clip((8.5 * inv * inv * inv * t * 255.0).astype(np.int64), 0, 255)
    colors = (0xFF << 24) | (r << 16) | (g << 8) | b
    colors = np.where(counts >= max_iterations, INTERIOR_COLOR, colors)
    return colors.astype(np.uint32)
