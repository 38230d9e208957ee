"""Linear interpolation of per-year SCC series onto requested years."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def interpolate(
    values: np.ndarray, source_years: Sequence[int], target_years: Sequence[int]
) -> np.ndarray:
    """Piecewise linear interpolation of ``values`` (defined at ``source_years``).

    Targets outside the source range take the nearest end value.
    """

    source = np.asarray(source_years, dtype=float)
    values = np.asarray(values, dtype=float)
    if source.shape != values.shape:
        raise ValueError("values and source_years must have the same length.")
    if np.any(np.diff(source) <= 0):
        raise ValueError("source_years must be strictly increasing.")
    return np.interp(np.asarray(target_years, dtype=float), source, values)


def interpolate_tensor(
    tensor: np.ndarray,
    source_years: Sequence[int],
    target_years: Sequence[int],
    *,
    axis: int = 1,
) -> np.ndarray:
    """Interpolate every 1-D slice along ``axis`` independently; returns a new array."""

    return np.apply_along_axis(
        interpolate, axis, np.asarray(tensor, dtype=float), source_years, target_years
    )


def interpolate_mismatch(
    mismatch: np.ndarray, source_years: Sequence[int], target_years: Sequence[int]
) -> np.ndarray:
    """Interpolate a boolean flag tensor; any positive interpolated value counts as set."""

    return interpolate_tensor(mismatch.astype(float), source_years, target_years) > 0
