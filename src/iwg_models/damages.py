"""Damage functions used by the reduced-form model backends."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np


def damage_polynomial(
    temp: np.ndarray,
    *,
    delta1: float = 0.0,
    delta2: float = 0.002,
    custom_terms: Sequence[Mapping[str, float]] | None = None,
    use_saturation: bool = False,
    max_fraction: float = 0.99,
    saturation_mode: str = "rational",
) -> np.ndarray:
    """Return GDP damage fractions from a DICE-style polynomial.

    The baseline follows ``delta1 * T + delta2 * T^2`` unless ``custom_terms`` is
    supplied, in which case damage is ``Σ coeff_i × T^{power_i}``. With
    ``saturation_mode="rational"`` and ``max_fraction=1`` the result is the
    DICE-2010 form ``1 - 1 / (1 + damage)``.

    Negative damages (benefits) are floored at zero and the final result is
    clipped to ``[0, max_fraction]``.
    """

    temperatures = np.asarray(temp, dtype=float)

    if custom_terms:
        damage = np.zeros_like(temperatures, dtype=float)
        for term in custom_terms:
            coeff = float(term.get("coefficient", 0.0))
            power = float(term.get("exponent", term.get("power", 1.0)))
            damage = damage + coeff * np.power(np.maximum(temperatures, 0.0), power)
    else:
        damage = delta1 * temperatures + delta2 * temperatures**2

    damage = np.maximum(damage, 0.0)

    if use_saturation:
        if saturation_mode == "rational":
            x = damage
            damage = np.divide(
                max_fraction * x,
                x + max_fraction,
                out=np.zeros_like(x),
                where=x >= 0.0,
            )
        elif saturation_mode == "clamp":
            damage = np.clip(damage, 0.0, max_fraction)
        else:
            raise ValueError("saturation_mode must be 'rational' or 'clamp'")

    return np.clip(damage, 0.0, max_fraction)


def discontinuity_onset(
    native_temperatures: np.ndarray,
    *,
    threshold_c: float,
    probability_pct_per_c: float,
    draw: float,
) -> int | None:
    """Return the native timestep index at which the discontinuity occurs.

    The occurrence probability at each native timestep grows linearly with the
    temperature excess over ``threshold_c``. The event fires at the first
    timestep whose probability exceeds the trial's uniform ``draw``; ``None``
    when it never does.
    """

    temps = np.asarray(native_temperatures, dtype=float)
    probability = np.clip(probability_pct_per_c / 100.0 * (temps - threshold_c), 0.0, 1.0)
    triggered = np.nonzero(probability > draw)[0]
    if triggered.size == 0:
        return None
    return int(triggered[0])


def discontinuity_damages(
    years: np.ndarray,
    onset_year: int | None,
    *,
    loss_pct: float,
    onset_years: float,
) -> np.ndarray:
    """GDP fraction lost to a discontinuity that phases in linearly after ``onset_year``."""

    years = np.asarray(years, dtype=float)
    if onset_year is None:
        return np.zeros_like(years)
    if onset_years <= 0:
        raise ValueError("onset_years must be positive.")
    phase = np.clip((years - float(onset_year)) / float(onset_years), 0.0, 1.0)
    return loss_pct / 100.0 * phase
