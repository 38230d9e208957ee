"""Uncertain parameter definitions for the DICE, FUND and PAGE simulations."""

from __future__ import annotations

import numpy as np
from scipy import stats

from .engine import RandomVariable, SimulationDef


class RoeBakerSensitivity:
    """Roe & Baker (2007) equilibrium climate sensitivity, ``λ0 / (1 - f)``.

    The feedback factor ``f`` is normal and truncated so the sensitivity stays
    within ``[lower, upper]`` °C.
    """

    def __init__(
        self,
        *,
        reference: float = 1.2,
        feedback_mean: float = 0.6198,
        feedback_std: float = 0.1841,
        lower: float = 0.5,
        upper: float = 10.0,
    ) -> None:
        self.reference = reference
        f_low = 1.0 - reference / lower
        f_high = 1.0 - reference / upper
        self._feedback = stats.truncnorm(
            (f_low - feedback_mean) / feedback_std,
            (f_high - feedback_mean) / feedback_std,
            loc=feedback_mean,
            scale=feedback_std,
        )

    def rvs(self, size=None, random_state=None) -> np.ndarray:
        feedback = self._feedback.rvs(size=size, random_state=random_state)
        return self.reference / (1.0 - feedback)


def triangular(low: float, mode: float, high: float):
    if not low <= mode <= high or low == high:
        raise ValueError(f"Invalid triangular bounds ({low}, {mode}, {high}).")
    return stats.triang((mode - low) / (high - low), loc=low, scale=high - low)


def truncated_normal(mean: float, std: float, *, lower: float = -np.inf, upper: float = np.inf):
    return stats.truncnorm((lower - mean) / std, (upper - mean) / std, loc=mean, scale=std)


def get_dice_mcs() -> SimulationDef:
    # Climate sensitivity is the only uncertain DICE input.
    return SimulationDef(
        variables=[RandomVariable("climate_sensitivity", RoeBakerSensitivity())],
        save=("temperature_c",),
    )


def get_fund_mcs() -> SimulationDef:
    return SimulationDef(
        variables=[
            RandomVariable("climate_sensitivity", stats.gamma(6.48, scale=0.55)),
            RandomVariable("damage_linear", stats.norm(-0.0009, 0.0004)),
            RandomVariable("damage_quadratic", truncated_normal(0.0025, 0.0008, lower=0.0)),
            RandomVariable("us_damage_linear", stats.norm(-0.0012, 0.0005)),
            RandomVariable("us_damage_quadratic", truncated_normal(0.0018, 0.0006, lower=0.0)),
        ],
        save=("temperature_c",),
    )


def get_page_mcs() -> SimulationDef:
    return SimulationDef(
        variables=[
            RandomVariable("climate_sensitivity", triangular(1.5, 3.0, 4.5)),
            RandomVariable("impact_at_calibration_pct", triangular(0.2, 0.5, 0.8)),
            RandomVariable("impact_exponent", triangular(1.5, 2.0, 3.0)),
            RandomVariable("discontinuity_threshold_c", triangular(2.0, 3.0, 4.0)),
            RandomVariable("discontinuity_probability_pct", triangular(10.0, 20.0, 30.0)),
            RandomVariable("discontinuity_loss_pct", triangular(5.0, 15.0, 25.0)),
            RandomVariable("discontinuity_onset_years", triangular(20.0, 50.0, 200.0)),
            RandomVariable("discontinuity_draw", stats.uniform(0.0, 1.0)),
            RandomVariable("us_impact_weight", triangular(0.6, 0.8, 1.0)),
        ],
        save=("temperature_c",),
    )
