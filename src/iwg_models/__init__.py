"""Reduced-form DICE, FUND and PAGE backends driven by the SCC Monte Carlo layer."""

from .constants import SCENARIO_NAMES, SCENARIOS, Gas, ModelChoice
from .model import (
    IAMModel,
    MarginalEmissions,
    ModelResults,
    add_marginal_emissions,
    build_model,
    set_pulse_year,
)

__all__ = [
    "Gas",
    "IAMModel",
    "MarginalEmissions",
    "ModelChoice",
    "ModelResults",
    "SCENARIOS",
    "SCENARIO_NAMES",
    "add_marginal_emissions",
    "build_model",
    "set_pulse_year",
]
