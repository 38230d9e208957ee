"""Per-model adapters hiding DICE/FUND/PAGE differences from the SCC driver.

Each adapter supplies the model's time index and horizon, builds a fresh
base/marginal model pair, and provides the two callbacks the Monte Carlo
engine invokes: ``scenario_func`` before each scenario's trials and
``post_trial_func`` after each trial's base run. The post-trial callback runs
the marginal model once per perturbation year and writes one SCC value per
discount cell into the trial's own slice of the payload tensors.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from iwg_models import IAMModel, add_marginal_emissions, build_model, set_pulse_year
from iwg_models.constants import (
    DEFAULT_HORIZON,
    DOLLAR_CONVERSION,
    MODEL_YEARS,
    SCENARIOS,
    Gas,
    ModelChoice,
)

from .definitions import get_dice_mcs, get_fund_mcs, get_page_mcs
from .discounting import DiscountConfig, present_value
from .engine import SimulationDef, SimulationInstance

LOGGER = logging.getLogger(__name__)


@dataclass
class SCCPayload:
    """Run-scoped context shared with every trial's post-trial callback."""

    gas: Gas
    discounting: DiscountConfig
    model_years: np.ndarray
    default_horizon: int
    perturbation_years: np.ndarray
    scc: np.ndarray
    scc_domestic: np.ndarray | None = None
    mismatch: np.ndarray | None = None


class ModelAdapter(ABC):
    """Model-specific constants, model construction and MCS callbacks."""

    choice: ModelChoice
    computes_domestic = True

    @property
    def model_years(self) -> np.ndarray:
        return np.asarray(MODEL_YEARS[self.choice], dtype=int)

    @property
    def default_horizon(self) -> int:
        return int(DEFAULT_HORIZON[self.choice])

    @property
    def dollar_conversion(self) -> float:
        return float(DOLLAR_CONVERSION[self.choice])

    @abstractmethod
    def build_mcs(self) -> SimulationDef:
        """Return the uncertain parameters of this model."""

    def build_models(self, gas: Gas, scenario: str = SCENARIOS[0]) -> tuple[IAMModel, IAMModel]:
        """Return a new (base, marginal) pair; the marginal has no pulse year yet."""

        # The scenario is only needed to build; scenario_func switches it per run.
        base = build_model(self.choice, scenario)
        marginal = add_marginal_emissions(build_model(self.choice, scenario), gas)
        return base, marginal

    def scenario_func(self, sim: SimulationInstance, tup: tuple) -> None:
        (scenario,) = tup
        for model in sim.models:
            model.set_scenario(scenario)

    def post_trial_func(
        self, sim: SimulationInstance, trialnum: int, ntimesteps: int, tup: tuple
    ) -> None:
        payload: SCCPayload = sim.payload
        (scenario,) = tup
        scenario_idx = SCENARIOS.index(scenario)
        base, marginal = sim.models[0], sim.models[1]
        base_results = base.results
        growth = base_results.consumption_growth
        years = base_results.years
        pulse_size = marginal.marginal.pulse_size_tonnes

        for j, pulse_year in enumerate(payload.perturbation_years):
            set_pulse_year(marginal, int(pulse_year))
            marginal_results = marginal.run()
            marginal_damages = (
                (marginal_results.damages_usd - base_results.damages_usd)
                / pulse_size
                * self.dollar_conversion
            )
            domestic_damages = None
            if payload.scc_domestic is not None and self.computes_domestic:
                domestic_damages = (
                    (marginal_results.domestic_damages_usd - base_results.domestic_damages_usd)
                    / pulse_size
                    * self.dollar_conversion
                )
            for k, m, prtp, eta in payload.discounting.cells():
                payload.scc[trialnum, j, scenario_idx, k, m] = present_value(
                    years,
                    marginal_damages,
                    growth,
                    pulse_year=int(pulse_year),
                    horizon=payload.default_horizon,
                    prtp=prtp,
                    eta=eta,
                )
                if domestic_damages is not None:
                    payload.scc_domestic[trialnum, j, scenario_idx, k, m] = present_value(
                        years,
                        domestic_damages,
                        growth,
                        pulse_year=int(pulse_year),
                        horizon=payload.default_horizon,
                        prtp=prtp,
                        eta=eta,
                    )
            self._record_extras(payload, trialnum, j, scenario_idx, base_results, marginal_results)

    def _record_extras(self, payload, trialnum, year_idx, scenario_idx, base_results, marginal_results):
        return None


class DiceAdapter(ModelAdapter):
    choice = ModelChoice.DICE
    # DICE has no regional damages; the driver derives domestic values afterwards.
    computes_domestic = False

    def build_mcs(self) -> SimulationDef:
        return get_dice_mcs()


class FundAdapter(ModelAdapter):
    choice = ModelChoice.FUND

    def build_mcs(self) -> SimulationDef:
        return get_fund_mcs()


class PageAdapter(ModelAdapter):
    choice = ModelChoice.PAGE

    def build_mcs(self) -> SimulationDef:
        return get_page_mcs()

    def _record_extras(self, payload, trialnum, year_idx, scenario_idx, base_results, marginal_results):
        if payload.mismatch is None:
            return
        # Discontinuity timing does not depend on discounting; flag every rate.
        mismatch = base_results.discontinuity_index != marginal_results.discontinuity_index
        payload.mismatch[trialnum, year_idx, scenario_idx, :] = mismatch


_ADAPTERS: dict[ModelChoice, type[ModelAdapter]] = {
    ModelChoice.DICE: DiceAdapter,
    ModelChoice.FUND: FundAdapter,
    ModelChoice.PAGE: PageAdapter,
}


def get_adapter(model_choice: ModelChoice | str) -> ModelAdapter:
    """Return the adapter for ``model_choice``; any other value is a programming error."""

    if isinstance(model_choice, str) and not isinstance(model_choice, ModelChoice):
        model_choice = model_choice.strip().upper()
    return _ADAPTERS[ModelChoice(model_choice)]()
