"""Reduced-form DICE, FUND and PAGE model instances."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

import numpy as np
import pandas as pd

from .climate import simulate_climate
from .constants import (
    DEFAULT_PARAMETERS,
    INITIAL_CLIMATE,
    MODEL_YEARS,
    PULSE_SIZE_TONNES,
    SCENARIOS,
    Gas,
    ModelChoice,
)
from .damages import damage_polynomial, discontinuity_damages, discontinuity_onset
from .socioeconomics import SocioeconomicScenario

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MarginalEmissions:
    """Emission pulse carried by a marginal model."""

    gas: Gas
    pulse_size_tonnes: float
    pulse_year: int | None = None


@dataclass(slots=True)
class ModelResults:
    """Annual outputs of one completed model run."""

    years: np.ndarray
    temperature_c: np.ndarray
    gdp_trillion_usd: np.ndarray
    damages_usd: np.ndarray
    consumption_per_capita_usd: np.ndarray
    domestic_damages_usd: np.ndarray | None = None
    discontinuity_index: int | None = None

    @property
    def consumption_growth(self) -> np.ndarray:
        growth = np.full_like(self.consumption_per_capita_usd, fill_value=np.nan, dtype=float)
        previous = self.consumption_per_capita_usd[:-1]
        with np.errstate(divide="ignore", invalid="ignore"):
            growth[1:] = (self.consumption_per_capita_usd[1:] - previous) / previous
        return growth

    def sample(self, name: str, years: np.ndarray) -> np.ndarray:
        series = getattr(self, name)
        if series is None:
            raise ValueError(f"Result '{name}' is not available for this model.")
        idx = np.searchsorted(self.years, np.asarray(years, dtype=int))
        return np.asarray(series, dtype=float)[idx]


class IAMModel:
    """A mutable model instance for one IAM choice and socioeconomic scenario."""

    def __init__(
        self,
        choice: ModelChoice,
        scenario: str = SCENARIOS[0],
        *,
        parameters: Mapping[str, float] | None = None,
    ) -> None:
        self.choice = ModelChoice(choice)
        self.years = np.asarray(MODEL_YEARS[self.choice], dtype=int)
        self.annual_years = np.arange(int(self.years[0]), int(self.years[-1]) + 1, dtype=int)
        self.params: dict[str, float] = dict(DEFAULT_PARAMETERS[self.choice])
        for name, value in (parameters or {}).items():
            self.set_param(name, value)
        self.marginal: MarginalEmissions | None = None
        self.results: ModelResults | None = None
        self.scenario = ""
        self._socioeconomics: pd.DataFrame | None = None
        self.set_scenario(scenario)

    def __repr__(self) -> str:
        pulse = None if self.marginal is None else self.marginal.pulse_year
        return f"IAMModel({self.choice.value}, scenario={self.scenario!r}, pulse_year={pulse})"

    def set_param(self, name: str, value: float) -> None:
        if name not in self.params:
            raise ValueError(f"Unknown parameter '{name}' for {self.choice.value}.")
        self.params[name] = float(value)

    def set_scenario(self, scenario: str) -> None:
        key = str(scenario).strip().upper()
        if key == self.scenario:
            return
        self._socioeconomics = SocioeconomicScenario.from_table(key).project(self.annual_years)
        self.scenario = key

    def _emissions(self) -> dict[str, np.ndarray]:
        socio = self._socioeconomics
        emissions = {
            "CO2": socio["co2_gt"].to_numpy(dtype=float),
            "CH4": socio["ch4_mt"].to_numpy(dtype=float),
            "N2O": socio["n2o_mt"].to_numpy(dtype=float),
        }
        if self.marginal is not None and self.marginal.pulse_year is not None:
            gas = self.marginal.gas
            # Gt for CO2, Mt for the other gases.
            scale = 1e9 if gas is Gas.CO2 else 1e6
            idx = int(self.marginal.pulse_year) - int(self.annual_years[0])
            emissions[gas.value] = emissions[gas.value].copy()
            emissions[gas.value][idx] += self.marginal.pulse_size_tonnes / scale
        return emissions

    def run(self) -> ModelResults:
        socio = self._socioeconomics
        climate = simulate_climate(
            self._emissions(),
            initial=INITIAL_CLIMATE[self.choice],
            climate_sensitivity=self.params["climate_sensitivity"],
        )
        temperature = climate.temperature_c
        gdp = socio["gdp_trillion_usd"].to_numpy(dtype=float)
        gdp_usd = gdp * 1e12
        us_share = socio["us_gdp_share"].to_numpy(dtype=float)
        params = self.params

        domestic = None
        discontinuity_index = None
        if self.choice is ModelChoice.DICE:
            fraction = damage_polynomial(
                temperature,
                delta1=params["damage_linear"],
                delta2=params["damage_quadratic"],
                use_saturation=True,
                max_fraction=1.0,
            )
        elif self.choice is ModelChoice.FUND:
            fraction = damage_polynomial(
                temperature,
                delta1=params["damage_linear"],
                delta2=params["damage_quadratic"],
            )
            us_fraction = damage_polynomial(
                temperature,
                delta1=params["us_damage_linear"],
                delta2=params["us_damage_quadratic"],
            )
            domestic = us_fraction * gdp_usd * us_share
        else:
            exponent = params["impact_exponent"]
            coefficient = (
                params["impact_at_calibration_pct"]
                / 100.0
                / params["calibration_temperature_c"] ** exponent
            )
            fraction = damage_polynomial(
                temperature,
                custom_terms=[{"coefficient": coefficient, "exponent": exponent}],
            )
            native_idx = self.years - int(self.annual_years[0])
            discontinuity_index = discontinuity_onset(
                temperature[native_idx],
                threshold_c=params["discontinuity_threshold_c"],
                probability_pct_per_c=params["discontinuity_probability_pct"],
                draw=params["discontinuity_draw"],
            )
            onset_year = None if discontinuity_index is None else int(self.years[discontinuity_index])
            fraction = np.minimum(
                fraction
                + discontinuity_damages(
                    self.annual_years,
                    onset_year,
                    loss_pct=params["discontinuity_loss_pct"],
                    onset_years=params["discontinuity_onset_years"],
                ),
                0.99,
            )
            domestic = fraction * gdp_usd * us_share * params["us_impact_weight"]

        damages = fraction * gdp_usd
        population = socio["population_million"].to_numpy(dtype=float) * 1e6
        consumption = (1.0 - params["savings_rate"]) * (gdp_usd - damages)
        consumption_per_capita = np.divide(
            consumption, population, out=np.zeros_like(consumption), where=population > 0
        )

        self.results = ModelResults(
            years=self.annual_years,
            temperature_c=temperature,
            gdp_trillion_usd=gdp,
            damages_usd=damages,
            consumption_per_capita_usd=consumption_per_capita,
            domestic_damages_usd=domestic,
            discontinuity_index=discontinuity_index,
        )
        return self.results


def build_model(choice: ModelChoice | str, scenario: str = SCENARIOS[0]) -> IAMModel:
    """Return a fresh model instance; the scenario can be changed later."""

    return IAMModel(ModelChoice(choice), scenario)


def add_marginal_emissions(
    model: IAMModel, gas: Gas, *, pulse_size_tonnes: float | None = None
) -> IAMModel:
    """Attach an emission pulse component for ``gas`` without fixing its year.

    A model can carry only one pulse component; build a new model for each run.
    """

    if model.marginal is not None:
        raise RuntimeError(f"{model!r} already carries a marginal emissions component.")
    gas = Gas(gas)
    size = PULSE_SIZE_TONNES[gas] if pulse_size_tonnes is None else float(pulse_size_tonnes)
    model.marginal = MarginalEmissions(gas=gas, pulse_size_tonnes=size)
    model.results = None
    return model


def set_pulse_year(model: IAMModel, year: int) -> None:
    if model.marginal is None:
        raise RuntimeError(f"{model!r} has no marginal emissions component.")
    if int(year) not in set(model.years.tolist()):
        raise ValueError(
            f"Pulse year {year} is not in the {model.choice.value} time index; "
            "interpolate from native years instead."
        )
    model.marginal.pulse_year = int(year)
