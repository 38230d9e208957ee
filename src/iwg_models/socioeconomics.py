"""Socioeconomic trajectories for the five USG scenarios."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np
import pandas as pd

from .constants import BASE_YEAR_LEVELS, SCENARIO_NAMES, SCENARIO_TABLE, SOCIOECONOMIC_BASE_YEAR


@dataclass(slots=True)
class SocioeconomicScenario:
    """Population, GDP and emissions growth for one exogenous scenario."""

    scenario: str
    base_year: int
    population_million: float
    population_asymptote_million: float
    logistic_growth: float
    gdp_trillion_usd: float
    gdp_per_capita_growth: float
    growth_decline_rate: float
    co2_intensity: float
    intensity_decline_rate: float
    ch4_mt: float
    n2o_mt: float
    non_co2_decline_rate: float
    us_gdp_share: float
    us_share_decline_rate: float

    @property
    def label(self) -> str:
        return SCENARIO_NAMES[self.scenario]

    @classmethod
    def from_table(
        cls,
        scenario: str,
        *,
        table: Mapping[str, Mapping[str, float]] = SCENARIO_TABLE,
        levels: Mapping[str, float] = BASE_YEAR_LEVELS,
    ) -> "SocioeconomicScenario":
        key = str(scenario).strip().upper()
        if key not in table:
            raise ValueError(f"Scenario '{scenario}' not found; expected one of {sorted(table)}.")
        row = table[key]
        return cls(
            scenario=key,
            base_year=SOCIOECONOMIC_BASE_YEAR,
            population_million=float(levels["population_million"]),
            population_asymptote_million=float(row["population_asymptote_million"]),
            logistic_growth=float(row["logistic_growth"]),
            gdp_trillion_usd=float(levels["gdp_trillion_usd"]),
            gdp_per_capita_growth=float(row["gdp_per_capita_growth"]),
            growth_decline_rate=float(row["growth_decline_rate"]),
            co2_intensity=float(levels["co2_intensity_gt_per_trillion"]),
            intensity_decline_rate=float(row["intensity_decline_rate"]),
            ch4_mt=float(levels["ch4_mt"]),
            n2o_mt=float(levels["n2o_mt"]),
            non_co2_decline_rate=float(row["non_co2_decline_rate"]),
            us_gdp_share=float(levels["us_gdp_share"]),
            us_share_decline_rate=float(levels["us_share_decline_rate"]),
        )

    def project(self, years: np.ndarray) -> pd.DataFrame:
        """Return annual trajectories covering ``years``.

        Years before the base year are back-cast with base-year growth rates;
        years after it follow logistic population growth and a declining
        per-capita growth rate.
        """

        years = np.asarray(years, dtype=int)
        if years.size == 0:
            raise ValueError("years must contain at least one entry.")
        start = min(int(years.min()), self.base_year)
        end = max(int(years.max()), self.base_year)
        annual = np.arange(start, end + 1, dtype=int)
        n = annual.shape[0]
        base_idx = self.base_year - start

        population = np.zeros(n, dtype=float)
        gdp_per_capita = np.zeros(n, dtype=float)
        intensity = np.zeros(n, dtype=float)
        non_co2_scale = np.zeros(n, dtype=float)
        us_share = np.zeros(n, dtype=float)

        population[base_idx] = self.population_million
        gdp_per_capita[base_idx] = self.gdp_trillion_usd * 1e12 / (self.population_million * 1e6)
        intensity[base_idx] = self.co2_intensity
        non_co2_scale[base_idx] = 1.0
        us_share[base_idx] = self.us_gdp_share

        for idx in range(base_idx + 1, n):
            offset = annual[idx] - self.base_year
            prev = population[idx - 1]
            population[idx] = prev * (
                (self.population_asymptote_million / max(prev, 1e-9)) ** self.logistic_growth
            )
            growth = self.gdp_per_capita_growth * np.exp(-self.growth_decline_rate * offset)
            gdp_per_capita[idx] = gdp_per_capita[idx - 1] * (1.0 + growth)
            intensity[idx] = intensity[idx - 1] * (1.0 - self.intensity_decline_rate)
            non_co2_scale[idx] = non_co2_scale[idx - 1] * (1.0 - self.non_co2_decline_rate)
            us_share[idx] = us_share[idx - 1] * (1.0 - self.us_share_decline_rate)

        base_population_growth = (
            self.population_asymptote_million / self.population_million
        ) ** self.logistic_growth
        for idx in range(base_idx - 1, -1, -1):
            population[idx] = population[idx + 1] / base_population_growth
            gdp_per_capita[idx] = gdp_per_capita[idx + 1] / (1.0 + self.gdp_per_capita_growth)
            intensity[idx] = intensity[idx + 1]
            non_co2_scale[idx] = non_co2_scale[idx + 1]
            us_share[idx] = us_share[idx + 1]

        gdp = gdp_per_capita * population * 1e6 / 1e12
        population_ratio = population / self.population_million
        frame = pd.DataFrame(
            {
                "year": annual,
                "population_million": population,
                "gdp_trillion_usd": gdp,
                "gdp_per_capita_usd": gdp_per_capita,
                "co2_gt": gdp * intensity,
                "ch4_mt": self.ch4_mt * population_ratio * non_co2_scale,
                "n2o_mt": self.n2o_mt * population_ratio * non_co2_scale,
                "us_gdp_share": us_share,
            }
        )
        mask = (frame["year"] >= int(years.min())) & (frame["year"] <= int(years.max()))
        return frame.loc[mask].reset_index(drop=True)
