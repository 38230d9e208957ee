from __future__ import annotations

from enum import Enum

import numpy as np


class ModelChoice(str, Enum):
    DICE = "DICE"
    FUND = "FUND"
    PAGE = "PAGE"


class Gas(str, Enum):
    CO2 = "CO2"
    CH4 = "CH4"
    N2O = "N2O"


# Socioeconomic scenarios used by the interagency working group, in output order.
SCENARIOS: tuple[str, ...] = ("USG1", "USG2", "USG3", "USG4", "USG5")
SCENARIO_NAMES: dict[str, str] = {
    "USG1": "IMAGE",
    "USG2": "MERGE Optimistic",
    "USG3": "MESSAGE",
    "USG4": "MiniCAM Base",
    "USG5": "5th Scenario",
}

SOCIOECONOMIC_BASE_YEAR = 2005

# 2005 levels shared by every scenario; growth parameters differ per scenario.
SCENARIO_TABLE: dict[str, dict[str, float]] = {
    "USG1": {
        "population_asymptote_million": 9200.0,
        "logistic_growth": 0.028,
        "gdp_per_capita_growth": 0.022,
        "growth_decline_rate": 0.010,
        "intensity_decline_rate": 0.012,
        "non_co2_decline_rate": 0.002,
    },
    "USG2": {
        "population_asymptote_million": 8700.0,
        "logistic_growth": 0.030,
        "gdp_per_capita_growth": 0.020,
        "growth_decline_rate": 0.009,
        "intensity_decline_rate": 0.010,
        "non_co2_decline_rate": 0.003,
    },
    "USG3": {
        "population_asymptote_million": 9700.0,
        "logistic_growth": 0.026,
        "gdp_per_capita_growth": 0.019,
        "growth_decline_rate": 0.008,
        "intensity_decline_rate": 0.011,
        "non_co2_decline_rate": 0.002,
    },
    "USG4": {
        "population_asymptote_million": 9300.0,
        "logistic_growth": 0.027,
        "gdp_per_capita_growth": 0.021,
        "growth_decline_rate": 0.010,
        "intensity_decline_rate": 0.009,
        "non_co2_decline_rate": 0.001,
    },
    "USG5": {
        "population_asymptote_million": 9200.0,
        "logistic_growth": 0.028,
        "gdp_per_capita_growth": 0.020,
        "growth_decline_rate": 0.009,
        "intensity_decline_rate": 0.030,
        "non_co2_decline_rate": 0.010,
    },
}

BASE_YEAR_LEVELS: dict[str, float] = {
    "population_million": 6514.0,
    "gdp_trillion_usd": 58.0,
    "co2_intensity_gt_per_trillion": 0.47,
    "ch4_mt": 330.0,
    "n2o_mt": 11.0,
    "us_gdp_share": 0.22,
    "us_share_decline_rate": 0.004,
}

DICE_YEARS = np.arange(2005, 2406, 10)
FUND_YEARS = np.arange(1950, 2301)
PAGE_YEARS = np.array([2010, 2020, 2030, 2040, 2050, 2060, 2080, 2100, 2150, 2200])

MODEL_YEARS: dict[ModelChoice, np.ndarray] = {
    ModelChoice.DICE: DICE_YEARS,
    ModelChoice.FUND: FUND_YEARS,
    ModelChoice.PAGE: PAGE_YEARS,
}

# Marginal damages past the horizon are not counted in the SCC.
DEFAULT_HORIZON: dict[ModelChoice, int] = {
    ModelChoice.DICE: 2300,
    ModelChoice.FUND: 2300,
    ModelChoice.PAGE: 2200,
}

# Conversion from each model's native dollar year to 2007 USD.
DOLLAR_CONVERSION: dict[ModelChoice, float] = {
    ModelChoice.DICE: 122.58 / 114.52,
    ModelChoice.FUND: 1.3941,
    ModelChoice.PAGE: 1.225,
}

DICE_DOMESTIC_SHARE = 0.1

PULSE_SIZE_TONNES: dict[Gas, float] = {
    Gas.CO2: 1.0e9,
    Gas.CH4: 1.0e6,
    Gas.N2O: 1.0e6,
}

DEFAULT_TRIALS = 10000
DEFAULT_PERTURBATION_YEARS: tuple[int, ...] = tuple(range(2010, 2051, 5))
DEFAULT_DISCOUNT_RATES: tuple[float, ...] = (0.025, 0.03, 0.05)
DEFAULT_ETA: tuple[float, ...] = (0.0,)

# Climate state at the first simulated year of each model.
INITIAL_CLIMATE: dict[ModelChoice, dict[str, float]] = {
    ModelChoice.DICE: {
        "co2_ppm": 380.0,
        "ch4_ppb": 1775.0,
        "n2o_ppb": 319.0,
        "temperature_c": 0.73,
        "ocean_temperature_c": 0.05,
    },
    ModelChoice.FUND: {
        "co2_ppm": 311.0,
        "ch4_ppb": 1150.0,
        "n2o_ppb": 289.0,
        "temperature_c": 0.25,
        "ocean_temperature_c": 0.02,
    },
    ModelChoice.PAGE: {
        "co2_ppm": 389.0,
        "ch4_ppb": 1800.0,
        "n2o_ppb": 323.0,
        "temperature_c": 0.85,
        "ocean_temperature_c": 0.08,
    },
}

DEFAULT_PARAMETERS: dict[ModelChoice, dict[str, float]] = {
    ModelChoice.DICE: {
        "climate_sensitivity": 3.0,
        "savings_rate": 0.22,
        "damage_linear": 0.0,
        "damage_quadratic": 0.0028388,
    },
    ModelChoice.FUND: {
        "climate_sensitivity": 3.0,
        "savings_rate": 0.2,
        "damage_linear": -0.0009,
        "damage_quadratic": 0.0025,
        "us_damage_linear": -0.0012,
        "us_damage_quadratic": 0.0018,
    },
    ModelChoice.PAGE: {
        "climate_sensitivity": 3.0,
        "savings_rate": 0.2,
        "impact_at_calibration_pct": 0.5,
        "calibration_temperature_c": 2.5,
        "impact_exponent": 2.0,
        "discontinuity_threshold_c": 3.0,
        "discontinuity_probability_pct": 20.0,
        "discontinuity_loss_pct": 15.0,
        "discontinuity_onset_years": 50.0,
        "discontinuity_draw": 0.5,
        "us_impact_weight": 0.8,
    },
}
