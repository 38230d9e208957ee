"""Reduced-form gas cycles and a two-layer energy balance.

The temperature response uses a compact ``two_box`` preset: an upper layer
coupled to a deep ocean, with the feedback parameter set from the sampled
climate sensitivity.

Gas cycles
==========
``CO2``
    Four-box impulse response (one permanent box). Emissions in Gt CO2/yr.
``CH4`` / ``N2O``
    Single e-folding lifetime relaxing towards preindustrial levels.
    Emissions in Mt/yr of the gas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

CO2_BOX_FRACTIONS: Sequence[float] = (0.2173, 0.2240, 0.2824, 0.2763)
CO2_BOX_LIFETIMES: Sequence[float] = (np.inf, 394.4, 36.54, 4.304)
GT_CO2_PER_PPM = 7.8

PREINDUSTRIAL: Mapping[str, float] = {"CO2": 278.0, "CH4": 722.0, "N2O": 270.0}
MT_PER_PPB: Mapping[str, float] = {"CH4": 2.78, "N2O": 4.8}
LIFETIMES: Mapping[str, float] = {"CH4": 12.4, "N2O": 109.0}

FORCING_2XCO2 = 3.71

TWO_BOX_PRESET: Mapping[str, Sequence[float] | float] = {
    "ocean_heat_capacity": (8.2, 109.0),
    "ocean_heat_transfer": 0.18,
    "deep_ocean_efficacy": 1.0,
}


@dataclass(slots=True)
class ClimateResult:
    """Annual climate trajectories."""

    co2_ppm: np.ndarray
    ch4_ppb: np.ndarray
    n2o_ppb: np.ndarray
    forcing_w_m2: np.ndarray
    temperature_c: np.ndarray
    ocean_temperature_c: np.ndarray


def radiative_forcing(co2_ppm: float, ch4_ppb: float, n2o_ppb: float) -> float:
    return (
        5.35 * np.log(co2_ppm / PREINDUSTRIAL["CO2"])
        + 0.036 * (np.sqrt(ch4_ppb) - np.sqrt(PREINDUSTRIAL["CH4"]))
        + 0.12 * (np.sqrt(n2o_ppb) - np.sqrt(PREINDUSTRIAL["N2O"]))
    )


def simulate_climate(
    emissions: Mapping[str, np.ndarray],
    *,
    initial: Mapping[str, float],
    climate_sensitivity: float,
    preset: Mapping[str, Sequence[float] | float] = TWO_BOX_PRESET,
) -> ClimateResult:
    """Advance the gas cycles and temperature one year at a time.

    ``emissions`` maps ``CO2``/``CH4``/``N2O`` to equally long annual arrays.
    The initial CO2 excess over preindustrial sits in the permanent box.
    """

    if climate_sensitivity <= 0:
        raise ValueError("climate_sensitivity must be positive.")
    co2 = np.asarray(emissions["CO2"], dtype=float)
    ch4 = np.asarray(emissions["CH4"], dtype=float)
    n2o = np.asarray(emissions["N2O"], dtype=float)
    n = co2.shape[0]
    if ch4.shape[0] != n or n2o.shape[0] != n:
        raise ValueError("Emission series must share the same length.")

    heat_capacity_upper, heat_capacity_deep = preset["ocean_heat_capacity"]
    heat_transfer = float(preset["ocean_heat_transfer"])
    efficacy = float(preset["deep_ocean_efficacy"])
    feedback = FORCING_2XCO2 / float(climate_sensitivity)

    fractions = np.asarray(CO2_BOX_FRACTIONS, dtype=float)
    decay = np.exp(-1.0 / np.asarray(CO2_BOX_LIFETIMES, dtype=float))
    boxes = np.zeros(len(fractions), dtype=float)
    boxes[0] = float(initial["co2_ppm"]) - PREINDUSTRIAL["CO2"]

    ch4_conc = float(initial["ch4_ppb"])
    n2o_conc = float(initial["n2o_ppb"])
    temperature = float(initial["temperature_c"])
    ocean = float(initial["ocean_temperature_c"])

    out_co2 = np.zeros(n)
    out_ch4 = np.zeros(n)
    out_n2o = np.zeros(n)
    out_forcing = np.zeros(n)
    out_temperature = np.zeros(n)
    out_ocean = np.zeros(n)

    for idx in range(n):
        boxes = boxes * decay + fractions * co2[idx] / GT_CO2_PER_PPM
        co2_conc = PREINDUSTRIAL["CO2"] + boxes.sum()
        ch4_conc += ch4[idx] / MT_PER_PPB["CH4"] - (ch4_conc - PREINDUSTRIAL["CH4"]) / LIFETIMES["CH4"]
        n2o_conc += n2o[idx] / MT_PER_PPB["N2O"] - (n2o_conc - PREINDUSTRIAL["N2O"]) / LIFETIMES["N2O"]
        forcing = radiative_forcing(co2_conc, ch4_conc, n2o_conc)

        exchange = heat_transfer * (temperature - ocean)
        temperature = temperature + (
            forcing - feedback * temperature - efficacy * exchange
        ) / heat_capacity_upper
        ocean = ocean + exchange / heat_capacity_deep

        out_co2[idx] = co2_conc
        out_ch4[idx] = ch4_conc
        out_n2o[idx] = n2o_conc
        out_forcing[idx] = forcing
        out_temperature[idx] = temperature
        out_ocean[idx] = ocean

    return ClimateResult(
        co2_ppm=out_co2,
        ch4_ppb=out_ch4,
        n2o_ppb=out_n2o,
        forcing_w_m2=out_forcing,
        temperature_c=out_temperature,
        ocean_temperature_c=out_ocean,
    )
