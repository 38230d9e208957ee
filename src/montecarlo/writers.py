from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from iwg_models.constants import SCENARIO_NAMES, SCENARIOS, Gas

from .discounting import DiscountConfig, format_rate

LOGGER = logging.getLogger(__name__)

MISMATCH_DIRECTORY = "discontinuity_mismatch"


def scc_directory(output_dir: Path, gas: Gas | str) -> Path:
    return Path(output_dir) / f"SC-{Gas(gas).value}"


def scc_filename(year: int, prtp: float, eta: float, *, domestic: bool = False) -> str:
    suffix = "_domestic" if domestic else ""
    return f"{int(year)}_prtp{format_rate(prtp)}_eta{format_rate(eta)}{suffix}.csv"


def mismatch_filename(year: int, prtp: float) -> str:
    return f"{int(year)}_prtp{format_rate(prtp)}.csv"


def _write_frame(frame: pd.DataFrame, path: Path, unit: str) -> None:
    with path.open("w", encoding="utf-8") as fh:
        fh.write(f"# unit: {unit}\n")
        frame.to_csv(fh, index=False)


def write_scc_values(
    values: np.ndarray,
    output_dir: Path | str,
    perturbation_years: Sequence[int],
    discounting: DiscountConfig,
    *,
    gas: Gas | str,
    domestic: bool = False,
) -> Path:
    """Write one CSV of trial values per (year, prtp, eta) cell.

    Rows are trials and columns are the scenarios. Returns the directory written.
    """

    gas = Gas(gas)
    expected = (len(perturbation_years), len(SCENARIOS), *discounting.shape)
    if values.ndim != 5 or values.shape[1:] != expected:
        raise ValueError(f"SCC values have shape {values.shape}; expected (trials, {expected}).")
    dest_dir = scc_directory(Path(output_dir), gas)
    dest_dir.mkdir(parents=True, exist_ok=True)
    columns = [SCENARIO_NAMES[s] for s in SCENARIOS]
    unit = f"2007 USD per tonne {gas.value}"
    for j, year in enumerate(perturbation_years):
        for k, m, prtp, eta in discounting.cells():
            frame = pd.DataFrame(values[:, j, :, k, m], columns=columns)
            _write_frame(frame, dest_dir / scc_filename(year, prtp, eta, domestic=domestic), unit)
    LOGGER.info(
        "Wrote %s%s SCC files to %s",
        len(perturbation_years) * discounting.shape[0] * discounting.shape[1],
        " domestic" if domestic else "",
        dest_dir,
    )
    return dest_dir


def write_mismatch_values(
    mismatch: np.ndarray,
    output_dir: Path | str,
    perturbation_years: Sequence[int],
    prtp: Sequence[float],
) -> Path:
    """Write 0/1 discontinuity-timing flags per (year, prtp)."""

    dest_dir = Path(output_dir) / MISMATCH_DIRECTORY
    dest_dir.mkdir(parents=True, exist_ok=True)
    columns = [SCENARIO_NAMES[s] for s in SCENARIOS]
    for j, year in enumerate(perturbation_years):
        for k, rate in enumerate(prtp):
            frame = pd.DataFrame(mismatch[:, j, :, k].astype(int), columns=columns)
            _write_frame(frame, dest_dir / mismatch_filename(year, rate), "flag")
    return dest_dir
