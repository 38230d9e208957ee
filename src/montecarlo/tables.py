"""Percentile, standard-error and summary tables built from written SCC files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from iwg_models.constants import Gas

from .discounting import DiscountConfig, format_rate
from .writers import MISMATCH_DIRECTORY, mismatch_filename, scc_directory, scc_filename

LOGGER = logging.getLogger(__name__)

DEFAULT_PERCENTILES: tuple[float, ...] = (1, 5, 10, 25, 50, 75, 90, 95, 99)
POOLED_LABEL = "All scenarios"
HIGH_IMPACT_PERCENTILE = 95


def _table_path(output_dir: Path, gas: Gas, kind: str, domestic: bool) -> Path:
    suffix = "_domestic" if domestic else ""
    return Path(output_dir) / f"SC-{gas.value}_{kind}{suffix}.csv"


def load_scc_cell(
    output_dir: Path | str,
    gas: Gas | str,
    year: int,
    prtp: float,
    eta: float,
    *,
    domestic: bool = False,
) -> pd.DataFrame:
    """Return the trials × scenarios frame written for one (year, prtp, eta) cell."""

    path = scc_directory(Path(output_dir), gas) / scc_filename(year, prtp, eta, domestic=domestic)
    if not path.exists():
        raise FileNotFoundError(f"SCC values not found: {path}")
    return pd.read_csv(path, comment="#")


def _iter_series(frame: pd.DataFrame):
    for column in frame.columns:
        yield column, frame[column].to_numpy(dtype=float)
    yield POOLED_LABEL, frame.to_numpy(dtype=float).ravel()


def make_percentile_tables(
    output_dir: Path | str,
    gas: Gas | str,
    discounting: DiscountConfig,
    perturbation_years: Sequence[int],
    *,
    domestic: bool = False,
    percentiles: Sequence[float] = DEFAULT_PERCENTILES,
) -> Path:
    gas = Gas(gas)
    records: list[dict[str, object]] = []
    for year in perturbation_years:
        for _, _, prtp, eta in discounting.cells():
            frame = load_scc_cell(output_dir, gas, year, prtp, eta, domestic=domestic)
            for scenario, values in _iter_series(frame):
                row: dict[str, object] = {
                    "year": int(year),
                    "prtp": prtp,
                    "eta": eta,
                    "scenario": scenario,
                }
                quantiles = np.nanpercentile(values, percentiles)
                row.update({f"p{p:g}": float(q) for p, q in zip(percentiles, quantiles)})
                records.append(row)
    path = _table_path(Path(output_dir), gas, "percentiles", domestic)
    pd.DataFrame(records).to_csv(path, index=False)
    LOGGER.info("Wrote percentile table to %s", path)
    return path


def make_stderror_tables(
    output_dir: Path | str,
    gas: Gas | str,
    discounting: DiscountConfig,
    perturbation_years: Sequence[int],
    *,
    domestic: bool = False,
) -> Path:
    """Mean and standard error of the mean over trials, per scenario and pooled."""

    gas = Gas(gas)
    records: list[dict[str, object]] = []
    for year in perturbation_years:
        for _, _, prtp, eta in discounting.cells():
            frame = load_scc_cell(output_dir, gas, year, prtp, eta, domestic=domestic)
            for scenario, values in _iter_series(frame):
                n = int(np.count_nonzero(~np.isnan(values)))
                std_error = float(np.nanstd(values, ddof=1) / np.sqrt(n)) if n > 1 else float("nan")
                records.append(
                    {
                        "year": int(year),
                        "prtp": prtp,
                        "eta": eta,
                        "scenario": scenario,
                        "trials": n,
                        "mean": float(np.nanmean(values)),
                        "std_error": std_error,
                    }
                )
    path = _table_path(Path(output_dir), gas, "stderror", domestic)
    pd.DataFrame(records).to_csv(path, index=False)
    LOGGER.info("Wrote standard error table to %s", path)
    return path


def make_summary_table(
    output_dir: Path | str,
    gas: Gas | str,
    discounting: DiscountConfig,
    perturbation_years: Sequence[int],
    *,
    domestic: bool = False,
) -> Path | None:
    """Pooled mean and 95th percentile per year and rate.

    Only defined for flat-rate discounting (``eta == [0]``); returns ``None``
    otherwise.
    """

    if not discounting.eta_is_zero:
        LOGGER.info("Skipping summary table: it requires eta=[0], got %s.", list(discounting.eta))
        return None
    gas = Gas(gas)
    records: list[dict[str, object]] = []
    for year in perturbation_years:
        row: dict[str, object] = {"year": int(year)}
        for prtp in discounting.prtp:
            frame = load_scc_cell(output_dir, gas, year, prtp, 0.0, domestic=domestic)
            pooled = frame.to_numpy(dtype=float).ravel()
            label = f"prtp{format_rate(prtp)}"
            row[f"average_{label}"] = float(np.nanmean(pooled))
            row[f"high_impact_{label}"] = float(np.nanpercentile(pooled, HIGH_IMPACT_PERCENTILE))
        records.append(row)
    path = _table_path(Path(output_dir), gas, "summary", domestic)
    pd.DataFrame(records).to_csv(path, index=False)
    LOGGER.info("Wrote summary table to %s", path)
    return path


def make_mismatch_table(
    output_dir: Path | str,
    perturbation_years: Sequence[int],
    prtp: Sequence[float],
) -> Path:
    """Share of trials whose base and marginal PAGE runs disagree on discontinuity timing."""

    source = Path(output_dir) / MISMATCH_DIRECTORY
    records: list[dict[str, object]] = []
    for year in perturbation_years:
        for rate in prtp:
            path = source / mismatch_filename(year, rate)
            if not path.exists():
                raise FileNotFoundError(f"Mismatch flags not found: {path}")
            frame = pd.read_csv(path, comment="#")
            for scenario, values in _iter_series(frame):
                records.append(
                    {
                        "year": int(year),
                        "prtp": float(rate),
                        "scenario": scenario,
                        "mismatch_share": float(np.mean(values)),
                    }
                )
    path = Path(output_dir) / "discontinuity_mismatch_share.csv"
    pd.DataFrame(records).to_csv(path, index=False)
    return path
