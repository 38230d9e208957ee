"""End-to-end Monte Carlo SCC runs for DICE, FUND and PAGE.

``simulate_scc`` validates the request, runs the base/marginal model pair for
every trial and scenario through the engine and returns the filled tensors.
``run_scc_mcs`` persists those tensors and builds the summary tables; it
returns nothing, everything it produces is written under the output directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np

from config_paths import (
    DEFAULT_OUTPUT_ROOT,
    claim_output_directory,
    timestamped_output_directory,
)
from iwg_models.constants import (
    DEFAULT_PERTURBATION_YEARS,
    DEFAULT_TRIALS,
    DICE_DOMESTIC_SHARE,
    SCENARIOS,
    Gas,
    ModelChoice,
)

from .adapters import SCCPayload, get_adapter
from .discounting import DiscountConfig, normalize_discounting
from .engine import run_sim
from .exceptions import InvalidArgument, OutOfRange
from .interpolation import interpolate_mismatch, interpolate_tensor
from .plots import plot_scc_distributions
from .tables import (
    make_mismatch_table,
    make_percentile_tables,
    make_stderror_tables,
    make_summary_table,
)
from .writers import write_mismatch_values, write_scc_values

LOGGER = logging.getLogger(__name__)


@dataclass
class SCCValues:
    """Tensors of one run, indexed (trial, year, scenario, prtp, eta)."""

    model: ModelChoice
    gas: Gas
    output_dir: Path
    perturbation_years: np.ndarray
    discounting: DiscountConfig
    scc: np.ndarray
    scc_domestic: np.ndarray | None = None
    mismatch: np.ndarray | None = None


def resolve_gas(gas: Gas | str | None) -> Gas:
    """Return the gas to pulse; ``None`` falls back to CO2 with a warning."""

    if gas is None:
        LOGGER.warning("No gas specified; computing the social cost of CO2.")
        return Gas.CO2
    if isinstance(gas, Gas):
        return gas
    key = str(gas).strip().lstrip(":").upper()
    try:
        return Gas(key)
    except ValueError as exc:
        valid = ", ".join(member.value for member in Gas)
        raise InvalidArgument(f"Unknown gas {gas!r}; must be one of {valid}.") from exc


def _validate_trials(trials: int) -> int:
    if isinstance(trials, bool) or not isinstance(trials, (int, np.integer)) or trials <= 0:
        raise InvalidArgument(f"trials must be a positive integer, got {trials!r}.")
    return int(trials)


def resolve_perturbation_years(
    requested: Iterable[int], model_years: Sequence[int]
) -> tuple[np.ndarray, np.ndarray | None]:
    """Return ``(years_to_run, interpolation_target)``.

    When every requested year is native the requested years are run directly
    and the target is ``None``. Otherwise the native years covering the
    requested range are run and the requested years become the target of the
    interpolation pass.
    """

    raw = list(requested)
    try:
        as_float = np.asarray(raw, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"perturbation_years must be whole years, got {raw!r}.") from exc
    if as_float.size == 0:
        raise InvalidArgument("perturbation_years must contain at least one year.")
    whole = as_float.ndim == 1 and np.all(np.isfinite(as_float))
    if not whole or np.any(as_float != np.round(as_float)):
        raise InvalidArgument(f"perturbation_years must be whole years, got {raw!r}.")
    requested = as_float.astype(int)
    model_years = np.asarray(model_years, dtype=int)
    low, high = int(model_years.min()), int(model_years.max())
    outside = requested[(requested < low) | (requested > high)]
    if outside.size:
        raise OutOfRange(
            f"Perturbation years {outside.tolist()} are outside the model years {low}-{high}."
        )
    if np.all(np.isin(requested, model_years)):
        return requested, None

    start = int(np.nonzero(model_years <= requested.min())[0][-1])
    stop = int(np.nonzero(model_years >= requested.max())[0][0])
    LOGGER.info(
        "Perturbation years %s are not all native; running %s and interpolating.",
        requested.tolist(),
        model_years[start : stop + 1].tolist(),
    )
    return model_years[start : stop + 1].copy(), requested


def allocate_tensors(
    trials: int,
    n_years: int,
    discounting: DiscountConfig,
    *,
    domestic: bool,
    mismatch: bool,
) -> tuple[np.ndarray, np.ndarray | None, np.ndarray | None]:
    shape = (trials, n_years, len(SCENARIOS), *discounting.shape)
    scc = np.zeros(shape, dtype=float)
    scc_domestic = np.zeros(shape, dtype=float) if domestic else None
    flags = np.zeros(shape[:4], dtype=bool) if mismatch else None
    return scc, scc_domestic, flags


def simulate_scc(
    model_choice: ModelChoice | str,
    *,
    gas: Gas | str | None = None,
    trials: int = DEFAULT_TRIALS,
    perturbation_years: Iterable[int] = DEFAULT_PERTURBATION_YEARS,
    discount_rates: Iterable[float] | None = None,
    prtp: Iterable[float] | None = None,
    eta: Iterable[float] | None = None,
    domestic: bool = False,
    output_dir: Path | str | None = None,
    output_root: Path | str = DEFAULT_OUTPUT_ROOT,
    save_trials: bool = False,
    save_variables: bool = False,
    seed: int | None = None,
) -> SCCValues:
    """Run the Monte Carlo experiment and return the SCC tensors.

    Only ``trials.csv`` and saved variables are written here (when requested).
    A generated output directory is created once every argument has been
    validated, so invalid arguments never leave a directory behind.
    """

    trials = _validate_trials(trials)
    gas = resolve_gas(gas)
    discounting = normalize_discounting(discount_rates=discount_rates, prtp=prtp, eta=eta)

    adapter = get_adapter(model_choice)
    choice = adapter.choice
    generated = output_dir is None
    if generated:
        output_dir = timestamped_output_directory(choice.value, gas.value, trials, root=output_root)
    output_dir = Path(output_dir)

    years, target = resolve_perturbation_years(perturbation_years, adapter.model_years)
    is_page = choice is ModelChoice.PAGE
    scc, scc_domestic, mismatch = allocate_tensors(
        trials, len(years), discounting, domestic=domestic, mismatch=is_page
    )
    if generated:
        output_dir = claim_output_directory(output_dir)

    base, marginal = adapter.build_models(gas)
    payload = SCCPayload(
        gas=gas,
        discounting=discounting,
        model_years=adapter.model_years,
        default_horizon=adapter.default_horizon,
        perturbation_years=years,
        scc=scc,
        scc_domestic=scc_domestic,
        mismatch=mismatch,
    )

    LOGGER.info(
        "Running %s SC-%s with %s trials for years %s (prtp=%s, eta=%s).",
        choice.value,
        gas.value,
        trials,
        years.tolist(),
        list(discounting.prtp),
        list(discounting.eta),
    )
    sim = run_sim(
        adapter.build_mcs(),
        [base, marginal],
        trials,
        payload=payload,
        scenario_func=adapter.scenario_func,
        scenario_args=[("scenario", SCENARIOS)],
        post_trial_func=adapter.post_trial_func,
        models_to_run=1,
        seed=seed,
        trials_output_path=output_dir / "trials.csv" if save_trials else None,
        results_output_dir=output_dir / "saved_variables" if save_variables else None,
    )
    payload = sim.payload

    scc, scc_domestic, mismatch = payload.scc, payload.scc_domestic, payload.mismatch
    if target is not None:
        scc = interpolate_tensor(scc, years, target)
        if scc_domestic is not None:
            scc_domestic = interpolate_tensor(scc_domestic, years, target)
        if mismatch is not None:
            mismatch = interpolate_mismatch(mismatch, years, target)
        years = target

    if domestic and choice is ModelChoice.DICE:
        LOGGER.warning(
            "DICE is a global model. Domestic SCC values will be calculated as %g%% of the global values.",
            DICE_DOMESTIC_SHARE * 100,
        )
        scc_domestic = scc * DICE_DOMESTIC_SHARE

    return SCCValues(
        model=choice,
        gas=gas,
        output_dir=output_dir,
        perturbation_years=np.asarray(years, dtype=int),
        discounting=discounting,
        scc=scc,
        scc_domestic=scc_domestic,
        mismatch=mismatch,
    )


def run_scc_mcs(
    model_choice: ModelChoice | str,
    *,
    gas: Gas | str | None = None,
    trials: int = DEFAULT_TRIALS,
    perturbation_years: Iterable[int] = DEFAULT_PERTURBATION_YEARS,
    discount_rates: Iterable[float] | None = None,
    prtp: Iterable[float] | None = None,
    eta: Iterable[float] | None = None,
    domestic: bool = False,
    output_dir: Path | str | None = None,
    output_root: Path | str = DEFAULT_OUTPUT_ROOT,
    save_trials: bool = False,
    save_variables: bool = False,
    tables: bool = True,
    plots: bool = False,
    seed: int | None = None,
) -> None:
    """Run the SCC Monte Carlo experiment and write every result to disk.

    Writes ``SC-<gas>/`` trial distributions (and domestic variants), PAGE
    discontinuity flags, and, when ``tables`` is set, the percentile,
    standard-error and summary tables directly under the output directory.
    """

    values = simulate_scc(
        model_choice,
        gas=gas,
        trials=trials,
        perturbation_years=perturbation_years,
        discount_rates=discount_rates,
        prtp=prtp,
        eta=eta,
        domestic=domestic,
        output_dir=output_dir,
        output_root=output_root,
        save_trials=save_trials,
        save_variables=save_variables,
        seed=seed,
    )
    out = values.output_dir
    years = values.perturbation_years.tolist()
    discounting = values.discounting

    write_scc_values(values.scc, out, years, discounting, gas=values.gas)
    if values.scc_domestic is not None:
        write_scc_values(values.scc_domestic, out, years, discounting, gas=values.gas, domestic=True)
    if values.mismatch is not None:
        write_mismatch_values(values.mismatch, out, years, discounting.prtp)

    if tables:
        variants = [False, True] if values.scc_domestic is not None else [False]
        for is_domestic in variants:
            make_percentile_tables(out, values.gas, discounting, years, domestic=is_domestic)
            make_stderror_tables(out, values.gas, discounting, years, domestic=is_domestic)
            make_summary_table(out, values.gas, discounting, years, domestic=is_domestic)
        if values.mismatch is not None:
            make_mismatch_table(out, years, discounting.prtp)

    if plots:
        plot_scc_distributions(out, values.gas, discounting, years)
        if values.scc_domestic is not None:
            plot_scc_distributions(out, values.gas, discounting, years, domestic=True)

    LOGGER.info("Finished %s SC-%s run; results in %s", values.model.value, values.gas.value, out)
