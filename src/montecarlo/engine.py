"""A small Monte Carlo engine: trial generation and the scenario/trial loop.

The engine owns sampling and iteration only. Model-specific work happens in the
``scenario_func`` and ``post_trial_func`` callbacks, which read configuration
from and write results into the shared ``payload`` of the returned
:class:`SimulationInstance`.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

import numpy as np
import pandas as pd

LOGGER = logging.getLogger(__name__)


class Distribution(Protocol):
    def rvs(self, size: int | None = None, random_state: Any = None) -> np.ndarray: ...


class SimulationModel(Protocol):
    years: np.ndarray
    results: Any

    def set_param(self, name: str, value: float) -> None: ...

    def run(self) -> Any: ...


@dataclass(slots=True)
class RandomVariable:
    name: str
    distribution: Distribution


@dataclass(slots=True)
class SimulationDef:
    """Uncertain parameters of a model and the outputs to keep per trial."""

    variables: list[RandomVariable]
    save: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        names = [rv.name for rv in self.variables]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate random variables: {duplicates}")

    @property
    def names(self) -> list[str]:
        return [rv.name for rv in self.variables]


ScenarioFunc = Callable[["SimulationInstance", tuple], None]
PostTrialFunc = Callable[["SimulationInstance", int, int, tuple], None]


@dataclass
class SimulationInstance:
    """State of one simulation run, handed to both callbacks."""

    sim_def: SimulationDef
    models: list[SimulationModel]
    trials: pd.DataFrame
    payload: Any = None
    current_trial: int | None = None
    saved: dict[str, list[dict[str, object]]] = field(default_factory=dict)


def generate_trials(
    sim_def: SimulationDef,
    trials: int,
    *,
    seed: int | None = None,
    filename: Path | str | None = None,
) -> pd.DataFrame:
    """Draw ``trials`` samples of every random variable.

    Returns a frame with one row per trial and one column per variable. When
    ``filename`` is given the frame is also written there as CSV.
    """

    if int(trials) <= 0:
        raise ValueError("trials must be a positive integer.")
    rng = np.random.default_rng(seed)
    data = {
        rv.name: np.asarray(rv.distribution.rvs(size=int(trials), random_state=rng), dtype=float)
        for rv in sim_def.variables
    }
    frame = pd.DataFrame(data, index=pd.RangeIndex(int(trials), name="trial"))
    if filename is not None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path)
        LOGGER.info("Wrote %s sampled trials to %s", trials, path)
    return frame


def _scenario_tuples(scenario_args: Sequence[tuple[str, Sequence[object]]] | None) -> list[tuple]:
    if not scenario_args:
        return [()]
    return list(itertools.product(*(values for _, values in scenario_args)))


def _record_saved(sim: SimulationInstance, tup: tuple, trialnum: int) -> None:
    base = sim.models[0]
    for name in sim.sim_def.save:
        series = base.results.sample(name, base.years)
        row: dict[str, object] = {"trial": trialnum, "scenario": "_".join(map(str, tup))}
        row.update({str(int(year)): float(value) for year, value in zip(base.years, series)})
        sim.saved.setdefault(name, []).append(row)


def _write_saved(sim: SimulationInstance, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    for name, rows in sim.saved.items():
        pd.DataFrame(rows).to_csv(output_dir / f"{name}.csv", index=False)


def run_sim(
    sim_def: SimulationDef,
    models: Sequence[SimulationModel],
    trials: int,
    *,
    payload: Any = None,
    scenario_func: ScenarioFunc | None = None,
    scenario_args: Sequence[tuple[str, Sequence[object]]] | None = None,
    post_trial_func: PostTrialFunc | None = None,
    models_to_run: int | None = None,
    seed: int | None = None,
    trials_output_path: Path | str | None = None,
    results_output_dir: Path | str | None = None,
) -> SimulationInstance:
    """Run every trial for every scenario tuple.

    Scenario tuples (the cartesian product of ``scenario_args`` values) form the
    outer loop. For each trial the sampled values are applied to all models,
    the first ``models_to_run`` models are run and ``post_trial_func`` receives
    the zero-based trial index. Trials run one after another, so no two trials
    touch the payload at the same time. A failing trial aborts the run.
    """

    models = list(models)
    if not models:
        raise ValueError("At least one model is required.")
    n_run = len(models) if models_to_run is None else int(models_to_run)
    samples = generate_trials(sim_def, trials, seed=seed, filename=trials_output_path)
    sim = SimulationInstance(sim_def=sim_def, models=models, trials=samples, payload=payload)
    tuples = _scenario_tuples(scenario_args)
    ntimesteps = len(models[0].years)
    total = len(samples)
    report_every = max(1, total // 10)

    for tup in tuples:
        if scenario_func is not None:
            scenario_func(sim, tup)
        LOGGER.info("Running %s trials for scenario %s", total, tup)
        for trialnum in range(total):
            sim.current_trial = trialnum
            try:
                for name, value in samples.iloc[trialnum].items():
                    for model in models:
                        model.set_param(name, value)
                for model in models[:n_run]:
                    model.run()
                if sim_def.save:
                    _record_saved(sim, tup, trialnum)
                if post_trial_func is not None:
                    post_trial_func(sim, trialnum, ntimesteps, tup)
            except Exception:
                LOGGER.error("Trial %s failed for scenario %s", trialnum, tup)
                raise
            done = trialnum + 1
            if total >= 10 and (done % report_every == 0 or done == total):
                LOGGER.info("Completed trial %s/%s (%.1f%%)", done, total, 100.0 * done / total)

    sim.current_trial = None
    if results_output_dir is not None and sim.saved:
        _write_saved(sim, Path(results_output_dir))
    return sim
