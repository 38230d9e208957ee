"""Run the Monte Carlo social cost of greenhouse gas experiment.

Usage
-----
```bash
python scripts/run_scc_mcs.py --model DICE --trials 1000
python scripts/run_scc_mcs.py --model PAGE --gas CH4 --prtp 0.01 0.02 --eta 0 1.5 --domestic
python scripts/run_scc_mcs.py --model FUND --discount-rates 0.025 0.03 --save-trials --plots
```

Defaults come from the ``scc_mcs`` section of ``config.yaml`` (or the file
named by ``SCC_MCS_CONFIG_PATH``); command-line flags take precedence. Results
are written to ``<output_root>/<MODEL> <timestamp> SC-<gas> MC<trials>`` unless
``--output-dir`` is given.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Mapping, Sequence

ROOT = Path(__file__).resolve().parents[1]

sys.path.insert(0, str(ROOT / "src"))

from config_paths import get_config_path, load_config, resolve_output_root  # noqa: E402
from iwg_models.constants import DEFAULT_PERTURBATION_YEARS, DEFAULT_TRIALS, ModelChoice  # noqa: E402
from montecarlo import run_scc_mcs  # noqa: E402

LOGGER = logging.getLogger("scc_mcs")


def _optional_floats(value: object) -> list[float] | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return [float(value)]
    return [float(item) for item in value]  # type: ignore[union-attr]


def _discounting(args: argparse.Namespace, cfg: Mapping[str, object]) -> dict[str, list[float] | None]:
    """Command-line discounting replaces the configured one as a whole."""

    if args.discount_rates is not None or args.prtp is not None or args.eta is not None:
        source = {"discount_rates": args.discount_rates, "prtp": args.prtp, "eta": args.eta}
    else:
        source = {key: cfg.get(key) for key in ("discount_rates", "prtp", "eta")}
    return {key: _optional_floats(value) for key, value in source.items()}


def _build_parser(cfg: Mapping[str, object]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo social cost of CO2, CH4 or N2O with DICE, FUND or PAGE."
    )
    parser.add_argument(
        "--model",
        default=str(cfg.get("model", ModelChoice.DICE.value)),
        type=str.upper,
        choices=[choice.value for choice in ModelChoice],
        help="Integrated assessment model to run (default from config or DICE).",
    )
    parser.add_argument(
        "--gas",
        default=cfg.get("gas"),
        help="Gas to pulse: CO2, CH4 or N2O (default CO2).",
    )
    parser.add_argument(
        "--trials",
        type=int,
        default=int(cfg.get("trials", DEFAULT_TRIALS)),
        help="Number of Monte Carlo trials per scenario.",
    )
    parser.add_argument(
        "--perturbation-years",
        type=int,
        nargs="+",
        default=list(cfg.get("perturbation_years") or DEFAULT_PERTURBATION_YEARS),
        help="Emission years to compute the SCC for.",
    )
    parser.add_argument(
        "--prtp",
        type=float,
        nargs="+",
        default=None,
        help="Pure rates of time preference.",
    )
    parser.add_argument(
        "--eta",
        type=float,
        nargs="+",
        default=None,
        help="Elasticities of marginal utility of consumption.",
    )
    parser.add_argument(
        "--discount-rates",
        type=float,
        nargs="+",
        default=None,
        help="Deprecated flat discount rates; use --prtp with --eta 0 instead.",
    )
    parser.add_argument(
        "--domestic",
        action="store_true",
        default=bool(cfg.get("domestic", False)),
        help="Also compute US domestic SCC values.",
    )
    parser.add_argument(
        "--save-trials",
        action="store_true",
        default=bool(cfg.get("save_trials", False)),
        help="Write the sampled parameter values to trials.csv.",
    )
    parser.add_argument(
        "--save-variables",
        action="store_true",
        default=bool(cfg.get("save_variables", False)),
        help="Write the per-trial temperature paths of the base runs.",
    )
    parser.add_argument(
        "--no-tables",
        dest="tables",
        action="store_false",
        default=bool(cfg.get("tables", True)),
        help="Skip the percentile, standard error and summary tables.",
    )
    parser.add_argument(
        "--plots",
        action="store_true",
        default=bool(cfg.get("plots", False)),
        help="Write histograms of the SCC distributions.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=cfg.get("seed"),
        help="Seed for the parameter sampling.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for this run (default: a new timestamped directory).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    root_cfg = load_config()
    LOGGER.info("Using configuration %s", get_config_path())
    cfg = root_cfg.get("scc_mcs", {}) or {}
    parser = _build_parser(cfg)
    args = parser.parse_args(list(argv) if argv is not None else sys.argv[1:])

    if args.discount_rates is not None and (args.prtp is not None or args.eta is not None):
        parser.error("--discount-rates cannot be combined with --prtp/--eta.")

    run_scc_mcs(
        args.model,
        gas=args.gas,
        trials=args.trials,
        perturbation_years=args.perturbation_years,
        **_discounting(args, cfg),
        domestic=args.domestic,
        output_dir=args.output_dir,
        output_root=resolve_output_root(root_cfg),
        save_trials=args.save_trials,
        save_variables=args.save_variables,
        tables=args.tables,
        plots=args.plots,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
