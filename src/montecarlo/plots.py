"""Histogram plots of the SCC trial distributions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from iwg_models.constants import Gas

from .discounting import DiscountConfig, format_rate
from .tables import load_scc_cell

LOGGER = logging.getLogger(__name__)


def plot_scc_distributions(
    output_dir: Path | str,
    gas: Gas | str,
    discounting: DiscountConfig,
    perturbation_years: Sequence[int],
    *,
    domestic: bool = False,
    plot_format: str = "png",
    bins: int = 50,
) -> list[Path]:
    """Write one histogram per (year, prtp, eta) overlaying the five scenarios."""

    import matplotlib

    matplotlib.use("Agg")  # type: ignore[attr-defined]
    import matplotlib.pyplot as plt

    gas = Gas(gas)
    plot_dir = Path(output_dir) / "plots"
    plot_dir.mkdir(parents=True, exist_ok=True)
    suffix = "_domestic" if domestic else ""
    written: list[Path] = []
    for year in perturbation_years:
        for _, _, prtp, eta in discounting.cells():
            frame = load_scc_cell(output_dir, gas, year, prtp, eta, domestic=domestic)
            finite = frame.to_numpy(dtype=float)
            finite = finite[np.isfinite(finite)]
            if finite.size == 0:
                LOGGER.info("No finite SCC values for %s prtp=%s eta=%s; skipping plot.", year, prtp, eta)
                continue
            edges = np.histogram_bin_edges(finite, bins=bins)
            fig, ax = plt.subplots()
            for scenario in frame.columns:
                ax.hist(frame[scenario].dropna(), bins=edges, alpha=0.4, label=scenario)
            ax.set_title(f"SC-{gas.value} {year} (prtp={prtp:g}, eta={eta:g}){suffix}")
            ax.set_xlabel(f"SC-{gas.value} (2007 USD/t)")
            ax.set_ylabel("Trials")
            ax.grid(True, linestyle="--", alpha=0.4)
            ax.legend()
            fig.tight_layout()
            path = plot_dir / (
                f"SC-{gas.value}_{year}_prtp{format_rate(prtp)}_eta{format_rate(eta)}{suffix}.{plot_format}"
            )
            fig.savefig(path, format=plot_format, dpi=150)
            plt.close(fig)
            written.append(path)
    LOGGER.info("Wrote %s distribution plots to %s", len(written), plot_dir)
    return written
