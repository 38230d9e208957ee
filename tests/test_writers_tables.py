from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from iwg_models.constants import SCENARIO_NAMES
from montecarlo.discounting import DiscountConfig
from montecarlo.tables import (
    POOLED_LABEL,
    load_scc_cell,
    make_mismatch_table,
    make_percentile_tables,
    make_stderror_tables,
    make_summary_table,
)
from montecarlo.writers import scc_filename, write_mismatch_values, write_scc_values

YEARS = [2020, 2030]
FLAT = DiscountConfig(prtp=(0.025, 0.03), eta=(0.0,))


@pytest.fixture
def written(tmp_path: Path) -> np.ndarray:
    trials = 4
    values = np.arange(trials * 2 * 5 * 2 * 1, dtype=float).reshape(trials, 2, 5, 2, 1)
    write_scc_values(values, tmp_path, YEARS, FLAT, gas="CO2")
    return values


def test_scc_filename_format():
    assert scc_filename(2020, 0.025, 0.0) == "2020_prtp0.025_eta0.csv"
    assert scc_filename(2030, 0.03, 1.5, domestic=True) == "2030_prtp0.03_eta1.5_domestic.csv"


def test_write_scc_values_one_file_per_cell(tmp_path: Path, written: np.ndarray):
    files = sorted(p.name for p in (tmp_path / "SC-CO2").iterdir())
    assert len(files) == 4

    frame = load_scc_cell(tmp_path, "CO2", 2030, 0.03, 0.0)
    assert list(frame.columns) == list(SCENARIO_NAMES.values())
    np.testing.assert_allclose(frame.to_numpy(), written[:, 1, :, 1, 0])
    first_line = (tmp_path / "SC-CO2" / scc_filename(2030, 0.03, 0.0)).read_text().splitlines()[0]
    assert first_line.startswith("# unit:")


def test_write_scc_values_rejects_wrong_shape(tmp_path: Path):
    with pytest.raises(ValueError):
        write_scc_values(np.zeros((2, 3, 5, 2, 1)), tmp_path, YEARS, FLAT, gas="CO2")


def test_load_missing_cell_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_scc_cell(tmp_path, "CH4", 2020, 0.03, 0.0)


def test_percentile_table(tmp_path: Path, written: np.ndarray):
    path = make_percentile_tables(tmp_path, "CO2", FLAT, YEARS, percentiles=(5, 50, 95))
    table = pd.read_csv(path)

    assert path.name == "SC-CO2_percentiles.csv"
    assert len(table) == 2 * 2 * 6
    row = table[(table["year"] == 2020) & (table["prtp"] == 0.025) & (table["scenario"] == "IMAGE")]
    assert row["p50"].iloc[0] == pytest.approx(np.median(written[:, 0, 0, 0, 0]))
    assert POOLED_LABEL in set(table["scenario"])


def test_stderror_table(tmp_path: Path, written: np.ndarray):
    table = pd.read_csv(make_stderror_tables(tmp_path, "CO2", FLAT, YEARS))
    row = table[(table["year"] == 2030) & (table["prtp"] == 0.03) & (table["scenario"] == "MESSAGE")]
    values = written[:, 1, 2, 1, 0]

    assert row["trials"].iloc[0] == 4
    assert row["mean"].iloc[0] == pytest.approx(values.mean())
    assert row["std_error"].iloc[0] == pytest.approx(values.std(ddof=1) / 2.0)


def test_summary_table_for_flat_discounting(tmp_path: Path, written: np.ndarray):
    table = pd.read_csv(make_summary_table(tmp_path, "CO2", FLAT, YEARS))
    assert list(table["year"]) == YEARS
    assert {"average_prtp0.025", "high_impact_prtp0.025", "average_prtp0.03"}.issubset(table.columns)
    pooled = written[:, 0, :, 0, 0].ravel()
    assert table["average_prtp0.025"].iloc[0] == pytest.approx(pooled.mean())
    assert table["high_impact_prtp0.025"].iloc[0] == pytest.approx(np.percentile(pooled, 95))


def test_summary_table_skipped_for_ramsey_grid(tmp_path: Path):
    ramsey = DiscountConfig(prtp=(0.01,), eta=(0.0, 1.5))
    write_scc_values(np.ones((2, 2, 5, 1, 2)), tmp_path, YEARS, ramsey, gas="N2O")
    assert make_summary_table(tmp_path, "N2O", ramsey, YEARS) is None
    assert not (tmp_path / "SC-N2O_summary.csv").exists()


def test_domestic_tables_use_domestic_files(tmp_path: Path):
    write_scc_values(np.full((3, 2, 5, 2, 1), 2.0), tmp_path, YEARS, FLAT, gas="CH4", domestic=True)
    path = make_stderror_tables(tmp_path, "CH4", FLAT, YEARS, domestic=True)
    assert path.name == "SC-CH4_stderror_domestic.csv"
    with pytest.raises(FileNotFoundError):
        make_stderror_tables(tmp_path, "CH4", FLAT, YEARS)


def test_mismatch_values_and_share(tmp_path: Path):
    flags = np.zeros((4, 2, 5, 1), dtype=bool)
    flags[:2, 0, 0, 0] = True
    write_mismatch_values(flags, tmp_path, YEARS, [0.03])

    written = pd.read_csv(tmp_path / "discontinuity_mismatch" / "2020_prtp0.03.csv", comment="#")
    assert set(np.unique(written.to_numpy())) <= {0, 1}

    table = pd.read_csv(make_mismatch_table(tmp_path, YEARS, [0.03]))
    row = table[(table["year"] == 2020) & (table["scenario"] == "IMAGE")]
    assert row["mismatch_share"].iloc[0] == pytest.approx(0.5)
