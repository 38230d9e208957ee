import importlib.util
from pathlib import Path

import pytest

import config_paths

REPO_ROOT = Path(__file__).resolve().parents[1]
RUN_SCC_MCS_PATH = REPO_ROOT / "scripts" / "run_scc_mcs.py"

spec = importlib.util.spec_from_file_location("run_scc_mcs_module", RUN_SCC_MCS_PATH)
run_scc_mcs_cli = importlib.util.module_from_spec(spec)
assert spec.loader is not None
spec.loader.exec_module(run_scc_mcs_cli)  # type: ignore[attr-defined]


@pytest.fixture
def captured(monkeypatch, tmp_path: Path) -> dict:
    config = tmp_path / "config.yaml"
    config.write_text(
        "scc_mcs:\n"
        "  model: FUND\n"
        "  gas: CH4\n"
        "  trials: 25\n"
        "  perturbation_years: [2020, 2030]\n"
        "  prtp: [0.02]\n"
        "  eta: [1.0]\n"
        "  output_root: runs\n"
    )
    monkeypatch.setenv(config_paths.CONFIG_ENV_VAR, str(config))
    calls: dict = {}

    def _fake_run(model_choice, **kwargs):
        calls["model"] = model_choice
        calls.update(kwargs)

    monkeypatch.setattr(run_scc_mcs_cli, "run_scc_mcs", _fake_run)
    return calls


def test_config_supplies_defaults(captured, tmp_path: Path):
    run_scc_mcs_cli.main([])

    assert captured["model"] == "FUND"
    assert captured["gas"] == "CH4"
    assert captured["trials"] == 25
    assert captured["perturbation_years"] == [2020, 2030]
    assert captured["prtp"] == [0.02]
    assert captured["eta"] == [1.0]
    assert captured["discount_rates"] is None
    assert captured["tables"] is True
    assert captured["output_root"] == tmp_path.resolve() / "runs"


def test_cli_overrides_config(captured):
    run_scc_mcs_cli.main(
        ["--model", "page", "--trials", "5", "--discount-rates", "0.03", "--no-tables", "--domestic"]
    )

    assert captured["model"] == "PAGE"
    assert captured["trials"] == 5
    assert captured["discount_rates"] == [0.03]
    assert captured["prtp"] is None
    assert captured["eta"] is None
    assert captured["tables"] is False
    assert captured["domestic"] is True


def test_cli_rejects_mixed_discounting(captured):
    with pytest.raises(SystemExit):
        run_scc_mcs_cli.main(["--discount-rates", "0.03", "--prtp", "0.03"])
