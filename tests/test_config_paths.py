from datetime import datetime
from pathlib import Path

import pytest

import config_paths
from config_paths import (
    claim_output_directory,
    get_config_path,
    load_config,
    resolve_output_root,
    timestamped_output_directory,
)


def test_env_var_overrides_config_path(monkeypatch, tmp_path: Path):
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv(config_paths.CONFIG_ENV_VAR, str(target))
    assert get_config_path() == target.resolve()


def test_default_config_path_is_repo_root(monkeypatch):
    monkeypatch.delenv(config_paths.CONFIG_ENV_VAR, raising=False)
    assert get_config_path() == (config_paths.REPO_ROOT / "config.yaml").resolve()


def test_load_config_records_root(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("scc_mcs:\n  trials: 50\n  output_root: runs\n")
    config = load_config(path)

    assert config["scc_mcs"]["trials"] == 50
    assert resolve_output_root(config) == tmp_path.resolve() / "runs"


def test_load_config_missing_file_is_empty(tmp_path: Path):
    assert load_config(tmp_path / "absent.yaml") == {}


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_absolute_output_root_kept(tmp_path: Path):
    config = {"scc_mcs": {"output_root": str(tmp_path / "abs")}}
    assert resolve_output_root(config) == tmp_path / "abs"


def test_timestamped_directory_name(tmp_path: Path):
    now = datetime(2024, 3, 5, 14, 7, 9)
    path = timestamped_output_directory("FUND", "CH4", 250, root=tmp_path, now=now)
    assert path == tmp_path / "FUND 2024-03-05 14-07-09 SC-CH4 MC250"
    assert not path.exists()


def test_timestamped_directory_never_reuses_a_path(tmp_path: Path):
    now = datetime(2024, 3, 5, 14, 7, 9)
    first = timestamped_output_directory("DICE", "CO2", 10, root=tmp_path, now=now)
    first.mkdir()
    second = timestamped_output_directory("DICE", "CO2", 10, root=tmp_path, now=now)
    second.mkdir()
    third = timestamped_output_directory("DICE", "CO2", 10, root=tmp_path, now=now)

    assert second.name == f"{first.name} (2)"
    assert third.name == f"{first.name} (3)"


def test_claim_skips_directory_taken_after_naming(tmp_path: Path):
    now = datetime(2024, 3, 5, 14, 7, 9)
    name = timestamped_output_directory("PAGE", "N2O", 10, root=tmp_path, now=now)
    # Another run creates the same name between naming and claiming.
    name.mkdir()
    (name.parent / f"{name.name} (2)").mkdir()

    claimed = claim_output_directory(name)
    assert claimed.name == f"{name.name} (3)"
    assert claimed.is_dir()


def test_claim_creates_missing_parents(tmp_path: Path):
    claimed = claim_output_directory(tmp_path / "runs" / "DICE run")
    assert claimed == tmp_path / "runs" / "DICE run"
    assert claimed.is_dir()
