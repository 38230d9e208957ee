"""Helpers to resolve the run configuration and per-run output directories."""

from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path
from typing import Mapping, MutableMapping

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_ENV_VAR = "SCC_MCS_CONFIG_PATH"
CONFIG_ROOT_KEY = "_config_root"
DEFAULT_OUTPUT_ROOT = "output"
_SUFFIX_PATTERN = re.compile(r"^(.*) \((\d+)\)$")


def get_config_path(default: Path | None = None) -> Path:
    """Return the configuration path, honouring SCC_MCS_CONFIG_PATH when set."""

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    if default is not None:
        return default.resolve()
    return (REPO_ROOT / "config.yaml").resolve()


def load_config(path: Path | None = None) -> dict:
    """Read the YAML configuration; a missing file yields an empty mapping."""

    path = get_config_path(path)
    if not path.exists():
        return {}
    with path.open() as handle:
        config = yaml.safe_load(handle) or {}
    if not isinstance(config, MutableMapping):
        raise ValueError(f"Configuration at {path} must be a mapping.")
    set_config_root(config, path.parent)
    return config


def set_config_root(config: MutableMapping[str, object], root: Path) -> None:
    """Annotate a config mapping with its filesystem root for relative paths."""

    if not isinstance(config, MutableMapping):
        return
    config[CONFIG_ROOT_KEY] = str(root.resolve())


def get_config_root(config: Mapping[str, object], fallback: Path | None = None) -> Path:
    """Return the base directory that relative paths should resolve against."""

    if isinstance(config, Mapping):
        value = config.get(CONFIG_ROOT_KEY)
        if isinstance(value, str):
            return Path(value).expanduser().resolve()
    return (fallback or REPO_ROOT).resolve()


def resolve_output_root(config: Mapping[str, object] | None) -> Path:
    """Return ``scc_mcs.output_root`` resolved against the config root."""

    section = config.get("scc_mcs") if isinstance(config, Mapping) else None
    raw = section.get("output_root") if isinstance(section, Mapping) else None
    path = Path(str(raw or DEFAULT_OUTPUT_ROOT)).expanduser()
    if path.is_absolute():
        return path
    return get_config_root(config or {}) / path


def timestamped_output_directory(
    model: str,
    gas: str,
    trials: int,
    *,
    root: Path | str = DEFAULT_OUTPUT_ROOT,
    now: datetime | None = None,
) -> Path:
    """Return ``<root>/<MODEL> <yyyy-mm-dd HH-MM-SS> SC-<gas> MC<trials>``.

    The directory is not created; use :func:`claim_output_directory` before
    writing. When the name is already taken (two runs in the same second) a
    `` (n)`` suffix keeps the result unused.
    """

    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H-%M-%S")
    path = Path(root) / f"{model} {stamp} SC-{gas} MC{trials}"
    while path.exists():
        path = _next_suffix(path)
    return path


def _next_suffix(path: Path) -> Path:
    match = _SUFFIX_PATTERN.match(path.name)
    if match:
        return path.with_name(f"{match.group(1)} ({int(match.group(2)) + 1})")
    return path.with_name(f"{path.name} (2)")


def claim_output_directory(path: Path | str) -> Path:
    """Create ``path``, moving to the next `` (n)`` suffix while it already exists.

    ``mkdir(exist_ok=False)`` makes the claim atomic, so concurrent runs that
    resolved the same name still end up in different directories.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    while True:
        try:
            path.mkdir(exist_ok=False)
        except FileExistsError:
            path = _next_suffix(path)
            continue
        return path
