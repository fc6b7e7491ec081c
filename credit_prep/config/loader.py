"""
Config Loader

Builds the frozen PipelineConfig from, in increasing priority: schema
defaults, a YAML file, dot-notation CLI overrides and nested programmatic
overrides.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

import yaml
from pydantic import ValidationError

from credit_prep.config.schema import PipelineConfig
from credit_prep.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def _set_nested(d: Dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set ``d["a"]["b"]["c"] = value`` for ``dotted_key="a.b.c"``, creating levels."""
    *parents, leaf = dotted_key.split(".")
    for key in parents:
        d = d.setdefault(key, {})
    d[leaf] = value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge ``override`` into ``base`` in place; override wins."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _read_yaml(yaml_path: str) -> Dict[str, Any]:
    path = Path(yaml_path)
    if not path.exists():
        raise ConfigurationError(
            f"Config file not found: {yaml_path}",
            details={"path": str(yaml_path)},
        )
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {yaml_path}", cause=e)
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root must be a mapping: {yaml_path}")

    # data.input_path is relative to the YAML file when that file exists there,
    # otherwise it is left relative to the working directory
    data_cfg = raw.get("data") or {}
    input_path = data_cfg.get("input_path")
    if input_path and not Path(input_path).is_absolute():
        candidate = (path.parent / input_path).resolve()
        if candidate.exists():
            data_cfg["input_path"] = str(candidate)

    logger.info("Loaded config from %s", yaml_path)
    return raw


def load_config(
    yaml_path: Optional[str] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> PipelineConfig:
    """Load the pipeline configuration.

    Args:
        yaml_path: YAML config file; schema defaults only when None.
        cli_overrides: Flat dot-notation keys, e.g.
            {"data.input_path": "data/train.csv"}. None values are ignored.
        overrides: Nested dict merged last.

    Returns:
        Frozen PipelineConfig.

    Raises:
        ConfigurationError: Missing file, invalid YAML, or values the schema
            rejects.
    """
    raw: Dict[str, Any] = _read_yaml(yaml_path) if yaml_path is not None else {}

    for key, value in (cli_overrides or {}).items():
        if value is not None:
            _set_nested(raw, key, value)
    if overrides:
        _deep_merge(raw, overrides)

    try:
        config = PipelineConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError("Invalid pipeline configuration", cause=e)

    logger.debug("Pipeline config loaded successfully")
    return config


def save_config(config: PipelineConfig, path: str) -> None:
    """Write a config snapshot: YAML for .yaml/.yml paths, JSON otherwise."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    config_dict = config.model_dump()

    with open(out_path, "w", encoding="utf-8") as f:
        if out_path.suffix in (".yaml", ".yml"):
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(config_dict, f, indent=2, default=str)

    logger.info("Config saved to %s", path)
