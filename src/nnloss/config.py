# src/nnloss/config.py
"""
Runtime configuration for nnloss

Values come from a YAML file (path taken from NNLOSS_CONFIG, default
./nnloss.yaml) layered over DEFAULTS. Import CONFIG for the current values,
or call load_config() again after changing the file / env var.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_VAR = "NNLOSS_CONFIG"
DEFAULT_CONFIG_PATH = Path("nnloss.yaml")

DEFAULTS: Dict[str, Any] = {
    "dtype": "float64",
    "reduction": True,
    "log_level": "WARNING",
}

_DTYPES = {
    "float32": np.float32,
    "float64": np.float64,
}


def load_yaml_config(path: Optional[Union[str, Path]] = None) -> dict:
    """Load configuration from a YAML file, {} if it does not exist."""
    cfg_path = Path(path or os.getenv(ENV_VAR, DEFAULT_CONFIG_PATH))
    if not cfg_path.exists():
        logger.info("No config found at %s, using defaults", cfg_path)
        return {}
    with open(cfg_path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{cfg_path}: expected a mapping at top level, got {type(data).__name__}")
    logger.debug("Loaded config from %s: %s", cfg_path, data)
    return data


def merge_configs(base: dict, override: dict) -> dict:
    """Merge override into base (override wins)."""
    final = base.copy()
    final.update(override)
    return final


def validate_config(cfg: dict) -> dict:
    unknown = set(cfg) - set(DEFAULTS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", sorted(unknown))
    if cfg["dtype"] not in _DTYPES:
        raise ConfigurationError(f"dtype must be one of {sorted(_DTYPES)}, got {cfg['dtype']!r}")
    # reduction is normalized here so the rest of the package only sees bools
    from .losses.reductions import check_reduction
    cfg["reduction"] = check_reduction(cfg["reduction"])
    level = logging.getLevelName(str(cfg["log_level"]).upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"log_level {cfg['log_level']!r} is not a logging level")
    return cfg


def load_config(path: Optional[Union[str, Path]] = None) -> dict:
    """Main config loader: DEFAULTS + YAML. Updates CONFIG in place."""
    cfg = validate_config(merge_configs(DEFAULTS, load_yaml_config(path)))
    CONFIG.clear()
    CONFIG.update(cfg)
    return CONFIG


def get_dtype():
    return _DTYPES[CONFIG["dtype"]]


def default_reduction() -> bool:
    return CONFIG["reduction"]


# === The global CONFIG dict you import elsewhere ===
CONFIG: Dict[str, Any] = dict(DEFAULTS)
