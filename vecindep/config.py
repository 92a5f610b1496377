"""Configuration loading.

Settings come from an optional YAML file merged over ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "checker": {
        "epsilon": 1e-9,
    },
    "input": {
        # None keeps asking until the input is valid
        "max_retries": None,
    },
    "display": {
        "precision": 4,
        "language": "en",
    },
}


def merge_config(base: Dict, overrides: Optional[Dict]) -> Dict:
    """Merge a (partial) config dictionary into a copy of ``base``.

    Sections and keys unknown to ``base`` are dropped with a warning.

    Args:
        base: Complete configuration
        overrides: Partial configuration, e.g. as read from YAML

    Returns:
        New merged configuration dictionary
    """
    merged = copy.deepcopy(base)
    if not overrides:
        return merged

    for section, values in overrides.items():
        if section not in merged:
            logger.warning(f"Ignoring unknown config section '{section}'")
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        for key, value in values.items():
            if key not in merged[section]:
                logger.warning(f"Ignoring unknown config key '{section}.{key}'")
                continue
            merged[section][key] = value

    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to configuration file. If None, ``config.yaml`` at
            the repository root is used when present, defaults otherwise

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If an explicitly given file does not exist
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No config.yaml found, using defaults")
            return copy.deepcopy(DEFAULT_CONFIG)
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f)

    logger.debug(f"Loaded config from {config_path}")
    return merge_config(DEFAULT_CONFIG, loaded)
