"""
YAML configuration for the command-line runner.
"""
import os
import logging
from typing import Any, Dict, Optional

import yaml

from lhocv.mode import MAX_CLASSES, MIN_PER_CLASS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'model_path': None,
    'train': False,
    'n_estimators': 500,
    'seed': None,
    'min_per_class': MIN_PER_CLASS,
    'max_classes': MAX_CLASSES,
    'n_jobs': None,
    'plot_roc': True,
    'log_level': 'INFO',
}

REQUIRED_KEYS = ['input_data', 'output_dir']


def validate_config(config: Dict[str, Any]):
    missing = [k for k in REQUIRED_KEYS if config.get(k) in (None, '')]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
    if int(config.get('n_estimators', 1)) < 1:
        raise ValueError("n_estimators must be a positive integer")
    if int(config.get('min_per_class', 1)) < 1:
        raise ValueError("min_per_class must be at least 1")
    if int(config.get('max_classes', 2)) < 2:
        raise ValueError("max_classes must be at least 2")


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Defaults, then the YAML file, then non-None ``overrides``."""
    config = dict(DEFAULT_CONFIG)
    if path:
        if not os.path.exists(path):
            raise ValueError(f"Config file {path} does not exist.")
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        logger.info(f"Loaded config from {path}: {loaded}")
        config.update(loaded)
    for k, v in (overrides or {}).items():
        if v is not None:
            config[k] = v
    return config
