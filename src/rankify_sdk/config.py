# Area: Shared
"""
rankify_sdk.config — Configuration loading
==========================================

Configuration is a plain dict. Values come from an optional JSON file,
then from environment variables (a ``.env`` file in the working
directory is loaded first), environment winning.

    INDEXER_URL               -> indexer_url
    INDEXER_API_KEY           -> indexer_api_key
    CHAIN_ID                  -> chain_id
    RANKIFY_INSTANCE_ADDRESS  -> contract_address
    REQUEST_TIMEOUT_SECONDS   -> request_timeout_seconds
    LOG_FILE                  -> log_file
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger("rankify_sdk")

DEFAULT_CONFIG: Dict[str, Any] = {
    "indexer_url": "http://localhost:8080/v1/graphql",
    "request_timeout_seconds": 30,
    "log_file": "rankify_sdk.log",
}

ENV_MAPPINGS = {
    "INDEXER_URL": "indexer_url",
    "INDEXER_API_KEY": "indexer_api_key",
    "CHAIN_ID": "chain_id",
    "RANKIFY_INSTANCE_ADDRESS": "contract_address",
    "REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
    "LOG_FILE": "log_file",
}

INT_KEYS = {"chain_id", "request_timeout_seconds"}

# Needed by anything that reads a specific instance
REQUIRED_CONFIG_KEYS = [
    "chain_id",
    "contract_address",
]


def load_config(config_path: Optional[str] = None, use_dotenv: bool = True) -> Dict[str, Any]:
    """
    Load config from file and environment.

    Args:
        config_path: Optional path to a JSON config file
        use_dotenv: Load a ``.env`` file into the environment first

    Returns:
        Config dict with defaults applied and integer keys coerced

    Raises:
        ValueError: If an integer setting is not a number
    """
    if use_dotenv:
        load_dotenv()

    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning(f"Config file not found: {config_path}")

    # Override with environment variables
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    for key in INT_KEYS:
        if key in config:
            try:
                config[key] = int(config[key])
            except (TypeError, ValueError):
                raise ValueError(f"Config key '{key}' must be an integer, got {config[key]!r}")

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate required configuration keys.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if k not in config]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
