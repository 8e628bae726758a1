"""Configuration loading for the bucket acceptance tester.

Supports three configuration sources, highest priority first:
1. Environment variables (for CI/CD)
2. A JSON config file (for local development)
3. Built-in defaults

Environment Variables:
    BUCKET_TEST_MODULE_ROOT=path/to/module/examples
    BUCKET_TEST_AWS_REGION=us-west-2
    BUCKET_TEST_TERRAFORM_BIN=terraform
    BUCKET_TEST_NAME_PREFIX=wizardai

Example config.json:
    {
        "module_root": "../terraform-aws-s3-bucket/examples",
        "aws_region": "eu-west-1"
    }
"""

import json
import os
from dataclasses import fields
from pathlib import Path
from typing import Optional

from bucket_acceptance.models import Settings


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


# Maps environment variables to Settings fields
ENV_VARS = {
    "BUCKET_TEST_MODULE_ROOT": "module_root",
    "BUCKET_TEST_AWS_REGION": "aws_region",
    "BUCKET_TEST_TERRAFORM_BIN": "terraform_binary",
    "BUCKET_TEST_NAME_PREFIX": "name_prefix",
}

SETTING_KEYS = {f.name for f in fields(Settings)}


def load_from_json(config_path: str) -> dict[str, str]:
    """Load setting overrides from a JSON file.

    Args:
        config_path: Path to the config.json file.

    Returns:
        Dictionary of setting overrides. Empty if the file doesn't exist.

    Raises:
        ConfigError: If the file contains invalid JSON, is not an object,
                    or names an unknown setting.
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    for key, value in data.items():
        if key not in SETTING_KEYS:
            raise ConfigError(f"Unknown setting '{key}' in config file")
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Setting '{key}' must be a non-empty string")

    return dict(data)


def load_from_env() -> dict[str, str]:
    """Load setting overrides from BUCKET_TEST_* environment variables.

    Empty variables are ignored.
    """
    overrides: dict[str, str] = {}

    for env_key, setting in ENV_VARS.items():
        value = os.environ.get(env_key)
        if value:
            overrides[setting] = value

    return overrides


def load_settings(config_path: Optional[str] = "config.json") -> Settings:
    """Load settings with environment priority.

    Priority order:
    1. Environment variables
    2. config.json file
    3. Defaults

    Args:
        config_path: Path to config.json (optional).

    Returns:
        The merged Settings.

    Raises:
        ConfigError: If the config file is malformed.
    """
    values: dict[str, str] = {}

    if config_path:
        values.update(load_from_json(config_path))

    values.update(load_from_env())

    return Settings(**values)


def validate_module_root(settings: Settings) -> Path:
    """Ensure the module examples root exists.

    Returns:
        The module root as a Path.

    Raises:
        ConfigError: If the directory doesn't exist.
    """
    root = Path(settings.module_root)
    if not root.is_dir():
        raise ConfigError(f"Module root not found: {settings.module_root}")
    return root
