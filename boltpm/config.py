import os
import yaml
from pathlib import Path
from typing import Any, Dict
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, field_validator
import logging

logger = logging.getLogger(__name__)

# Environment variables that override configuration values
ENV_OVERRIDES: Dict[str, str] = {
    "BOLT_MANIFEST_FILE": "manifest_file",
    "BOLT_COMPILER": "compiler",
    "BOLT_LOG_LEVEL": "log_level",
}


class BoltConfig(BaseModel):
    """Process-wide settings for bolt-pm."""

    manifest_file: str = "bolt.toml"
    compiler: str = "bolt-compiler"
    init_name: str = "new-bolt-project"
    default_output_name: str = "my-app"
    initial_version: str = "0.1.0"
    default_entrypoint: str = "main.bolt"
    default_dependency_version: str = "1.0.0"
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("manifest_file", "compiler", "default_entrypoint")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


def _load_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def get_config() -> BoltConfig:
    """Get configuration by merging defaults, an optional YAML file and the environment.

    Precedence, lowest first: built-in defaults, the YAML file named by
    ``BOLT_CONFIG_PATH``, a ``.env`` file found from the working directory,
    then the process environment.

    Returns:
        Validated configuration

    Raises:
        FileNotFoundError: If ``BOLT_CONFIG_PATH`` names a missing file
        pydantic.ValidationError: If a value is invalid
    """
    config: Dict[str, Any] = {}

    config_path = os.getenv("BOLT_CONFIG_PATH")
    if config_path:
        config.update(_load_yaml(Path(config_path)))
        logger.debug(f"Loaded config file {config_path}")

    dotenv_path = find_dotenv(usecwd=True)
    env_vars: Dict[str, Any] = dict(dotenv_values(dotenv_path)) if dotenv_path else {}
    if dotenv_path:
        logger.debug(f"Loaded .env file {dotenv_path}")
    # Process environment takes precedence over .env
    env_vars.update(os.environ)

    for env_name, key in ENV_OVERRIDES.items():
        value = env_vars.get(env_name)
        if value:
            config[key] = value

    return BoltConfig.model_validate(config)
