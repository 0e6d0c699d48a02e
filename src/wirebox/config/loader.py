"""Loading of container configuration files."""
import json
import os
from typing import Any, Dict

from pydantic import ValidationError

from wirebox.config.schemas import ContainerConfig
from wirebox.infrastructure.di.exceptions import ConfigException
from wirebox.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

YAML_EXTENSIONS = (".yml", ".yaml")


def read_yaml_file(file_path: str, encoding: str = "utf-8") -> Dict[str, Any]:
    """
    Read a YAML file with lazy import.

    Args:
        file_path: File path
        encoding: File encoding

    Returns:
        Parsed YAML data (an empty dict for an empty file)
    """
    import yaml
    with open(file_path, "r", encoding=encoding) as f:
        return yaml.safe_load(f) or {}


def read_json_file(file_path: str, encoding: str = "utf-8") -> Dict[str, Any]:
    """Read a JSON file."""
    with open(file_path, "r", encoding=encoding) as f:
        return json.load(f)


def parse_container_config(data: Dict[str, Any]) -> ContainerConfig:
    """
    Validate raw configuration data.

    Args:
        data: Mapping as read from a configuration file

    Returns:
        Validated configuration

    Raises:
        ConfigException: If the data does not match the schema
    """
    if not isinstance(data, dict):
        raise ConfigException(f"Container configuration must be a mapping, got {type(data).__name__}")
    try:
        return ContainerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigException(f"Invalid container configuration: {e}", e.errors()) from e


def load_container_config(file_path: str) -> ContainerConfig:
    """
    Load container configuration from a YAML or JSON file.

    The format is chosen by file extension: ``.yml``/``.yaml`` are read as
    YAML, everything else as JSON.

    Args:
        file_path: Path to the configuration file

    Returns:
        Validated configuration

    Raises:
        ConfigException: If the file is missing, unreadable or invalid
    """
    import yaml

    if not os.path.isfile(file_path):
        raise ConfigException(f"Configuration file not found: {file_path}")

    try:
        if file_path.lower().endswith(YAML_EXTENSIONS):
            data = read_yaml_file(file_path)
        else:
            data = read_json_file(file_path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigException(f"Could not parse configuration file {file_path}: {e}") from e

    logger.debug("Loaded container configuration", path=file_path)
    return parse_container_config(data)
