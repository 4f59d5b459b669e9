"""
Global Docker configuration loading.

Reads ``<config_dir>/config.json`` into a DockerConfig. A missing file is the
normal "no configuration" case; a file that exists but cannot be read or
parsed is fatal and reported with its path.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .errors import ConfigParseError, ConfigReadError
from .models import DockerConfig

__all__ = ["CONFIG_FILE_NAME", "config_file_path", "load_docker_config", "read_json_document"]

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def config_file_path(config_dir: Union[str, Path]) -> Path:
    """Location of the global config file under a config root."""
    return Path(config_dir) / CONFIG_FILE_NAME


def read_json_document(path: Path, description: str) -> Any:
    """
    Read and parse a JSON file that is known to exist.

    Args:
        path: File to read
        description: Human label used in error messages

    Returns:
        Parsed JSON value, or None when the file is empty or blank

    Raises:
        ConfigReadError: If the file cannot be read
        ConfigParseError: If the text is not valid JSON
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Error reading {description} '{path}': {e}", path) from e

    if not text.strip():
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Error parsing {description} '{path}': {e}", path) from e


def load_docker_config(config_dir: Union[str, Path]) -> DockerConfig:
    """
    Load the Docker CLI's global configuration.

    Args:
        config_dir: Docker configuration root

    Returns:
        Parsed configuration, or DockerConfig.empty() when config.json is absent,
        blank or not a JSON object

    Raises:
        ConfigReadError: If config.json exists but cannot be read
        ConfigParseError: If config.json is malformed or has wrongly typed fields
    """
    path = config_file_path(config_dir)
    if not path.exists():
        logger.debug(f"No Docker config at {path}, using empty configuration")
        return DockerConfig.empty()

    document = read_json_document(path, "Docker configuration file")
    if not isinstance(document, dict):
        # empty, null or non-object documents carry no settings
        logger.debug(f"Docker config at {path} is not a JSON object, using empty configuration")
        return DockerConfig.empty()

    try:
        config = DockerConfig.model_validate(document)
    except ValidationError as e:
        raise ConfigParseError(f"Error parsing Docker configuration file '{path}': {e}", path) from e

    logger.debug(
        f"Loaded Docker config from {path}: current context {config.current_context!r}, "
        f"{len(config.auths)} registry auth(s), {len(config.cred_helpers)} credential helper(s)"
    )
    return config
