"""
Docker context lookup.

The Docker CLI stores each named context under a directory named by the
SHA-256 of the context name:

    <config_dir>/contexts/meta/<sha256(name)>/meta.json
    <config_dir>/contexts/tls/<sha256(name)>/docker/

This module reproduces that layout to find a context's endpoint settings and
TLS material without shelling out to the CLI.
"""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from .config_loader import read_json_document
from .errors import ConfigParseError, ContextNotFoundError, DockerConfigError
from .models import DOCKER_ENDPOINT, DockerContext

__all__ = [
    "DEFAULT_CONTEXT",
    "context_dir_name",
    "context_meta_path",
    "context_tls_path",
    "load_docker_context",
    "list_context_names",
]

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "default"

CONTEXTS_DIR = "contexts"
META_DIR = "meta"
TLS_DIR = "tls"
CONTEXT_FILE_NAME = "meta.json"


def context_dir_name(context_name: str) -> str:
    """
    Directory name the Docker CLI uses for a context.

    Lowercase hex SHA-256 of the raw UTF-8 bytes of the name, with no
    normalization, so it matches directories the CLI created.
    """
    return hashlib.sha256(context_name.encode("utf-8")).hexdigest()


def context_meta_path(config_dir: Union[str, Path], context_name: str) -> Path:
    return Path(config_dir, CONTEXTS_DIR, META_DIR, context_dir_name(context_name), CONTEXT_FILE_NAME)


def context_tls_path(config_dir: Union[str, Path], context_name: str) -> Path:
    return Path(config_dir, CONTEXTS_DIR, TLS_DIR, context_dir_name(context_name), DOCKER_ENDPOINT)


def load_docker_context(config_dir: Union[str, Path], context_name: Optional[str]) -> DockerContext:
    """
    Resolve endpoint settings for a context.

    Args:
        config_dir: Docker configuration root
        context_name: Context to resolve; None or "default" means engine defaults

    Returns:
        DockerContext for the named context, or DockerContext.empty()

    Raises:
        ContextNotFoundError: If a named context has no meta.json
        ConfigParseError: If meta.json is malformed
        ConfigReadError: If meta.json cannot be read
    """
    if context_name is None or context_name == DEFAULT_CONTEXT:
        return DockerContext.empty()

    meta_path = context_meta_path(config_dir, context_name)
    tls_path = context_tls_path(config_dir, context_name)

    if not meta_path.exists():
        raise ContextNotFoundError(context_name)

    document = read_json_document(meta_path, "Docker context metadata file")
    try:
        context = DockerContext.from_metadata(document)
    except ValidationError as e:
        raise ConfigParseError(
            f"Error parsing Docker context metadata file '{meta_path}': {e}", meta_path
        ) from e

    if tls_path.is_dir():
        logger.debug(f"Context {context_name!r} has TLS material at {tls_path}")
        context = context.with_tls_path(str(tls_path))

    logger.debug(f"Resolved context {context_name!r} to host {context.docker_host!r}")
    return context


def list_context_names(config_dir: Union[str, Path]) -> List[str]:
    """
    Names of all contexts stored under the config root, sorted.

    The implicit "default" context has no directory and is not included.
    Entries whose meta.json cannot be read or has no Name are skipped.
    """
    meta_root = Path(config_dir, CONTEXTS_DIR, META_DIR)
    if not meta_root.is_dir():
        return []

    names = []
    for meta_path in sorted(meta_root.glob(f"*/{CONTEXT_FILE_NAME}")):
        try:
            document = read_json_document(meta_path, "Docker context metadata file")
        except DockerConfigError as e:
            logger.warning(f"Skipping unreadable context metadata {meta_path}: {e}")
            continue

        name = document.get("Name") if isinstance(document, dict) else None
        if not isinstance(name, str):
            logger.warning(f"Skipping context metadata without a name: {meta_path}")
            continue
        names.append(name)

    return sorted(names)
