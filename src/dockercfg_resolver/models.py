"""
Data models for Docker CLI configuration.

These Pydantic models are typed views over the JSON documents the Docker CLI
keeps on disk: the global config.json (contexts, credential helpers, inline
registry auths) and the per-context meta.json files. All models are frozen
value objects; a fresh set is built on every resolution run.
"""
from __future__ import annotations

import base64
import binascii
import json
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = ["Credential", "DockerConfig", "DockerContext", "decode_auth", "DOCKER_ENDPOINT"]

# Endpoint key the Docker CLI uses for the engine inside a context's meta.json
DOCKER_ENDPOINT = "docker"


def decode_auth(auth: str) -> Optional[Tuple[str, str]]:
    """
    Decode a packed ``auth`` string into ``(username, password)``.

    The value is base64 of ``username:password``; missing trailing padding is
    tolerated. The decoded text is split on the first colon only, so passwords
    may contain colons.

    Args:
        auth: Base64 encoded credentials

    Returns:
        (username, password), or None when the value is not valid base64,
        not UTF-8, or has no colon
    """
    try:
        padded = auth + "=" * (-len(auth) % 4)
        decoded = base64.b64decode(padded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    parts = decoded.split(":", 1)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _value_at(document: Any, *keys: str) -> Any:
    """Walk nested mappings, returning None as soon as a key is missing."""
    node = document
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


class Credential(BaseModel):
    """
    Registry credentials from one ``auths`` entry (or a credential helper).

    When the entry carries a packed ``auth`` string that decodes to exactly
    two colon-separated parts, the decoded pair replaces any discrete
    ``username``/``password`` fields. A malformed ``auth`` is ignored and the
    discrete fields are kept. ``email`` only ever comes from its own field.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    username: Optional[str] = Field(default=None, description="Registry username")
    password: Optional[str] = Field(default=None, description="Registry password or token")
    email: Optional[str] = Field(default=None, description="Account email (legacy)")
    identity_token: Optional[str] = Field(
        default=None, alias="identitytoken", description="OAuth identity token"
    )

    @model_validator(mode="before")
    @classmethod
    def unpack_auth(cls, data: Any) -> Any:
        """Apply decoded ``auth`` over discrete username/password."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        auth = data.pop("auth", None)
        if isinstance(auth, str):
            decoded = decode_auth(auth)
            if decoded is not None:
                data["username"], data["password"] = decoded
        return data

    @property
    def is_empty(self) -> bool:
        """True when the entry carries nothing usable for authentication."""
        return not (self.username or self.password or self.identity_token)

    def basic_auth(self) -> httpx.BasicAuth:
        """
        Credentials as an ``httpx.BasicAuth`` for registry token exchange.

        Returns:
            httpx.BasicAuth for username/password

        Raises:
            ValueError: If username or password is missing
        """
        if self.username is None or self.password is None:
            raise ValueError("Basic auth requires both username and password")
        return httpx.BasicAuth(self.username, self.password)

    def registry_auth_header(self, server_address: Optional[str] = None) -> str:
        """
        Encode credentials for the engine's ``X-Registry-Auth`` header.

        The engine expects URL-safe base64 of a JSON object. An identity token,
        when present, is sent on its own.

        Args:
            server_address: Registry the credentials belong to

        Returns:
            Header value
        """
        if self.identity_token:
            payload = {"identitytoken": self.identity_token}
        else:
            payload = {
                "username": self.username or "",
                "password": self.password or "",
                "email": self.email or "",
                "serveraddress": server_address or "",
            }
        encoded = json.dumps(payload, separators=(',', ':')).encode("utf-8")
        return base64.urlsafe_b64encode(encoded).decode("ascii")

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"Credential(username={self.username!r}, email={self.email!r}, "
            f"password={'***' if self.password else None}, "
            f"identity_token={'***' if self.identity_token else None})"
        )

    __str__ = __repr__


class DockerConfig(BaseModel):
    """
    Projection of the Docker CLI's global ``config.json``.

    Every field is optional in the file; absent mappings become empty. The
    mappings are read-only views, so a loaded configuration cannot change.
    Unknown top-level keys (proxies, plugins, ...) are ignored.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_context: Optional[str] = Field(
        default=None, alias="currentContext", description="Active context name"
    )
    creds_store: Optional[str] = Field(
        default=None, alias="credsStore", description="Default credential helper"
    )
    cred_helpers: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True, alias="credHelpers",
        description="Registry host to helper name"
    )
    auths: Mapping[str, Credential] = Field(
        default_factory=dict, validate_default=True, description="Registry host to inline credentials"
    )

    @field_validator("cred_helpers", mode="before")
    @classmethod
    def null_helpers_as_empty(cls, v):
        return {} if v is None else v

    @field_validator("auths", mode="before")
    @classmethod
    def null_auths_as_empty(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            return {host: ({} if entry is None else entry) for host, entry in v.items()}
        return v

    @field_validator("cred_helpers", "auths")
    @classmethod
    def read_only_mapping(cls, v):
        return MappingProxyType(dict(v))

    @classmethod
    def empty(cls) -> DockerConfig:
        """Configuration used when no config.json exists."""
        return cls()


class DockerContext(BaseModel):
    """
    Engine endpoint settings for one Docker context.

    The empty context (no host, no TLS settings) means "connect using the
    engine defaults".
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, description="Context name from meta.json")
    docker_host: Optional[str] = Field(default=None, description="Daemon address, e.g. unix:// or tcp://")
    skip_tls_verify: Optional[bool] = Field(default=None, description="SkipTLSVerify flag as stored")
    tls_path: Optional[str] = Field(default=None, description="Directory holding TLS material")

    @property
    def is_tls_verify(self) -> bool:
        """
        Whether TLS verification is on for this context.

        Only an explicit ``SkipTLSVerify: false`` turns verification on; an
        absent flag and an explicit ``true`` both yield False.
        """
        return self.skip_tls_verify is not None and not self.skip_tls_verify

    def with_tls_path(self, tls_path: str) -> DockerContext:
        """Copy of this context with TLS material attached."""
        return self.model_copy(update={"tls_path": tls_path})

    @classmethod
    def from_metadata(cls, document: Any) -> DockerContext:
        """
        Build a context from a parsed meta.json document.

        Reads ``Endpoints.docker.Host`` and ``Endpoints.docker.SkipTLSVerify``;
        missing keys at any level resolve to None.
        """
        endpoint = ("Endpoints", DOCKER_ENDPOINT)
        return cls.model_validate({
            "name": _value_at(document, "Name"),
            "docker_host": _value_at(document, *endpoint, "Host"),
            "skip_tls_verify": _value_at(document, *endpoint, "SkipTLSVerify"),
        })

    @classmethod
    def empty(cls) -> DockerContext:
        """Context used for ``default`` or when no context is configured."""
        return cls()
