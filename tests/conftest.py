"""Root pytest configuration for dockercfg-resolver tests."""
import json
from pathlib import Path

import pytest

from tests.helpers.config_files import context_hash

DOCKER_ENV_VARS = [
    "DOCKER_CONFIG",
    "DOCKER_CONTEXT",
    "DOCKER_HOST",
    "DOCKER_TLS_VERIFY",
    "DOCKER_CERT_PATH",
    "DOCKERCFG_HELPER_TIMEOUT",
]


# Isolate every test from the developer's own Docker setup
@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Clear Docker environment variables and point HOME at a temp dir."""
    for name in DOCKER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))


@pytest.fixture
def config_dir(tmp_path) -> Path:
    """Empty Docker config root."""
    path = tmp_path / "docker-config"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir):
    """Write config.json into the config root."""
    def _write(document) -> Path:
        path = config_dir / "config.json"
        text = document if isinstance(document, str) else json.dumps(document)
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def write_context(config_dir):
    """
    Create a context the way the Docker CLI lays it out.

    Returns the meta.json path.
    """
    def _write(name: str, host=None, skip_tls_verify=None, tls: bool = False, raw=None) -> Path:
        digest = context_hash(name)
        meta_dir = config_dir / "contexts" / "meta" / digest
        meta_dir.mkdir(parents=True)
        meta_path = meta_dir / "meta.json"

        if raw is not None:
            meta_path.write_text(raw)
        else:
            endpoint = {}
            if host is not None:
                endpoint["Host"] = host
            if skip_tls_verify is not None:
                endpoint["SkipTLSVerify"] = skip_tls_verify
            document = {
                "Name": name,
                "Metadata": {"Description": f"{name} context"},
                "Endpoints": {"docker": endpoint},
            }
            meta_path.write_text(json.dumps(document))

        if tls:
            tls_dir = config_dir / "contexts" / "tls" / digest / "docker"
            tls_dir.mkdir(parents=True)
            (tls_dir / "ca.pem").write_text("ca")
        return meta_path
    return _write
