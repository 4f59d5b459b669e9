"""
Tests for registry credential lookup and credential helpers.
"""
from __future__ import annotations

import json
import subprocess
from typing import Dict, List, Optional
from unittest.mock import patch

import pytest

from dockercfg_resolver.credentials import (
    DOCKER_HUB_INDEX,
    CredentialHelper,
    registry_keys,
    resolve_credentials,
)
from dockercfg_resolver.errors import CredentialHelperError
from dockercfg_resolver.models import Credential, DockerConfig
from tests.helpers.config_files import encode_auth


class FakeHelper(CredentialHelper):
    """Credential helper answering from a dict instead of a subprocess."""

    def __init__(self, name: str, store: Dict[str, Credential], calls: List[tuple]):
        super().__init__(name)
        self.store = store
        self.calls = calls

    def get(self, server_url: str) -> Optional[Credential]:
        self.calls.append((self.name, server_url))
        return self.store.get(server_url)


def fake_factory(stores: Dict[str, Dict[str, Credential]], calls: List[tuple]):
    return lambda name: FakeHelper(name, stores.get(name, {}), calls)


class TestRegistryKeys:
    """Test candidate config keys for a registry."""

    def test_bare_host(self):
        assert registry_keys("ghcr.io") == ["ghcr.io", "https://ghcr.io"]

    def test_url_form(self):
        assert registry_keys("https://ghcr.io/") == ["https://ghcr.io/", "ghcr.io", "https://ghcr.io"]

    def test_http_url(self):
        assert registry_keys("http://localhost:5000") == [
            "http://localhost:5000", "localhost:5000", "https://localhost:5000",
        ]

    def test_docker_hub_aliases(self):
        for alias in ("docker.io", "index.docker.io", "registry-1.docker.io"):
            assert registry_keys(alias)[-1] == DOCKER_HUB_INDEX

    def test_legacy_index_url_first(self):
        assert registry_keys(DOCKER_HUB_INDEX)[0] == DOCKER_HUB_INDEX


class TestInlineAuths:
    """Test lookup against auths entries only."""

    def test_exact_match(self):
        config = DockerConfig.model_validate({
            "auths": {"ghcr.io": {"auth": encode_auth("alice", "secret")}},
        })
        found = resolve_credentials(config, "ghcr.io")
        assert found is not None
        assert found.source == "auths"
        assert found.key == "ghcr.io"
        assert found.credential.username == "alice"
        assert found.credential.password == "secret"
        assert found.helper is None

    def test_https_key_matches_bare_host(self):
        config = DockerConfig.model_validate({
            "auths": {"https://registry.example.com": {"username": "bob", "password": "pw"}},
        })
        found = resolve_credentials(config, "registry.example.com")
        assert found.key == "https://registry.example.com"
        assert found.credential.username == "bob"

    def test_docker_hub_legacy_key(self):
        config = DockerConfig.model_validate({
            "auths": {DOCKER_HUB_INDEX: {"auth": encode_auth("hubuser", "hubpass")}},
        })
        found = resolve_credentials(config, "docker.io")
        assert found.key == DOCKER_HUB_INDEX
        assert found.credential.username == "hubuser"

    def test_no_entry(self):
        assert resolve_credentials(DockerConfig.empty(), "ghcr.io") is None

    def test_empty_entry_is_ignored(self):
        config = DockerConfig.model_validate({"auths": {"ghcr.io": {}}})
        assert resolve_credentials(config, "ghcr.io") is None


class TestHelperPrecedence:
    """Test credHelpers / credsStore / auths precedence."""

    def test_cred_helper_wins(self):
        calls: List[tuple] = []
        config = DockerConfig.model_validate({
            "credsStore": "desktop",
            "credHelpers": {"gcr.io": "gcloud"},
            "auths": {"gcr.io": {"auth": encode_auth("inline", "pw")}},
        })
        factory = fake_factory({"gcloud": {"gcr.io": Credential(username="oauth2", password="tok")}}, calls)

        found = resolve_credentials(config, "gcr.io", helper_factory=factory)
        assert found.source == "helper"
        assert found.helper == "gcloud"
        assert found.credential.username == "oauth2"
        assert calls == [("gcloud", "gcr.io")]

    def test_creds_store_used_without_cred_helper(self):
        calls: List[tuple] = []
        config = DockerConfig.model_validate({"credsStore": "desktop", "auths": {"ghcr.io": {}}})
        factory = fake_factory({"desktop": {"ghcr.io": Credential(username="u", password="p")}}, calls)

        found = resolve_credentials(config, "ghcr.io", helper_factory=factory)
        assert found.helper == "desktop"
        assert found.key == "ghcr.io"
        assert calls == [("desktop", "ghcr.io")]

    def test_docker_hub_helper_gets_index_url(self):
        calls: List[tuple] = []
        config = DockerConfig.model_validate({"credsStore": "desktop"})
        factory = fake_factory({"desktop": {DOCKER_HUB_INDEX: Credential(username="u", password="p")}}, calls)

        found = resolve_credentials(config, "docker.io", helper_factory=factory)
        assert found.credential.username == "u"
        assert calls == [("desktop", DOCKER_HUB_INDEX)]

    def test_cred_helper_shadows_creds_store(self):
        """Only the per-registry helper is consulted when one is set."""
        calls: List[tuple] = []
        config = DockerConfig.model_validate({
            "credsStore": "desktop",
            "credHelpers": {"gcr.io": "gcloud"},
        })
        factory = fake_factory({"desktop": {"gcr.io": Credential(username="x", password="y")}}, calls)

        assert resolve_credentials(config, "gcr.io", helper_factory=factory) is None
        assert calls == [("gcloud", "gcr.io")]

    def test_helper_without_credentials_falls_through_to_auths(self):
        calls: List[tuple] = []
        config = DockerConfig.model_validate({
            "credsStore": "desktop",
            "auths": {"ghcr.io": {"username": "bob", "password": "pw"}},
        })
        found = resolve_credentials(config, "ghcr.io", helper_factory=fake_factory({}, calls))
        assert found.source == "auths"
        assert found.credential.username == "bob"

    def test_helper_error_propagates(self):
        config = DockerConfig.model_validate({"credsStore": "missing"})

        class BrokenHelper(CredentialHelper):
            def get(self, server_url):
                raise CredentialHelperError("boom", self.name)

        with pytest.raises(CredentialHelperError, match="boom"):
            resolve_credentials(config, "ghcr.io", helper_factory=BrokenHelper)

    def test_default_factory_uses_timeout(self):
        config = DockerConfig.model_validate({"credsStore": "pass"})
        with patch("dockercfg_resolver.credentials.CredentialHelper") as helper_cls:
            helper_cls.return_value.get.return_value = None
            resolve_credentials(config, "ghcr.io", timeout=7.5)
        helper_cls.assert_called_once_with("pass", timeout=7.5)


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestCredentialHelper:
    """Test the docker-credential-* subprocess protocol."""

    def test_get_runs_helper_with_server_on_stdin(self):
        output = json.dumps({"ServerURL": "ghcr.io", "Username": "alice", "Secret": "s3cret"})
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=completed(stdout=output)) as run:
            credential = CredentialHelper("desktop", timeout=5).get("ghcr.io")

        assert credential.username == "alice"
        assert credential.password == "s3cret"
        args, kwargs = run.call_args
        assert args[0] == ["docker-credential-desktop", "get"]
        assert kwargs["input"] == "ghcr.io"
        assert kwargs["timeout"] == 5

    def test_identity_token(self):
        output = json.dumps({"ServerURL": "acr.io", "Username": "<token>", "Secret": "refresh-tok"})
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=completed(stdout=output)):
            credential = CredentialHelper("acr").get("acr.io")
        assert credential.identity_token == "refresh-tok"
        assert credential.username is None

    def test_credentials_not_found_returns_none(self):
        result = completed(returncode=1, stdout="credentials not found in native keychain\n")
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=result):
            assert CredentialHelper("osxkeychain").get("ghcr.io") is None

    def test_other_failure_raises(self):
        result = completed(returncode=1, stderr="keychain locked")
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=result):
            with pytest.raises(CredentialHelperError, match="keychain locked") as exc_info:
                CredentialHelper("osxkeychain").get("ghcr.io")
        assert exc_info.value.helper == "osxkeychain"

    def test_missing_executable_raises(self):
        with patch("dockercfg_resolver.credentials.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(CredentialHelperError, match="not found on PATH"):
                CredentialHelper("nothere").get("ghcr.io")

    def test_timeout_raises(self):
        timeout = subprocess.TimeoutExpired(cmd="docker-credential-slow", timeout=1)
        with patch("dockercfg_resolver.credentials.subprocess.run", side_effect=timeout):
            with pytest.raises(CredentialHelperError, match="timed out"):
                CredentialHelper("slow", timeout=1).get("ghcr.io")

    def test_invalid_json_raises(self):
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=completed(stdout="nope")):
            with pytest.raises(CredentialHelperError, match="invalid JSON"):
                CredentialHelper("weird").get("ghcr.io")

    @pytest.mark.parametrize("document", [
        {"ServerURL": "ghcr.io", "Username": 123, "Secret": "s3cret"},
        {"ServerURL": "ghcr.io", "Username": "alice", "Secret": ["s3cret"]},
        {"ServerURL": "acr.io", "Username": "<token>", "Secret": {"token": "x"}},
    ])
    def test_wrongly_typed_fields_raise(self, document):
        output = json.dumps(document)
        with patch("dockercfg_resolver.credentials.subprocess.run", return_value=completed(stdout=output)):
            with pytest.raises(CredentialHelperError, match="malformed credentials") as exc_info:
                CredentialHelper("weird").get("ghcr.io")
        assert exc_info.value.helper == "weird"
