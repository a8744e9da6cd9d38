"""Pytest fixtures for the porkbun webhook test suite."""

import logging
import logging.handlers
from collections.abc import Callable, Generator
from typing import Any

import pytest

from porkbun_webhook.exceptions import SecretLookupError
from porkbun_webhook.models import ChallengeRequest
from porkbun_webhook.secret_store import SecretStore
from porkbun_webhook.solver import PorkbunSolver

# Mocked registrar endpoint for unit tests
PORKBUN_TEST_ENDPOINT = "https://porkbun.test/api/json/v3"

NAMESPACE = "cert-manager"
SECRET_NAME = "porkbun-credentials"
API_KEY = "pk1_test"
SECRET_API_KEY = "sk1_test"

SOLVER_CONFIG = {
    "apiKey": {"name": SECRET_NAME, "key": "api-key"},
    "secretApiKey": {"name": SECRET_NAME, "key": "secret-api-key"},
}


class FakeSecretStore(SecretStore):
    """In-memory SecretStore keyed by (namespace, name)."""

    def __init__(self, secrets: dict[tuple[str, str], dict[str, bytes]] | None = None) -> None:
        self.secrets = secrets or {}
        self.lookups: list[tuple[str, str, str]] = []

    def get_secret_field(self, namespace: str, name: str, key: str) -> bytes:
        self.lookups.append((namespace, name, key))
        data = self.secrets.get((namespace, name))
        if data is None:
            raise SecretLookupError(namespace, name, "failed to load secret: Not Found")
        if key not in data:
            raise SecretLookupError(namespace, name, f"key not found {key!r}")
        return data[key]


@pytest.fixture
def secret_store() -> FakeSecretStore:
    """Secret store holding the Porkbun credentials used by SOLVER_CONFIG."""
    return FakeSecretStore(
        {
            (NAMESPACE, SECRET_NAME): {
                "api-key": API_KEY.encode(),
                "secret-api-key": SECRET_API_KEY.encode(),
            }
        }
    )


@pytest.fixture
def empty_secret_store() -> FakeSecretStore:
    """Secret store with no secrets at all."""
    return FakeSecretStore()


@pytest.fixture
def solver(secret_store: FakeSecretStore) -> PorkbunSolver:
    """Solver wired to the fake secret store and the mocked endpoint."""
    return PorkbunSolver(secret_store=secret_store, endpoint=PORKBUN_TEST_ENDPOINT)


@pytest.fixture
def make_challenge() -> Callable[..., ChallengeRequest]:
    """Factory for challenge requests as cert-manager would send them.

    Usage:
        ch = make_challenge(fqdn="_acme-challenge.www.example.com.")
    """

    def _make(
        key: str = "challenge-key",
        zone: str = "example.com.",
        fqdn: str = "_acme-challenge.example.com.",
        config: dict[str, Any] | None = SOLVER_CONFIG,
        allow_ambient_credentials: bool = False,
        action: str = "Present",
    ) -> ChallengeRequest:
        return ChallengeRequest.model_validate(
            {
                "uid": "6f3d6a2c-challenge",
                "action": action,
                "type": "dns-01",
                "dnsName": fqdn.removeprefix("_acme-challenge.").rstrip("."),
                "key": key,
                "resourceNamespace": NAMESPACE,
                "resolvedFQDN": fqdn,
                "resolvedZone": zone,
                "allowAmbientCredentials": allow_ambient_credentials,
                "config": config,
            }
        )

    return _make


class LogCapture:
    """Helper class to capture and inspect log records."""

    def __init__(self, handler: logging.handlers.MemoryHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> list[logging.LogRecord]:
        """Get all captured log records."""
        return self._handler.buffer

    def get_records(
        self, level: int | None = None, name: str | None = None
    ) -> list[logging.LogRecord]:
        """Get log records filtered by level and/or logger name prefix."""
        records = self.records
        if level is not None:
            records = [r for r in records if r.levelno == level]
        if name is not None:
            records = [r for r in records if r.name.startswith(name)]
        return records

    def get_messages(self, level: int | None = None, name: str | None = None) -> list[str]:
        """Get log messages filtered by level and/or logger name prefix."""
        return [r.getMessage() for r in self.get_records(level, name)]

    def clear(self) -> None:
        """Clear all captured log records."""
        self._handler.buffer.clear()


@pytest.fixture
def log_capture() -> Generator[LogCapture, None, None]:
    """Capture logs from the porkbun_webhook package during a test.

    Usage:
        def test_something(log_capture):
            # do something that logs
            assert "TXT record created" in log_capture.get_messages(logging.INFO)
    """
    handler = logging.handlers.MemoryHandler(capacity=1000)
    handler.setLevel(logging.DEBUG)

    package_logger = logging.getLogger("porkbun_webhook")
    original_level = package_logger.level
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)

    try:
        yield LogCapture(handler)
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(original_level)
        handler.close()
