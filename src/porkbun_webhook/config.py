"""Process settings read from the environment."""

import os
from collections.abc import Mapping

import pydantic
from pydantic import BaseModel

from porkbun_webhook.exceptions import ConfigError
from porkbun_webhook.providers.porkbun import DEFAULT_ENDPOINT

# Settings field -> environment variable
ENVIRONMENT = {
    "group_name": "GROUP_NAME",
    "host": "WEBHOOK_HOST",
    "port": "WEBHOOK_PORT",
    "tls_cert_file": "TLS_CERT_FILE",
    "tls_key_file": "TLS_KEY_FILE",
    "kubeconfig": "KUBECONFIG",
    "porkbun_endpoint": "PORKBUN_ENDPOINT",
    "porkbun_timeout": "PORKBUN_TIMEOUT",
    "log_level": "LOG_LEVEL",
}


class WebhookSettings(BaseModel):
    """Settings for the webhook process.

    Only ``group_name`` is required: it is the API group the solver is
    served under and must match the ``groupName`` on the issuer.
    """

    group_name: str
    host: str = "0.0.0.0"
    port: int = 443
    tls_cert_file: str | None = None
    tls_key_file: str | None = None
    kubeconfig: str | None = None
    porkbun_endpoint: str = DEFAULT_ENDPOINT
    porkbun_timeout: float = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WebhookSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ).

        Raises:
            ConfigError: If GROUP_NAME is missing or a value is invalid.
        """
        if environ is None:
            environ = os.environ

        if not environ.get(ENVIRONMENT["group_name"]):
            raise ConfigError("GROUP_NAME must be specified")

        values = {
            field: environ[var] for field, var in ENVIRONMENT.items() if environ.get(var)
        }
        try:
            return cls.model_validate(values)
        except pydantic.ValidationError as e:
            raise ConfigError(f"invalid webhook settings: {e}") from e
