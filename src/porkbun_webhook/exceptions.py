"""Webhook exceptions."""

from typing import Any


class WebhookError(Exception):
    """Base exception for errors surfaced to cert-manager."""

    pass


class ConfigError(WebhookError):
    """Malformed or missing configuration (solver config or process settings)."""

    pass


class ValidationError(ConfigError):
    """A credential reference is missing when ambient credentials are disallowed."""

    pass


class SecretLookupError(WebhookError):
    """A referenced secret, or a key within it, could not be read."""

    def __init__(self, namespace: str, name: str, detail: str):
        self.namespace = namespace
        self.name = name
        self.detail = detail
        super().__init__(f"secret '{namespace}/{name}': {detail}")


class InitializationError(WebhookError):
    """The secret store handle could not be built."""

    pass


class RemoteError(WebhookError):
    """The registrar call failed or reported a non-success status."""

    def __init__(self, operation: str, detail: str, status: str | None = None):
        self.operation = operation
        self.detail = detail
        self.status = status
        if status is None:
            super().__init__(f"{operation}: {detail}")
        else:
            super().__init__(f"invalid status {status!r} {operation}: {detail}")

    @classmethod
    def from_response(cls, operation: str, data: Any) -> "RemoteError":
        """Create a RemoteError from a parsed registrar response.

        Args:
            operation: What was being attempted (e.g. "creating DNS record").
            data: A RegistrarResponse model or the raw JSON dict.

        Returns:
            RemoteError carrying the response's own status and message.
        """
        if isinstance(data, dict):
            status = data.get("status")
            message = data.get("message")
        else:
            status = getattr(data, "status", None)
            message = getattr(data, "message", None)
        return cls(operation, message or "no message", status=str(status))
