"""Logging utilities for the porkbun webhook."""

import logging
import time
from contextvars import ContextVar, Token

_root = logging.getLogger("porkbun_webhook")
_root.addHandler(logging.NullHandler())

# Challenge being handled by the current request (uid, fqdn)
_current_challenge: ContextVar[dict[str, str] | None] = ContextVar(
    "current_challenge", default=None
)


def set_challenge(uid: str, fqdn: str) -> Token[dict[str, str] | None]:
    """Set the challenge for logging context.

    Args:
        uid: The challenge request UID assigned by cert-manager.
        fqdn: The resolved FQDN the TXT record is presented at.

    Returns:
        Token to reset the context.
    """
    return _current_challenge.set({"challenge_uid": uid, "fqdn": fqdn})


def reset_challenge(token: Token[dict[str, str] | None]) -> None:
    """Reset challenge context.

    Args:
        token: Token from set_challenge() call.
    """
    _current_challenge.reset(token)


def get_challenge_extra(**fields: object) -> dict[str, object]:
    """Get challenge info merged with ``fields`` for log extra.

    Returns:
        Dict with 'challenge_uid' and 'fqdn' when a challenge is active,
        plus any given fields.
    """
    extra: dict[str, object] = dict(_current_challenge.get() or {})
    extra.update(fields)
    return extra


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the porkbun_webhook namespace.

    Args:
        name: The module name (typically __name__).

    Returns:
        A logger instance for the module.
    """
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the package logger.

    Only the process entry point calls this; as a library the package
    stays silent.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    _root.addHandler(handler)
    _root.setLevel(level.upper())


class Timer:
    """Context manager for timing registrar calls.

    Usage:
        with Timer() as t:
            client.post(...)
        logger.debug("done", extra={"elapsed_ms": t.elapsed_ms})
    """

    def __init__(self) -> None:
        self.elapsed_ms: float = 0
        self._start: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
