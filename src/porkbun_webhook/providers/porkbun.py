"""Porkbun JSON API client."""

import os
from typing import Any, TypeVar

import httpx

from porkbun_webhook._logging import Timer, get_challenge_extra, get_logger
from porkbun_webhook.exceptions import RemoteError
from porkbun_webhook.models import (
    CreateRecordResponse,
    NewDnsRecord,
    RecordsResponse,
    RegistrarResponse,
)
from porkbun_webhook.providers.base import RegistrarClient

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://api.porkbun.com/api/json/v3"

# Environment fallback used in ambient credential mode
API_KEY_ENV = "PORKBUN_API_KEY"
SECRET_API_KEY_ENV = "PORKBUN_SECRET_API_KEY"

ResponseT = TypeVar("ResponseT", bound=RegistrarResponse)


class PorkbunClient(RegistrarClient):
    """Client for the Porkbun DNS API.

    Every Porkbun endpoint is a POST carrying both keys in the JSON body.
    Errors are reported as ``{"status": "ERROR", "message": ...}``, usually
    with a 4xx status code; such bodies are returned as parsed responses so
    the caller can judge the status field.

    Args:
        api_key: Porkbun API key.
        secret_api_key: Porkbun secret API key.
        endpoint: Base URL of the API.
        timeout: HTTP request timeout in seconds (default: 30).
        allow_ambient: Empty keys fall back to ``PORKBUN_API_KEY`` and
            ``PORKBUN_SECRET_API_KEY``. Only set in ambient credential mode.
    """

    def __init__(
        self,
        api_key: str,
        secret_api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 30,
        allow_ambient: bool = False,
    ):
        if allow_ambient:
            api_key = api_key or os.environ.get(API_KEY_ENV, "")
            secret_api_key = secret_api_key or os.environ.get(SECRET_API_KEY_ENV, "")
        self.api_key = api_key
        self.secret_api_key = secret_api_key
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    def _post(
        self,
        path: str,
        response_model: type[ResponseT],
        payload: dict[str, Any] | None = None,
    ) -> ResponseT:
        """POST to the API and parse the JSON envelope.

        Args:
            path: Path below the endpoint (e.g. "/dns/create/example.com").
            response_model: Model to parse the body into.
            payload: Extra body fields besides the credentials.

        Raises:
            RemoteError: On transport errors or a body that is not a
                Porkbun JSON envelope.
        """
        body = {"apikey": self.api_key, "secretapikey": self.secret_api_key}
        if payload:
            body.update(payload)

        url = f"{self.endpoint}{path}"
        try:
            with Timer() as timer, httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=body)
        except httpx.HTTPError as e:
            logger.error(
                "Porkbun API request failed",
                extra=get_challenge_extra(path=path, error=str(e)),
            )
            raise RemoteError(f"calling {path}", str(e)) from e

        logger.debug(
            "Porkbun API request complete",
            extra=get_challenge_extra(
                path=path, status_code=response.status_code, elapsed_ms=timer.elapsed_ms
            ),
        )

        try:
            return response_model.model_validate(response.json())
        except ValueError as e:
            detail = response.text or "empty response"
            logger.error(
                "Porkbun API returned an unreadable response",
                extra=get_challenge_extra(path=path, status_code=response.status_code),
            )
            raise RemoteError(
                f"calling {path}", f"HTTP {response.status_code}: {detail}"
            ) from e

    def list_txt_records(self, domain: str, sub_domain: str) -> RecordsResponse:
        """Retrieve TXT records by domain, subdomain and type."""
        return self._post(
            f"/dns/retrieveByNameType/{domain}/TXT/{sub_domain}",
            RecordsResponse,
        )

    def create_record(self, domain: str, record: NewDnsRecord) -> CreateRecordResponse:
        """Create a DNS record in ``domain``."""
        return self._post(
            f"/dns/create/{domain}",
            CreateRecordResponse,
            record.model_dump(),
        )

    def delete_record(self, domain: str, record_id: str) -> RegistrarResponse:
        """Delete a DNS record by id."""
        return self._post(f"/dns/delete/{domain}/{record_id}", RegistrarResponse)
