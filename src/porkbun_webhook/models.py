"""Pydantic models for the cert-manager webhook API and the Porkbun API."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Constants
# =============================================================================

SUCCESS_STATUS = "SUCCESS"
CHALLENGE_TTL = "60"
WEBHOOK_API_VERSION = "acme.cert-manager.io/v1alpha1"


class ChallengeAction(StrEnum):
    """Actions cert-manager asks a solver to perform."""

    PRESENT = "Present"
    CLEAN_UP = "CleanUp"


# =============================================================================
# Solver configuration
# =============================================================================


class SecretKeySelector(BaseModel):
    """Reference to a key within a Secret in the challenge's namespace."""

    name: str = ""
    key: str = ""


class SolverConfig(BaseModel):
    """Per-issuer solver configuration (the ``config`` blob on the issuer)."""

    api_key: SecretKeySelector = Field(default_factory=SecretKeySelector, alias="apiKey")
    secret_api_key: SecretKeySelector = Field(
        default_factory=SecretKeySelector, alias="secretApiKey"
    )

    model_config = {"populate_by_name": True}


# =============================================================================
# cert-manager webhook payloads (acme.cert-manager.io/v1alpha1)
# =============================================================================


class ChallengeRequest(BaseModel):
    """A DNS-01 challenge as sent by cert-manager."""

    uid: str = ""
    action: str = ChallengeAction.PRESENT
    type: str = "dns-01"
    dns_name: str = Field(default="", alias="dnsName")
    key: str
    resource_namespace: str = Field(default="", alias="resourceNamespace")
    resolved_fqdn: str = Field(alias="resolvedFQDN")
    resolved_zone: str = Field(alias="resolvedZone")
    allow_ambient_credentials: bool = Field(default=False, alias="allowAmbientCredentials")
    config: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}


class Status(BaseModel):
    """Kubernetes-style status attached to a failed challenge response."""

    status: str = "Failure"
    message: str
    reason: str = "InternalError"
    code: int = 500


class ChallengeResponse(BaseModel):
    """Result of handling a ChallengeRequest."""

    uid: str
    success: bool
    result: Status | None = Field(default=None, alias="status")

    model_config = {"populate_by_name": True}


class ChallengePayload(BaseModel):
    """Envelope cert-manager POSTs to the webhook and expects back."""

    api_version: str = Field(default=WEBHOOK_API_VERSION, alias="apiVersion")
    kind: str = "ChallengePayload"
    request: ChallengeRequest | None = None
    response: ChallengeResponse | None = None

    model_config = {"populate_by_name": True}


# =============================================================================
# Porkbun API
# =============================================================================


class DnsRecord(BaseModel):
    """DNS record as returned by the registrar."""

    id: str
    name: str
    type: str
    content: str
    ttl: str = CHALLENGE_TTL
    prio: str | None = None
    notes: str | None = None

    model_config = {"coerce_numbers_to_str": True}


class NewDnsRecord(BaseModel):
    """DNS record to be created at the registrar."""

    name: str
    type: str = "TXT"
    content: str
    ttl: str = CHALLENGE_TTL


class RegistrarResponse(BaseModel):
    """Common envelope of every Porkbun API response."""

    status: str
    message: str | None = None

    @property
    def ok(self) -> bool:
        """True when the registrar reported the success sentinel."""
        return self.status == SUCCESS_STATUS


class RecordsResponse(RegistrarResponse):
    """Response to a record listing."""

    records: list[DnsRecord] = Field(default_factory=list)

    @field_validator("records", mode="before")
    @classmethod
    def _null_records(cls, value: Any) -> Any:
        return [] if value is None else value


class CreateRecordResponse(RegistrarResponse):
    """Response to a record creation."""

    id: str | None = None

    model_config = {"coerce_numbers_to_str": True}
