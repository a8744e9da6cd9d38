"""DNS-01 solver presenting challenge records through Porkbun."""

from collections.abc import Callable
from typing import Any, NamedTuple

import pydantic
from kubernetes import client as k8s_client

from porkbun_webhook._logging import get_challenge_extra, get_logger, reset_challenge, set_challenge
from porkbun_webhook.exceptions import (
    ConfigError,
    InitializationError,
    RemoteError,
    SecretLookupError,
    ValidationError,
)
from porkbun_webhook.models import (
    CHALLENGE_TTL,
    ChallengeRequest,
    DnsRecord,
    NewDnsRecord,
    SecretKeySelector,
    SolverConfig,
)
from porkbun_webhook.providers.base import RegistrarClient
from porkbun_webhook.providers.porkbun import DEFAULT_ENDPOINT, PorkbunClient
from porkbun_webhook.secret_store import KubernetesSecretStore, SecretStore

logger = get_logger(__name__)

SOLVER_NAME = "porkbun"

# (api_key, secret_api_key, allow_ambient) -> client
ClientFactory = Callable[[str, str, bool], RegistrarClient]


def un_fqdn(name: str) -> str:
    """Strip the trailing dot from a fully-qualified name."""
    if name.endswith("."):
        return name[:-1]
    return name


def get_sub_domain(domain: str, fqdn: str) -> str:
    """Split the record label off a fully-qualified record name.

    The whole authoritative domain is matched, so multi-level labels stay
    intact: ``_acme-challenge.myapp.dev.example.com.`` in ``example.com``
    yields ``_acme-challenge.myapp.dev``.

    Args:
        domain: The authoritative zone, without trailing dot.
        fqdn: The record name, with trailing dot.

    Returns:
        The label relative to ``domain``, or ``fqdn`` without its trailing
        dot when ``domain`` is not found after a separator.
    """
    idx = fqdn.find("." + domain)
    if idx != -1:
        return fqdn[:idx]
    return un_fqdn(fqdn)


def load_config(raw: dict[str, Any] | None) -> SolverConfig:
    """Decode the per-issuer config blob.

    An absent blob decodes to empty secret references.

    Raises:
        ConfigError: If the blob does not match the expected shape.
    """
    if raw is None:
        return SolverConfig()
    try:
        return SolverConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ConfigError(f"error decoding solver config: {e}") from e


class _Target(NamedTuple):
    """Everything present/cleanup need after the shared lookup phase."""

    client: RegistrarClient
    domain: str
    sub_domain: str
    matching: list[DnsRecord]


class PorkbunSolver:
    """cert-manager DNS-01 solver for domains registered at Porkbun.

    Args:
        secret_store: Store credentials are read from. Normally built by
            initialize(); may be injected directly.
        endpoint: Porkbun API base URL.
        timeout: Per-call timeout for registrar requests, in seconds.
        client_factory: Builds a registrar client from an
            (api_key, secret_api_key, allow_ambient) triple. Defaults to PorkbunClient.
    """

    def __init__(
        self,
        secret_store: SecretStore | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 30,
        client_factory: ClientFactory | None = None,
    ):
        self.secret_store = secret_store
        self.endpoint = endpoint
        self.timeout = timeout
        self._client_factory = client_factory or self._porkbun_client

    def _porkbun_client(
        self, api_key: str, secret_api_key: str, allow_ambient: bool
    ) -> RegistrarClient:
        return PorkbunClient(
            api_key,
            secret_api_key,
            endpoint=self.endpoint,
            timeout=self.timeout,
            allow_ambient=allow_ambient,
        )

    def name(self) -> str:
        """Name of this solver as referenced on the ACME issuer."""
        return SOLVER_NAME

    def initialize(self, kube_config: k8s_client.Configuration | None = None) -> None:
        """Build the secret store handle. Called once at startup.

        Args:
            kube_config: Kubernetes connection settings; loaded from the
                environment when omitted.

        Raises:
            InitializationError: If the Kubernetes client cannot be built.
        """
        self.secret_store = KubernetesSecretStore.from_configuration(kube_config)
        logger.info("Solver initialized", extra={"solver": SOLVER_NAME})

    def present(self, ch: ChallengeRequest) -> None:
        """Ensure a TXT record with ``ch.key`` exists at the resolved FQDN.

        Safe to call repeatedly with the same challenge.

        Raises:
            WebhookError: If any phase fails.
        """
        token = set_challenge(ch.uid, ch.resolved_fqdn)
        try:
            target = self._resolve(ch)
            if target.matching:
                logger.info(
                    "TXT record already exists",
                    extra=get_challenge_extra(
                        sub_domain=target.sub_domain, domain=target.domain
                    ),
                )
                return

            record = NewDnsRecord(name=target.sub_domain, content=ch.key, ttl=CHALLENGE_TTL)
            created = target.client.create_record(target.domain, record)
            if not created.ok:
                raise RemoteError.from_response("creating DNS record", created)

            logger.info(
                "TXT record created",
                extra=get_challenge_extra(
                    sub_domain=target.sub_domain, domain=target.domain, record_id=created.id
                ),
            )
        finally:
            reset_challenge(token)

    def cleanup(self, ch: ChallengeRequest) -> None:
        """Delete TXT records with ``ch.key`` at the resolved FQDN.

        Records at the same name with other values belong to concurrent
        validations and are left in place.

        Raises:
            WebhookError: If any phase fails.
        """
        token = set_challenge(ch.uid, ch.resolved_fqdn)
        try:
            target = self._resolve(ch)
            for rec in target.matching:
                deleted = target.client.delete_record(target.domain, rec.id)
                if not deleted.ok:
                    raise RemoteError.from_response(f"deleting DNS record {rec.id!r}", deleted)
                logger.info(
                    "TXT record deleted",
                    extra=get_challenge_extra(
                        sub_domain=target.sub_domain, domain=target.domain, record_id=rec.id
                    ),
                )
        finally:
            reset_challenge(token)

    def _resolve(self, ch: ChallengeRequest) -> _Target:
        """Build the client, split the name and find records holding ``ch.key``."""
        pb_client = self._new_client(ch)

        domain = un_fqdn(ch.resolved_zone)
        sub_domain = get_sub_domain(domain, ch.resolved_fqdn)

        records = pb_client.list_txt_records(domain, sub_domain)
        if not records.ok:
            raise RemoteError.from_response("loading DNS records", records)

        matching = [rec for rec in records.records if rec.content == ch.key]
        logger.debug(
            "Loaded TXT records",
            extra=get_challenge_extra(
                domain=domain,
                sub_domain=sub_domain,
                total=len(records.records),
                matching=len(matching),
            ),
        )
        return _Target(pb_client, domain, sub_domain, matching)

    def _new_client(self, ch: ChallengeRequest) -> RegistrarClient:
        cfg = load_config(ch.config)

        if not ch.allow_ambient_credentials:
            self._validate(cfg)

        api_key = self._secret(cfg.api_key, ch.resource_namespace)
        secret_api_key = self._secret(cfg.secret_api_key, ch.resource_namespace)

        return self._client_factory(api_key, secret_api_key, ch.allow_ambient_credentials)

    def _secret(self, ref: SecretKeySelector, namespace: str) -> str:
        if not ref.name:
            return ""
        if self.secret_store is None:
            raise InitializationError("solver used before initialize()")

        value = self.secret_store.get_secret_field(namespace, ref.name, ref.key)
        try:
            return value.decode()
        except UnicodeDecodeError as e:
            raise SecretLookupError(
                namespace, ref.name, f"key {ref.key!r} is not valid UTF-8"
            ) from e

    @staticmethod
    def _validate(cfg: SolverConfig) -> None:
        if not cfg.api_key.name:
            raise ValidationError("no API key given in porkbun webhook config")
        if not cfg.secret_api_key.name:
            raise ValidationError("no secret API key given in porkbun webhook config")
