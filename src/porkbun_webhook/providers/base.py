"""Abstract base class for registrar clients."""

from abc import ABC, abstractmethod

from porkbun_webhook.models import (
    CreateRecordResponse,
    NewDnsRecord,
    RecordsResponse,
    RegistrarResponse,
)


class RegistrarClient(ABC):
    """Abstract interface for registrar DNS APIs.

    A client is bound to one credential pair and is created fresh for
    every present/cleanup call. Implementations report the registrar's
    status in the returned response rather than raising on it; only
    transport-level failures raise.
    """

    @abstractmethod
    def list_txt_records(self, domain: str, sub_domain: str) -> RecordsResponse:
        """List TXT records named ``sub_domain`` within ``domain``.

        Args:
            domain: The authoritative zone, without trailing dot.
            sub_domain: The record label relative to the zone.

        Raises:
            RemoteError: If the call itself fails.
        """
        ...

    @abstractmethod
    def create_record(self, domain: str, record: NewDnsRecord) -> CreateRecordResponse:
        """Create a record within ``domain``.

        Raises:
            RemoteError: If the call itself fails.
        """
        ...

    @abstractmethod
    def delete_record(self, domain: str, record_id: str) -> RegistrarResponse:
        """Delete the record with ``record_id`` from ``domain``.

        Raises:
            RemoteError: If the call itself fails.
        """
        ...
