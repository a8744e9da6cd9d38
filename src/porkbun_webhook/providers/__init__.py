"""Registrar clients for DNS-01 challenge records."""

from porkbun_webhook.providers.base import RegistrarClient
from porkbun_webhook.providers.porkbun import PorkbunClient

__all__ = ["PorkbunClient", "RegistrarClient"]
