"""cert-manager DNS-01 webhook solver for Porkbun."""

__version__ = "0.1.0"

from porkbun_webhook.solver import PorkbunSolver  # noqa: E402

__all__ = ["PorkbunSolver"]
