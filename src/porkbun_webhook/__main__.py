"""Process entry point: ``python -m porkbun_webhook``."""

import sys

import uvicorn

from porkbun_webhook._logging import configure_logging, get_logger
from porkbun_webhook.config import WebhookSettings
from porkbun_webhook.exceptions import ConfigError, InitializationError
from porkbun_webhook.secret_store import load_kube_configuration
from porkbun_webhook.server import create_app
from porkbun_webhook.solver import PorkbunSolver

logger = get_logger("porkbun_webhook")


def main() -> int:
    try:
        settings = WebhookSettings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.critical("Invalid configuration: %s", e)
        return 1

    configure_logging(settings.log_level)

    solver = PorkbunSolver(endpoint=settings.porkbun_endpoint, timeout=settings.porkbun_timeout)
    try:
        solver.initialize(load_kube_configuration(settings.kubeconfig))
    except InitializationError as e:
        logger.critical("Failed to initialize solver: %s", e)
        return 1

    app = create_app(solver, settings.group_name)
    logger.info(
        "Serving webhook",
        extra={"group_name": settings.group_name, "solver": solver.name(), "port": settings.port},
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        ssl_certfile=settings.tls_cert_file,
        ssl_keyfile=settings.tls_key_file,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
