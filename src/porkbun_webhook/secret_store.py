"""Credential lookup from Kubernetes Secrets."""

import base64
import binascii
from abc import ABC, abstractmethod

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from porkbun_webhook._logging import get_challenge_extra, get_logger
from porkbun_webhook.exceptions import InitializationError, SecretLookupError

logger = get_logger(__name__)


class SecretStore(ABC):
    """Abstract read-only access to namespaced secrets."""

    @abstractmethod
    def get_secret_field(self, namespace: str, name: str, key: str) -> bytes:
        """Read one field of a secret.

        Args:
            namespace: Namespace the secret lives in.
            name: Secret name.
            key: Key within the secret's data.

        Returns:
            The decoded field value.

        Raises:
            SecretLookupError: If the secret or key does not exist.
        """
        ...


def load_kube_configuration(kubeconfig: str | None = None) -> client.Configuration:
    """Load Kubernetes connection settings.

    In-cluster service account settings win; outside a cluster the
    kubeconfig file (``kubeconfig`` or the default location) is used.

    Raises:
        InitializationError: If neither source yields a configuration.
    """
    configuration = client.Configuration()
    if kubeconfig is None:
        try:
            config.load_incluster_config(client_configuration=configuration)
            logger.debug("Loaded in-cluster Kubernetes configuration")
            return configuration
        except config.ConfigException:
            logger.debug("Not running in-cluster, falling back to kubeconfig")

    try:
        config.load_kube_config(config_file=kubeconfig, client_configuration=configuration)
    except (config.ConfigException, OSError) as e:
        raise InitializationError(f"failed to load Kubernetes configuration: {e}") from e
    logger.debug("Loaded kubeconfig", extra={"kubeconfig": kubeconfig or "default"})
    return configuration


class KubernetesSecretStore(SecretStore):
    """SecretStore backed by the Kubernetes core/v1 API.

    Args:
        core_v1: A CoreV1Api bound to the cluster.
    """

    def __init__(self, core_v1: client.CoreV1Api):
        self.core_v1 = core_v1

    @classmethod
    def from_configuration(
        cls, configuration: client.Configuration | None = None
    ) -> "KubernetesSecretStore":
        """Build a store from connection settings.

        Args:
            configuration: Kubernetes client configuration; loaded with
                load_kube_configuration() when omitted.

        Raises:
            InitializationError: If the API client cannot be built.
        """
        if configuration is None:
            configuration = load_kube_configuration()
        try:
            api_client = client.ApiClient(configuration)
        except Exception as e:
            raise InitializationError(f"failed to build Kubernetes client: {e}") from e
        return cls(client.CoreV1Api(api_client))

    def get_secret_field(self, namespace: str, name: str, key: str) -> bytes:
        try:
            secret = self.core_v1.read_namespaced_secret(name, namespace)
        except ApiException as e:
            logger.error(
                "Failed to load secret",
                extra=get_challenge_extra(namespace=namespace, secret=name, status_code=e.status),
            )
            raise SecretLookupError(
                namespace, name, f"failed to load secret: {e.reason or e.status}"
            ) from e
        except HTTPError as e:
            logger.error(
                "Failed to reach the Kubernetes API",
                extra=get_challenge_extra(namespace=namespace, secret=name, error=str(e)),
            )
            raise SecretLookupError(namespace, name, f"failed to load secret: {e}") from e

        data = secret.data or {}
        if key not in data:
            raise SecretLookupError(namespace, name, f"key not found {key!r}")

        try:
            return base64.b64decode(data[key], validate=True)
        except binascii.Error as e:
            raise SecretLookupError(namespace, name, f"key {key!r} is not valid base64") from e
