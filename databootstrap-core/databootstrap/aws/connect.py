"""
AWS client stack.

Clients are created once per process (e.g., per Lambda execution environment) and handed to the adapters of the
bootstrap handlers.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Optional

from boto3.session import Session
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from databootstrap import config as bootstrap_config
from databootstrap.services.custom_resources.exceptions import ExternalServiceError

LOG = logging.getLogger(__name__)

# a failing call fails the whole lifecycle event, which the provider framework may retry as a whole
DEFAULT_CLIENT_CONFIG = Config(retries={"mode": "standard", "total_max_attempts": 1})


class ClientFactory:
    """
    Factory to build the AWS clients used by the bootstrap adapters.

    Boto client creation is resource intensive. This class caches all clients it creates.
    """

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        session: Session = None,
        config: Config = None,
    ):
        """
        :param region_name: Name of the AWS region. If set to None, loads from the botocore session.
        :param endpoint_url: Full endpoint URL to be used by all clients. Defaults to ``AWS_ENDPOINT_URL``.
        :param session: Session to be used for client creation. Will create a new session if not provided.
        :param config: Config used for client creation.
        """
        self._region_name = region_name
        self._endpoint_url = endpoint_url or bootstrap_config.AWS_ENDPOINT_URL
        self._session: Session = session or Session()
        self._config: Config = config or DEFAULT_CLIENT_CONFIG
        self._clients: dict[str, BaseClient] = {}
        self._create_client_lock = threading.RLock()

    def get_client(self, service_name: str) -> BaseClient:
        with self._create_client_lock:
            if service_name not in self._clients:
                LOG.debug(
                    "Creating %s client (region %s, endpoint %s)",
                    service_name,
                    self._region_name or self._session.region_name,
                    self._endpoint_url or "default",
                )
                self._clients[service_name] = self._session.client(
                    service_name=service_name,
                    region_name=self._region_name,
                    endpoint_url=self._endpoint_url,
                    config=self._config,
                )
            return self._clients[service_name]

    @property
    def athena(self) -> BaseClient:
        return self.get_client("athena")

    @property
    def dynamodb(self) -> BaseClient:
        return self.get_client("dynamodb")

    @property
    def secretsmanager(self) -> BaseClient:
        return self.get_client("secretsmanager")


@contextmanager
def translate_client_errors(action: str):
    """
    Re-raises any error of a botocore call as ``ExternalServiceError``, so it fails the event without retries.

    :param action: description of the call, used in the error message
    """
    try:
        yield
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ExternalServiceError(
            f"Failed to {action}: {error.get('Code')} - {error.get('Message')}"
        ) from e
    except BotoCoreError as e:
        raise ExternalServiceError(f"Failed to {action}: {e}") from e
