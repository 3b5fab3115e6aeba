import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from botocore.client import BaseClient

from databootstrap.aws.connect import translate_client_errors
from databootstrap.services.custom_resources.exceptions import ExternalServiceError

LOG = logging.getLogger(__name__)


class SecretStore(ABC):
    @abstractmethod
    def get_secret(self, secret_id: str) -> dict[str, Any]:
        """
        Return the JSON credential blob stored in the given secret, with at least ``username`` and ``password``
        and optionally ``host``, ``port`` and ``dbname``.
        """


class SecretsManagerSecretStore(SecretStore):
    def __init__(self, client: BaseClient):
        self.client = client

    def get_secret(self, secret_id: str) -> dict[str, Any]:
        LOG.info("Fetching database credential from Secrets Manager")
        with translate_client_errors(f"get secret value {secret_id}"):
            response = self.client.get_secret_value(SecretId=secret_id)

        secret_string = response.get("SecretString")
        if not secret_string:
            raise ExternalServiceError(
                f"Failed to get SecretString from AWS Secrets Manager for secret ID: {secret_id}"
            )
        try:
            secret = json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise ExternalServiceError(f"Secret {secret_id} does not contain a JSON document") from e
        if not isinstance(secret, dict):
            raise ExternalServiceError(f"Secret {secret_id} does not contain a JSON object")
        return secret
