import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional

from boto3.dynamodb.types import TypeSerializer
from botocore.client import BaseClient

from databootstrap.aws.connect import translate_client_errors
from databootstrap.services.custom_resources.exceptions import ValidationError

LOG = logging.getLogger(__name__)

Item = dict[str, Any]


class KeyValueStore(ABC):
    """
    A key-value store holding items in tables.
    """

    # short name of the store, used as prefix of physical resource IDs (if set)
    store_name: Optional[str] = None

    @abstractmethod
    def put(self, table: str, item: Item) -> None:
        """Unconditionally write (insert or replace) ``item`` into ``table``."""


def marshall(item: Item) -> dict[str, dict]:
    """
    Convert a plain JSON item into DynamoDB attribute values, e.g. ``{"id": "a"}`` -> ``{"id": {"S": "a"}}``.

    Floats are converted to ``Decimal``, as DynamoDB numbers are arbitrary-precision.
    """
    serializer = TypeSerializer()
    try:
        item = json.loads(json.dumps(item), parse_float=Decimal)
        return {key: serializer.serialize(value) for key, value in item.items()}
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Item cannot be stored in DynamoDB: {e}") from e


class DynamoDbKeyValueStore(KeyValueStore):
    store_name = "ddb"

    def __init__(self, client: BaseClient):
        self.client = client

    def put(self, table: str, item: Item) -> None:
        attributes = marshall(item)
        with translate_client_errors(f"put item into DynamoDB table {table}"):
            self.client.put_item(TableName=table, Item=attributes)
        LOG.debug("Put item into DynamoDB table %s: %s", table, item)
