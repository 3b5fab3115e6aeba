"""
Custom::DDBItem - loads a single item into an Amazon DynamoDB table.

Create and Update both upsert the item. Deleting the resource leaves the item in the table.
"""

import logging
from typing import Any, Optional, TypedDict

from databootstrap.services.custom_resources import identity
from databootstrap.services.custom_resources.exceptions import ValidationError
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    HandlerResult,
    LifecycleRequest,
    UpdateRequest,
)
from databootstrap.services.custom_resources.resource_handler import (
    ResourceHandler,
    require_property,
)
from databootstrap.services.dynamodb.client import KeyValueStore

LOG = logging.getLogger(__name__)


class DDBItemProperties(TypedDict, total=False):
    # the item in plain JSON format (no DynamoDB attribute value syntax)
    item: dict[str, Any]
    partitionKeyField: str
    sortKeyField: Optional[str]
    tableName: str


class DDBItemHandler(ResourceHandler):
    TARGET = "DynamoDB data"

    def __init__(self, store: KeyValueStore):
        self.store = store

    def on_create(self, request: CreateRequest) -> HandlerResult:
        physical_resource_id = self.put_item(request)
        LOG.info("Inserted item to DynamoDB - %s", physical_resource_id)
        return HandlerResult(physical_resource_id=physical_resource_id, data={})

    def on_update(self, request: UpdateRequest) -> HandlerResult:
        physical_resource_id = self.put_item(request)
        LOG.info("Updated item in DynamoDB - %s", physical_resource_id)
        return HandlerResult(physical_resource_id=physical_resource_id, data={})

    def on_delete(self, request: DeleteRequest) -> HandlerResult:
        return self.skip_delete(request)

    def put_item(self, request: LifecycleRequest) -> str:
        """
        Put one item into the store and return the physical resource ID representing it.
        """
        properties: DDBItemProperties = request.resource_properties
        item = require_property(properties, "item")
        table_name = require_property(properties, "tableName")
        partition_key_field = require_property(properties, "partitionKeyField")
        sort_key_field = properties.get("sortKeyField") or None

        if not isinstance(item, dict):
            raise ValidationError(f"Resource property 'item' must be a JSON object, got: {item!r}")
        if partition_key_field not in item:
            raise ValidationError(
                f"Partition/primary key field '{partition_key_field}' missing from item: {item}"
            )
        if sort_key_field and sort_key_field not in item:
            raise ValidationError(f"Sort/secondary key field '{sort_key_field}' missing from item: {item}")

        physical_resource_id = identity.kv_item_id(
            table_name,
            item[partition_key_field],
            item[sort_key_field] if sort_key_field else None,
            store_name=self.store.store_name,
        )
        self.store.put(table_name, dict(item))
        return physical_resource_id
