"""
Custom::AthenaSample - runs a sequence of SQL statements in Amazon Athena, e.g. to create a sample database.

Updating or deleting the resource does not run any SQL: catalog objects created on Create are left in place.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, Optional, TypedDict

import pydantic

from databootstrap import config
from databootstrap.services.athena.client import CatalogEngine, QueryContext
from databootstrap.services.custom_resources import identity
from databootstrap.services.custom_resources.exceptions import ExternalServiceError, ValidationError
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    HandlerResult,
    UpdateRequest,
)
from databootstrap.services.custom_resources.poller import OperationPoller, PollSpec
from databootstrap.services.custom_resources.resource_handler import (
    ResourceHandler,
    optional_number,
    require_property,
)

LOG = logging.getLogger(__name__)


class AthenaSampleProperties(TypedDict, total=False):
    athenaCatalog: str
    athenaWorkgroup: str
    queryDatabase: Optional[str]
    # exactly one of queryStatements or storedQueryId must be provided
    queryStatements: Optional[list[str]]
    storedQueryId: Optional[str]
    maxWaitSeconds: Optional[float]
    pollIntervalSeconds: Optional[float]


def split_statements(query_string: str) -> list[str]:
    """Split a stored query with multiple ``;``-separated statements into its (non-empty) statements."""
    if ";" not in query_string:
        return [query_string]
    LOG.info("Detected multiple statements in stored query")
    return [statement.strip() for statement in query_string.split(";") if statement.strip()]


class AthenaSampleHandler(ResourceHandler):
    TARGET = "Athena data"

    def __init__(
        self,
        engine: CatalogEngine,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.poller = OperationPoller(engine.get_status, clock=clock, sleep=sleep)

    def on_create(self, request: CreateRequest) -> HandlerResult:
        properties: AthenaSampleProperties = request.resource_properties
        catalog = require_property(properties, "athenaCatalog")
        workgroup = require_property(properties, "athenaWorkgroup")
        max_wait = optional_number(properties, "maxWaitSeconds", config.ATHENA_MAX_WAIT_SECONDS)
        poll_interval = optional_number(
            properties, "pollIntervalSeconds", config.ATHENA_POLL_INTERVAL_SECONDS
        )
        if max_wait < 0:
            raise ValidationError(f"maxWaitSeconds must not be negative, got {max_wait:g}")
        if poll_interval <= 0:
            raise ValidationError(f"pollIntervalSeconds must be positive, got {poll_interval:g}")
        try:
            poll_spec = PollSpec(
                operation_id="", max_wait_seconds=max_wait, poll_interval_seconds=poll_interval
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid polling configuration: {e}") from e

        stored_query_id = properties.get("storedQueryId")
        query_statements = properties.get("queryStatements")
        if stored_query_id and query_statements:
            raise ValidationError(
                "Resource properties must provide either 'queryStatements' or 'storedQueryId'. Got both"
            )

        if stored_query_id:
            stored_query = self.engine.get_stored_query(stored_query_id)
            statements = split_statements(stored_query.text)
            if not statements:
                raise ExternalServiceError(f"Stored query ID {stored_query_id} contains no SQL statements")
            database = properties.get("queryDatabase") or stored_query.default_context.database
            physical_resource_id = identity.stored_query_id(stored_query_id)
        elif query_statements:
            if not isinstance(query_statements, list) or not all(
                isinstance(statement, str) and statement.strip() for statement in query_statements
            ):
                raise ValidationError("'queryStatements' must be a list of non-empty SQL strings")
            statements = list(query_statements)
            database = properties.get("queryDatabase")
            physical_resource_id = identity.inline_statements_id(statements)
        else:
            raise ValidationError(
                "Resource properties must provide either 'queryStatements' or 'storedQueryId'. Got neither"
            )

        context = QueryContext(catalog=catalog, database=database, workgroup=workgroup)
        LOG.info("Running %s statement(s) for %s", len(statements), physical_resource_id)
        for statement in statements:
            self.run_statement(statement, context, poll_spec)

        LOG.info("Created Athena sample database - %s", physical_resource_id)
        return HandlerResult(physical_resource_id=physical_resource_id, data={})

    def on_update(self, request: UpdateRequest) -> HandlerResult:
        return self.skip_update(request)

    def on_delete(self, request: DeleteRequest) -> HandlerResult:
        return self.skip_delete(request)

    def run_statement(self, statement: str, context: QueryContext, poll_spec: PollSpec) -> None:
        """
        Submit a single statement and wait for it to complete.

        :raises ExternalOperationFailed: if the statement ends in a non-success state
        :raises PollTimeout: if the statement is still queued or running after ``poll_spec.max_wait_seconds``
        """
        # TODO: event-based completion callbacks (e.g. via EventBridge) would avoid the polling wait
        execution_id = self.engine.submit(statement, context)
        self.poller.wait(dataclasses.replace(poll_spec, operation_id=execution_id)).raise_for_status()
