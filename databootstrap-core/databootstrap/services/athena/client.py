import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from botocore.client import BaseClient

from databootstrap.aws.connect import translate_client_errors
from databootstrap.services.custom_resources.exceptions import ExternalServiceError
from databootstrap.services.custom_resources.poller import OperationState
from databootstrap.utils.strings import truncate

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryContext:
    catalog: Optional[str] = None
    database: Optional[str] = None
    workgroup: Optional[str] = None


@dataclass(frozen=True)
class StoredQuery:
    text: str
    default_context: QueryContext = field(default_factory=QueryContext)


class CatalogEngine(ABC):
    """
    A query/catalog engine executing SQL statements asynchronously.
    """

    @abstractmethod
    def submit(self, statement: str, context: QueryContext) -> str:
        """Start the execution of ``statement`` and return the ID of the execution."""

    @abstractmethod
    def get_status(self, operation_id: str) -> str:
        """Return the current state of the given execution (one of ``OperationState``)."""

    @abstractmethod
    def get_stored_query(self, query_id: str) -> StoredQuery:
        """Look up a stored (named) query."""


class AthenaCatalogEngine(CatalogEngine):
    def __init__(self, client: BaseClient):
        self.client = client

    def submit(self, statement: str, context: QueryContext) -> str:
        kwargs = {"QueryString": statement}
        execution_context = {}
        if context.catalog:
            execution_context["Catalog"] = context.catalog
        if context.database:
            execution_context["Database"] = context.database
        if execution_context:
            kwargs["QueryExecutionContext"] = execution_context
        if context.workgroup:
            kwargs["WorkGroup"] = context.workgroup

        with translate_client_errors("start Athena query execution"):
            response = self.client.start_query_execution(**kwargs)

        execution_id = response.get("QueryExecutionId")
        if not execution_id:
            raise ExternalServiceError("Failed to run Athena query: no QueryExecutionId returned")
        LOG.info("Query execution started: %s\n%s", execution_id, truncate(statement, 500))
        return execution_id

    def get_status(self, operation_id: str) -> str:
        with translate_client_errors(f"get Athena query execution {operation_id}"):
            response = self.client.get_query_execution(QueryExecutionId=operation_id)

        status = response.get("QueryExecution", {}).get("Status", {})
        state = status.get("State")
        if not state:
            raise ExternalServiceError(f"Athena returned no state for query execution {operation_id}")
        if state in (OperationState.FAILED, OperationState.CANCELLED):
            LOG.warning(
                "Athena execution %s %s: %s",
                operation_id,
                state,
                status.get("StateChangeReason", "no reason given"),
            )
        return state

    def get_stored_query(self, query_id: str) -> StoredQuery:
        LOG.info("Fetching stored query %s", query_id)
        with translate_client_errors(f"get Athena named query {query_id}"):
            response = self.client.get_named_query(NamedQueryId=query_id)

        named_query = response.get("NamedQuery")
        if not named_query:
            raise ExternalServiceError(f"Failed to fetch stored query ID {query_id} from Athena")
        query_string = named_query.get("QueryString")
        if not query_string:
            raise ExternalServiceError(f"Failed to fetch stored query ID {query_id} - empty string")

        return StoredQuery(
            text=query_string,
            default_context=QueryContext(
                database=named_query.get("Database"),
                workgroup=named_query.get("WorkGroup"),
            ),
        )
