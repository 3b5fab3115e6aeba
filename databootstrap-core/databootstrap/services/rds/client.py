import logging
from abc import ABC, abstractmethod

import psycopg

from databootstrap.services.custom_resources.exceptions import ExternalServiceError

LOG = logging.getLogger(__name__)


class RelationalConnection(ABC):
    @abstractmethod
    def execute(self, sql: str) -> None:
        """Execute a (possibly multi-statement) SQL script."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Must be safe to call more than once."""


class RelationalEngine(ABC):
    @abstractmethod
    def connect(
        self, host: str, port: int, user: str, password: str, database: str
    ) -> RelationalConnection:
        """Open a new connection to the given database."""


class PostgresConnection(RelationalConnection):
    def __init__(self, connection: psycopg.Connection):
        self._connection = connection

    def execute(self, sql: str) -> None:
        # without parameters, psycopg sends the script as a single multi-statement query
        try:
            self._connection.execute(sql)
        except psycopg.Error as e:
            raise ExternalServiceError(f"Failed to execute SQL script: {e}") from e

    def close(self) -> None:
        if not self._connection.closed:
            self._connection.close()


class PostgresEngine(RelationalEngine):
    def __init__(self, connect_timeout: int = 30):
        self.connect_timeout = connect_timeout

    def connect(
        self, host: str, port: int, user: str, password: str, database: str
    ) -> RelationalConnection:
        LOG.info("Connecting to Postgres database %s at %s:%s as %s", database, host, port, user)
        try:
            connection = psycopg.connect(
                host=host,
                port=port,
                user=user,
                password=password,
                dbname=database,
                connect_timeout=self.connect_timeout,
                autocommit=True,
            )
        except psycopg.Error as e:
            raise ExternalServiceError(f"Failed to connect to database {database} at {host}:{port}: {e}") from e
        return PostgresConnection(connection)
