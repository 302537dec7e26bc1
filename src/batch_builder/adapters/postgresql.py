"""
PostgreSQL adapter for Batch Builder.

This module provides an adapter for PostgreSQL through psycopg2. psycopg2
binds parameters on the client, so a whole batch can be sent as one
multi-statement query with a single flattened argument list.

Statements for this adapter must use psycopg2's ``%s`` placeholder:

    >>> from batch_builder import new_insert
    >>> from batch_builder.config import PYFORMAT_PLACEHOLDER
    >>> new_insert("users", {"id": 1}, placeholder=PYFORMAT_PLACEHOLDER).text
    'INSERT INTO users (id) VALUES (%s)'

Literal ``%`` characters in raw statement text must be written as ``%%``.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from batch_builder.adapters.base import BatchAdapter
from batch_builder.batch import Batch
from batch_builder.config import DEFAULT_MAX_ARGUMENTS, DEFAULT_SEPARATOR
from batch_builder.exceptions import BatchExecutionError
from batch_builder.query_collector import QueryCollector

# Optional imports to avoid hard dependency
try:
    import psycopg2
    from psycopg2.extensions import (
        ISOLATION_LEVEL_READ_COMMITTED,
        ISOLATION_LEVEL_REPEATABLE_READ,
        ISOLATION_LEVEL_SERIALIZABLE,
    )
    _has_psycopg2 = True
except ImportError:
    _has_psycopg2 = False


logger = logging.getLogger(__name__)


class PostgreSQLAdapter(BatchAdapter):
    """
    PostgreSQL adapter for Batch Builder.

    Each batch is assembled into one ``; ``-separated query and executed with
    a single ``cursor.execute`` call, then committed.

    Attributes:
        connection: PostgreSQL database connection
        cursor: Cursor used for executing queries
        isolation_level: psycopg2 isolation level constant
        fetch_results: Whether ``execute`` fetches rows by default
    """

    def __init__(
        self,
        connection_params: Optional[Dict[str, Any]] = None,
        connection: Optional[Any] = None,
        max_arguments: int = DEFAULT_MAX_ARGUMENTS,
        isolation_level: str = "read_committed",
        fetch_results: bool = True,
        application_name: Optional[str] = "batch_builder",
        dry_run: bool = False,
        query_collector: Optional[QueryCollector] = None,
    ):
        """
        Initialize the PostgreSQL adapter.

        Args:
            connection_params: Dictionary of psycopg2 connection parameters
            connection: Existing PostgreSQL connection to use (optional)
            max_arguments: Maximum bound arguments per batch
            isolation_level: Transaction isolation level
                (read_committed, repeatable_read, serializable)
            fetch_results: Whether ``execute`` fetches rows by default
            application_name: Application name to set in PostgreSQL (for monitoring)
            dry_run: If True, collect payloads instead of executing them
            query_collector: Collector for payloads in dry run mode

        Raises:
            ImportError: If psycopg2 is not installed
            ValueError: If both connection and connection_params are None,
                or the isolation level is unknown
            BatchExecutionError: If connecting to PostgreSQL fails
        """
        if not _has_psycopg2:
            raise ImportError(
                "psycopg2 is not installed. "
                "Install it with 'pip install \"batch-builder[postgresql]\"'"
            )
        super().__init__(dry_run=dry_run, query_collector=query_collector)

        isolation_levels = {
            "read_committed": ISOLATION_LEVEL_READ_COMMITTED,
            "repeatable_read": ISOLATION_LEVEL_REPEATABLE_READ,
            "serializable": ISOLATION_LEVEL_SERIALIZABLE,
        }
        if isolation_level not in isolation_levels:
            raise ValueError(
                f"Invalid isolation level: {isolation_level}. "
                f"Valid values are: {', '.join(isolation_levels.keys())}"
            )
        self.isolation_level = isolation_levels[isolation_level]
        self._max_arguments = max_arguments
        self.fetch_results = fetch_results

        if connection is None and connection_params is None:
            raise ValueError("Either connection or connection_params must be provided")

        if connection is None:
            conn_params = dict(connection_params)
            if application_name and "application_name" not in conn_params:
                conn_params["application_name"] = application_name
            try:
                self.connection = psycopg2.connect(**conn_params)
                self.connection.set_isolation_level(self.isolation_level)
                self.connection.autocommit = False
            except Exception as e:
                raise BatchExecutionError(f"Failed to connect to PostgreSQL: {str(e)}") from e
        else:
            self.connection = connection
            try:
                self.connection.set_isolation_level(self.isolation_level)
            except Exception as e:
                logger.warning(f"Could not set isolation level on existing connection: {str(e)}")

        self.cursor = self.connection.cursor()

    def get_max_arguments(self) -> int:
        return self._max_arguments

    def execute(self, query: str, args: Sequence[Any] = ()) -> List[Tuple]:
        """
        Execute a query and commit.

        Args:
            query: Query text with ``%s`` placeholders
            args: Arguments bound to the placeholders

        Returns:
            List of result rows (empty for statements without results)

        Raises:
            BatchExecutionError: If there's an error executing the query
        """
        try:
            self.cursor.execute(query, list(args))
            rows = []
            if self.fetch_results and self.cursor.description is not None:
                rows = self.cursor.fetchall()
            self.connection.commit()
            return rows
        except Exception as e:
            logger.error(f"PostgreSQL error: {str(e)}", exc_info=True)
            logger.info("Rolling back transaction due to error")
            self.rollback_transaction()
            raise BatchExecutionError(f"Failed to execute PostgreSQL query: {str(e)}") from e

    def apply(self, batch: Batch) -> int:
        """
        Assemble the batch into one query and execute it.

        Args:
            batch: Batch of statements using ``%s`` placeholders

        Returns:
            Number of statements executed

        Raises:
            DeferredResolutionError: If a deferred argument fails (nothing is executed)
            BatchExecutionError: If PostgreSQL rejects the batch
        """
        query, args = batch.assemble(DEFAULT_SEPARATOR)
        if self.dry_run:
            self.collect(query, args, len(batch))
        else:
            logger.debug(f"Executing PostgreSQL batch: {len(batch)} statements, {len(args)} arguments")
            self.execute(query, args)
        return len(batch)

    def commit_transaction(self) -> None:
        """Commit the current transaction."""
        self.connection.commit()

    def rollback_transaction(self) -> None:
        """Rollback the current transaction."""
        self.connection.rollback()

    def close(self) -> None:
        """Close the cursor and the connection."""
        if getattr(self, "cursor", None):
            self.cursor.close()
            self.cursor = None

        if getattr(self, "connection", None):
            self.connection.close()
            self.connection = None
