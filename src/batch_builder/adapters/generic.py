"""
Generic adapter for Batch Builder.

This module provides a generic adapter that works with any database
following the Python DB-API 2.0 specification with the ``qmark`` paramstyle,
such as SQLite.
"""
import logging
from typing import Any, Callable, Optional, Sequence

from batch_builder.adapters.base import BatchAdapter
from batch_builder.batch import Batch
from batch_builder.config import SQLITE_MAX_ARGUMENTS
from batch_builder.exceptions import BatchExecutionError
from batch_builder.query_collector import QueryCollector

logger = logging.getLogger(__name__)


class GenericAdapter(BatchAdapter):
    """
    Generic adapter for connecting Batch Builder to any DB-API compatible database.

    DB-API drivers execute one statement per ``cursor.execute`` call, so a
    batch is applied statement by statement inside a single transaction.
    All deferred arguments are resolved before the first statement runs.

    Example:
        >>> import sqlite3
        >>> from batch_builder import new_insert
        >>> from batch_builder.adapters import GenericAdapter
        >>>
        >>> conn = sqlite3.connect(":memory:")
        >>> conn.execute("CREATE TABLE users (id INTEGER, name TEXT)")
        >>> adapter = GenericAdapter(connection=conn)
        >>>
        >>> batch = adapter.new_batch()
        >>> batch.add_statement(new_insert("users", {"id": 1, "name": "Alice"}))
        >>> batch.add_statement(new_insert("users", {"id": 2, "name": "Bob"}))
        >>> adapter.apply(batch)
    """

    def __init__(
        self,
        connection: Any,
        create_cursor_fn: Optional[Callable] = None,
        max_arguments: int = SQLITE_MAX_ARGUMENTS,
        auto_commit: bool = True,
        dry_run: bool = False,
        query_collector: Optional[QueryCollector] = None,
    ):
        """
        Initialize a generic DB-API adapter.

        Args:
            connection: A DB-API compatible connection object
            create_cursor_fn: Optional function to create a cursor (defaults to connection.cursor())
            max_arguments: Maximum bound arguments per batch
            auto_commit: Whether ``execute`` commits after each statement
            dry_run: If True, collect payloads instead of executing them
            query_collector: Collector for payloads in dry run mode
        """
        super().__init__(dry_run=dry_run, query_collector=query_collector)
        self.connection = connection
        self.create_cursor_fn = create_cursor_fn or (lambda conn: conn.cursor())
        self._max_arguments = max_arguments
        self.auto_commit = auto_commit
        self._cursor = None

        logger.debug(f"Initialized GenericAdapter with max_arguments={max_arguments}")

    def _get_cursor(self) -> Any:
        """Get a cursor, creating it if necessary."""
        if self._cursor is None:
            self._cursor = self.create_cursor_fn(self.connection)
        return self._cursor

    def execute(self, query: str, args: Sequence[Any] = ()) -> Any:
        """
        Execute a single statement using the DB-API connection.

        Args:
            query: Statement text with ``?`` placeholders
            args: Arguments bound to the placeholders

        Returns:
            Fetched rows for queries that return results, otherwise None
        """
        cursor = self._get_cursor()

        try:
            logger.debug(f"Executing SQL: {query}")
            cursor.execute(query, list(args))
            rows = cursor.fetchall() if cursor.description else None

            if self.auto_commit and hasattr(self.connection, "commit"):
                self.connection.commit()

            return rows
        except Exception as e:
            logger.error(f"Error executing SQL: {str(e)}", exc_info=True)
            if self.auto_commit:
                self.rollback_transaction()
            raise BatchExecutionError(f"Failed to execute SQL: {str(e)}") from e

    def apply(self, batch: Batch) -> int:
        """
        Execute every statement of the batch in one transaction.

        Args:
            batch: Batch to execute

        Returns:
            Number of statements executed

        Raises:
            DeferredResolutionError: If a deferred argument fails (nothing is executed)
            BatchExecutionError: If the driver fails (the transaction is rolled back)
        """
        resolved = batch.resolve_statements()

        if self.dry_run:
            for query, args in resolved:
                self.collect(query, args, 1)
            return len(resolved)

        cursor = self._get_cursor()
        self.begin_transaction()
        try:
            for query, args in resolved:
                logger.debug(f"Executing SQL: {query}")
                cursor.execute(query, args)
            self.commit_transaction()
        except Exception as e:
            logger.error(f"Error executing batch: {str(e)}", exc_info=True)
            self.rollback_transaction()
            raise BatchExecutionError(f"Failed to execute batch: {str(e)}") from e

        logger.debug(f"Executed batch of {len(resolved)} statements")
        return len(resolved)

    def get_max_arguments(self) -> int:
        return self._max_arguments

    def close(self) -> None:
        """Close the cursor."""
        if self._cursor:
            self._cursor.close()
            self._cursor = None

        logger.debug("Closed DB cursor")

    def begin_transaction(self) -> None:
        """Begin a database transaction."""
        if getattr(self.connection, "in_transaction", False) is True:
            return
        if hasattr(self.connection, "begin"):
            self.connection.begin()
        elif hasattr(self.connection, "execute"):
            self.connection.execute("BEGIN TRANSACTION")

    def commit_transaction(self) -> None:
        """Commit the current database transaction."""
        if hasattr(self.connection, "commit"):
            self.connection.commit()

    def rollback_transaction(self) -> None:
        """Rollback the current database transaction."""
        if hasattr(self.connection, "rollback"):
            self.connection.rollback()
