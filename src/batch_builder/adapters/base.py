"""
Base adapter interface for Batch Builder.

This module defines the base adapter interface that all specific
database adapters should implement. Adapters take assembled batches and
hand them to a database driver; the batching itself never touches a driver.
"""
from abc import ABC, abstractmethod
import logging
from typing import Any, Iterable, Optional, Sequence

from batch_builder.batch import Batch
from batch_builder.exceptions import TooManyArgumentsError
from batch_builder.query_collector import QueryCollector
from batch_builder.statements import PreparedStatement

logger = logging.getLogger(__name__)


class BatchAdapter(ABC):
    """
    Base class for database-specific adapters.

    Subclasses implement ``execute`` for a single query/argument pair,
    ``get_max_arguments`` for the driver's bound parameter limit, and
    ``apply`` for a whole batch.

    Attributes:
        dry_run: If True, payloads go to the query collector instead of the driver
        query_collector: Collector for payloads in dry run mode (optional)
    """

    def __init__(self, dry_run: bool = False, query_collector: Optional[QueryCollector] = None):
        self.dry_run = dry_run
        self.query_collector = query_collector

    @abstractmethod
    def execute(self, query: str, args: Sequence[Any] = ()) -> Any:
        """
        Execute one parameterized query.

        Args:
            query: Query text with positional placeholders
            args: Arguments bound to the placeholders

        Returns:
            Result of the execution (implementation-specific)
        """
        pass

    @abstractmethod
    def get_max_arguments(self) -> int:
        """
        Get the maximum number of bound arguments per request.

        Returns:
            Maximum argument count
        """
        pass

    @abstractmethod
    def apply(self, batch: Any) -> Any:
        """
        Execute every statement of a batch.

        Args:
            batch: Batch created by ``new_batch``
        """
        pass

    def new_batch(self) -> Any:
        """Create an empty batch sized for this adapter."""
        return Batch(max_arguments=self.get_max_arguments())

    def collect(self, query: str, args: Sequence[Any], statement_count: int) -> None:
        """Hand a payload to the query collector in dry run mode."""
        if self.query_collector is not None:
            logger.debug(f"Dry run: Collecting payload ({statement_count} statements)")
            self.query_collector.add_query(
                query, args, statement_count, metadata={"adapter": type(self).__name__}
            )
        else:
            logger.debug(f"Dry run: Would execute {statement_count} statements")

    def apply_statements(self, statements: Iterable[PreparedStatement]) -> int:
        """
        Apply statements in as few batches as the argument ceiling allows.

        Statements are added to a batch until the next one would exceed the
        ceiling; the batch is then applied and a new one started.

        Args:
            statements: Statements in execution order

        Returns:
            Number of statements applied

        Raises:
            TooManyArgumentsError: If a single statement exceeds the ceiling on
                its own. Batches applied before it are not rolled back.
        """
        total_processed = 0
        batch = self.new_batch()

        for statement in statements:
            try:
                batch.add_statement(statement)
            except TooManyArgumentsError:
                if not batch:
                    raise
                total_processed += self._flush(batch)
                batch = self.new_batch()
                batch.add_statement(statement)

        total_processed += self._flush(batch)
        logger.info(f"Applied {total_processed} statements")
        return total_processed

    def _flush(self, batch: Any) -> int:
        count = len(batch)
        if count:
            self.apply(batch)
        return count

    def close(self) -> None:
        """
        Close any open database connections.

        Default implementation does nothing, override as needed.
        """
        pass

    def begin_transaction(self) -> None:
        """
        Begin a database transaction.

        Default implementation does nothing, override as needed.
        """
        pass

    def commit_transaction(self) -> None:
        """
        Commit the current database transaction.

        Default implementation does nothing, override as needed.
        """
        pass

    def rollback_transaction(self) -> None:
        """
        Rollback the current database transaction.

        Default implementation does nothing, override as needed.
        """
        pass
