"""
CQL adapter for Batch Builder.

This module wraps batches in the CQL batch envelope::

    BEGIN [UNLOGGED | COUNTER] BATCH [USING TIMESTAMP <ts>]
    <statement>
    ...
    APPLY BATCH

and executes them through a session object exposing
``execute(query, parameters)``, such as a cassandra-driver ``Session``.
"""
import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from batch_builder.adapters.base import BatchAdapter
from batch_builder.batch import Batch
from batch_builder.config import CQL_APPLY_BATCH, CQL_BATCH_TYPES, CQL_MAX_ARGUMENTS, CQL_SEPARATOR
from batch_builder.exceptions import BatchExecutionError
from batch_builder.query_collector import QueryCollector
from batch_builder.statements import PreparedStatement

logger = logging.getLogger(__name__)


class CqlBatch:
    """
    A batch rendered with CQL ``BEGIN BATCH`` / ``APPLY BATCH`` markers.

    Example:
        >>> from batch_builder import new_insert
        >>> from batch_builder.adapters import CqlBatch
        >>>
        >>> batch = CqlBatch().using_timestamp(1700000000000000)
        >>> batch.add_statement(new_insert("users", {"id": 1}).with_ttl(60))
        >>> print(batch.assemble()[0])
        BEGIN BATCH USING TIMESTAMP 1700000000000000
        INSERT INTO users (id) VALUES (?) USING TTL 60
        APPLY BATCH
    """

    def __init__(self, batch: Optional[Batch] = None, batch_type: Optional[str] = None):
        """
        Args:
            batch: Batch to wrap (default: a new batch limited to 65535 arguments)
            batch_type: None for a logged batch, or "UNLOGGED" / "COUNTER"
        """
        if batch_type is not None:
            batch_type = batch_type.upper()
            if batch_type not in CQL_BATCH_TYPES:
                raise ValueError(
                    f"Invalid batch type: {batch_type}. "
                    f"Valid values are: {', '.join(CQL_BATCH_TYPES)}"
                )
        self.batch = batch if batch is not None else Batch(max_arguments=CQL_MAX_ARGUMENTS)
        self.batch_type = batch_type
        # None means no timestamp; 0 is a valid timestamp
        self.timestamp: Optional[int] = None

    def __len__(self) -> int:
        return len(self.batch)

    def __bool__(self) -> bool:
        return bool(self.batch)

    def using_timestamp(self, timestamp: int) -> "CqlBatch":
        """Set the write timestamp (microseconds) of every statement in the batch."""
        self.timestamp = int(timestamp)
        return self

    def add_statement(self, statement: PreparedStatement) -> None:
        self.batch.add_statement(statement)

    @property
    def begin_marker(self) -> str:
        parts = ["BEGIN"]
        if self.batch_type:
            parts.append(self.batch_type)
        parts.append("BATCH")
        if self.timestamp is not None:
            parts.append(f"USING TIMESTAMP {self.timestamp}")
        return " ".join(parts)

    def assemble(self) -> Tuple[str, List[Any]]:
        """Assemble the wrapped batch inside the CQL envelope."""
        return self.batch.assemble(CQL_SEPARATOR, self.begin_marker, CQL_APPLY_BATCH)


class CqlAdapter(BatchAdapter):
    """
    Adapter for Cassandra and other CQL databases.

    The session is only used through ``execute(query, parameters)`` and, when
    present, ``prepare(query)``. Queries are prepared first when the session
    supports it, since cassandra-driver binds ``?`` placeholders only on
    prepared statements.

    Example:
        >>> from cassandra.cluster import Cluster
        >>> from batch_builder import new_update
        >>> from batch_builder.adapters import CqlAdapter
        >>>
        >>> adapter = CqlAdapter(Cluster(["127.0.0.1"]).connect("app"))
        >>> batch = adapter.new_batch().using_timestamp(1700000000000000)
        >>> batch.add_statement(new_update("users", {"name": "bob"}, {"id": 1}))
        >>> adapter.apply(batch)
    """

    def __init__(
        self,
        session: Any,
        max_arguments: int = CQL_MAX_ARGUMENTS,
        batch_type: Optional[str] = None,
        dry_run: bool = False,
        query_collector: Optional[QueryCollector] = None,
    ):
        """
        Initialize a CQL adapter.

        Args:
            session: Session object used to execute queries
            max_arguments: Maximum bound arguments per batch
            batch_type: Batch type for batches created by ``new_batch``
            dry_run: If True, collect payloads instead of executing them
            query_collector: Collector for payloads in dry run mode
        """
        super().__init__(dry_run=dry_run, query_collector=query_collector)
        self.session = session
        self._max_arguments = max_arguments
        self.batch_type = batch_type

        logger.debug(f"Initialized CqlAdapter with max_arguments={max_arguments}")

    def get_max_arguments(self) -> int:
        return self._max_arguments

    def new_batch(self) -> CqlBatch:
        return CqlBatch(Batch(max_arguments=self.get_max_arguments()), batch_type=self.batch_type)

    def execute(self, query: str, args: Sequence[Any] = ()) -> Any:
        """
        Execute a CQL query through the session.

        Args:
            query: Query text with ``?`` placeholders
            args: Arguments bound to the placeholders

        Returns:
            Whatever the session returns

        Raises:
            BatchExecutionError: If the session fails
        """
        try:
            logger.debug(f"Executing CQL: {query}")
            statement = self.session.prepare(query) if hasattr(self.session, "prepare") else query
            return self.session.execute(statement, list(args))
        except Exception as e:
            logger.error(f"Error executing CQL: {str(e)}", exc_info=True)
            raise BatchExecutionError(f"Failed to execute CQL: {str(e)}") from e

    def apply(self, batch: Union[CqlBatch, Batch]) -> Any:
        """
        Execute a batch as a single CQL batch query.

        Args:
            batch: CqlBatch, or a plain Batch to wrap as a logged batch

        Returns:
            Whatever the session returns (None in dry run mode)

        Raises:
            DeferredResolutionError: If a deferred argument fails (nothing is executed)
            BatchExecutionError: If the session fails
        """
        if isinstance(batch, Batch):
            batch = CqlBatch(batch, batch_type=self.batch_type)

        query, args = batch.assemble()
        if self.dry_run:
            self.collect(query, args, len(batch))
            return None
        return self.execute(query, args)

    def close(self) -> None:
        """Shut down the session if it supports it."""
        if self.session is not None and hasattr(self.session, "shutdown"):
            self.session.shutdown()
