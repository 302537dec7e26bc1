"""
Query collector for Batch Builder to store assembled payloads in dry run mode.

This module provides a QueryCollector class that adapters hand their
assembled statements to when running in dry run mode, so the payloads can be
inspected without touching a database.
"""
from typing import Any, Dict, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)


class QueryCollector:
    """
    Collects assembled statement payloads for analysis.

    Example:
        >>> from batch_builder import QueryCollector, new_insert
        >>> from batch_builder.adapters import CqlAdapter
        >>>
        >>> collector = QueryCollector()
        >>> adapter = CqlAdapter(session=None, dry_run=True, query_collector=collector)
        >>> adapter.apply_statements([
        ...     new_insert("users", {"id": 1, "name": "Alice"}),
        ...     new_insert("users", {"id": 2, "name": "Bob"}),
        ... ])
        >>> print(f"Collected {len(collector.queries)} batches")
        >>> print(f"Collected {collector.total_argument_count} arguments")
    """

    def __init__(self):
        """Initialize a new query collector."""
        self.queries: List[Dict[str, Any]] = []
        self.total_argument_count = 0

    def add_query(
        self,
        query: str,
        args: Sequence[Any] = (),
        statement_count: int = 1,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Add an assembled payload to the collector.

        Args:
            query: Statement text as it would be sent to the driver
            args: Flattened argument list bound to the text
            statement_count: Number of statements the text was assembled from
            metadata: Additional information to keep with the payload
        """
        self.queries.append({
            "query": query,
            "args": list(args),
            "statement_count": statement_count,
            "metadata": dict(metadata or {}),
        })
        self.total_argument_count += len(args)
        logger.debug(f"Collected payload of {statement_count} statements ({len(args)} arguments)")

    def clear(self) -> None:
        """Clear all collected payloads."""
        self.queries = []
        self.total_argument_count = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the collected payloads.

        Returns:
            Dictionary with payload, statement and argument counts
        """
        return {
            "total_queries": len(self.queries),
            "total_statements": sum(q["statement_count"] for q in self.queries),
            "total_argument_count": self.total_argument_count,
        }
