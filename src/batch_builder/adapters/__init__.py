"""
Database adapters for Batch Builder.

This package contains adapters that hand assembled batches to database
drivers.

Available adapters:
- GenericAdapter: Works with any DB-API 2.0 connection using the qmark paramstyle
- PostgreSQLAdapter: Sends each batch as one query through psycopg2
- CqlAdapter: Wraps batches in BEGIN BATCH / APPLY BATCH for CQL sessions

Each adapter implements the BatchAdapter interface defined in adapters.base.
"""

from batch_builder.adapters.base import BatchAdapter
from batch_builder.adapters.cql import CqlAdapter, CqlBatch
from batch_builder.adapters.generic import GenericAdapter
from batch_builder.adapters.postgresql import PostgreSQLAdapter

__all__ = ["BatchAdapter", "CqlAdapter", "CqlBatch", "GenericAdapter", "PostgreSQLAdapter"]
