"""
Batch Builder - A tool for assembling prepared statements into batches

This package builds parameterized INSERT, UPDATE and DELETE statements and
combines them into one batch statement with a flattened, positionally aligned
argument list, ready for a SQL or CQL driver. Arguments can be deferred until
the batch is assembled.
"""

from batch_builder.batch import Batch
from batch_builder.deferred import Deferred, defer, is_deferred, resolve_argument
from batch_builder.exceptions import (
    BatchBuilderError,
    BatchExecutionError,
    DeferredResolutionError,
    TooManyArgumentsError,
)
from batch_builder.query_collector import QueryCollector
from batch_builder.statements import (
    PreparedStatement,
    new_delete,
    new_insert,
    new_statement,
    new_update,
    with_ttl,
)

__version__ = "0.1.0"
__all__ = [
    "Batch",
    "BatchBuilderError",
    "BatchExecutionError",
    "Deferred",
    "DeferredResolutionError",
    "PreparedStatement",
    "QueryCollector",
    "TooManyArgumentsError",
    "defer",
    "is_deferred",
    "new_delete",
    "new_insert",
    "new_statement",
    "new_update",
    "resolve_argument",
    "with_ttl",
]
