"""
Exceptions raised by Batch Builder.
"""


class BatchBuilderError(Exception):
    """Base class for all Batch Builder errors."""


class TooManyArgumentsError(BatchBuilderError):
    """
    Raised when adding a statement would push a batch past its argument ceiling.

    The batch is left untouched, so the caller can start a new batch or drop
    the statement.

    Attributes:
        adding: Number of arguments carried by the rejected statement
        current: Number of arguments already in the batch
        maximum: Configured ceiling of the batch
    """

    def __init__(self, adding: int, current: int, maximum: int):
        self.adding = adding
        self.current = current
        self.maximum = maximum
        super().__init__(
            f"can't add statement with {adding} arguments, "
            f"batch already has {current} (max {maximum})"
        )


class DeferredResolutionError(BatchBuilderError):
    """Raised when a deferred argument fails while a batch is assembled."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Unable to generate statement argument at runtime: {cause}")


class BatchExecutionError(BatchBuilderError):
    """Raised by adapters when the database driver fails to execute a batch."""
