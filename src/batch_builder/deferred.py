"""
Deferred statement arguments.

A statement argument is either a concrete value or a ``Deferred``. Deferred
arguments wrap a zero-argument computation that only runs when the batch is
assembled, so values such as generated identifiers or timestamps reflect the
moment of assembly rather than the moment the statement was built.

Only ``Deferred`` instances are treated as deferred. Any other object,
including plain callables, is passed to the driver as-is.

Example:
    >>> import uuid
    >>> from batch_builder import Batch, Deferred, new_insert
    >>>
    >>> batch = Batch()
    >>> batch.add_statement(new_insert("events", {"id": Deferred(uuid.uuid4), "kind": "login"}))
    >>> query, args = batch.assemble()
"""
import functools
import logging
from typing import Any, Callable

from batch_builder.exceptions import DeferredResolutionError

logger = logging.getLogger(__name__)


class Deferred:
    """
    An argument whose value is computed at assembly time.

    The wrapped function is called with the positional and keyword arguments
    given here. It returns the value, or raises to signal that the value
    could not be produced.
    """

    __slots__ = ("func",)

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any):
        if not callable(func):
            raise TypeError(f"Deferred expects a callable, got {type(func).__name__}")
        self.func = functools.partial(func, *args, **kwargs) if args or kwargs else func

    def resolve(self) -> Any:
        """
        Compute the value.

        Returns:
            The value produced by the wrapped function

        Raises:
            DeferredResolutionError: If the wrapped function raises
        """
        try:
            return self.func()
        except Exception as e:
            logger.debug(f"Deferred argument {self!r} failed: {e}")
            raise DeferredResolutionError(e) from e

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", None) or repr(self.func)
        return f"Deferred({name})"


def defer(func: Callable[..., Any]) -> Callable[..., Deferred]:
    """
    Turn a function into a factory of deferred arguments.

    Example:
        >>> @defer
        ... def now_millis():
        ...     return int(time.time() * 1000)
        >>> statement = new_insert("t", {"ts": now_millis()})
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Deferred:
        return Deferred(func, *args, **kwargs)

    return wrapper


def is_deferred(value: Any) -> bool:
    """Return True if ``value`` is a deferred argument."""
    return isinstance(value, Deferred)


def resolve_argument(value: Any) -> Any:
    """Return the concrete value of a statement argument."""
    if isinstance(value, Deferred):
        return value.resolve()
    return value
