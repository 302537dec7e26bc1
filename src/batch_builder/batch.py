"""
Batch accumulator for prepared statements.

This module provides the ``Batch`` class, which collects prepared statements
in execution order and assembles them into one statement text plus one
flattened argument list. The N-th placeholder of the assembled text is bound
to the N-th element of the argument list.

A batch enforces a ceiling on its cumulative argument count, since most wire
protocols cap the number of bound parameters per request.
"""
import logging
from typing import Any, List, Tuple

from batch_builder.config import DEFAULT_MAX_ARGUMENTS, DEFAULT_SEPARATOR
from batch_builder.deferred import resolve_argument
from batch_builder.exceptions import TooManyArgumentsError
from batch_builder.statements import PreparedStatement


logger = logging.getLogger(__name__)


class Batch:
    """
    Ordered collection of prepared statements with an argument ceiling.

    A batch is meant to be built by a single owner. Guard it with a lock if
    several threads add statements to the same batch.

    Attributes:
        max_arguments (int): Ceiling on the cumulative argument count (0 disables it)
        total_arguments (int): Arguments committed so far

    Examples:
        >>> from batch_builder import Batch, new_insert, new_delete
        >>> batch = Batch(max_arguments=100)
        >>> batch.add_statement(new_insert("users", {"id": 1, "name": "bob"}))
        >>> batch.add_statement(new_delete("sessions", {"user_id": 1}))
        >>> batch.assemble("; ", "BEGIN", "COMMIT")
        ('BEGIN; INSERT INTO users (id, name) VALUES (?, ?); DELETE FROM sessions WHERE user_id = ?; COMMIT', [1, 'bob', 1])
    """

    def __init__(self, max_arguments: int = DEFAULT_MAX_ARGUMENTS) -> None:
        """
        Initialize an empty batch.

        Args:
            max_arguments: Ceiling on the cumulative argument count
                (default: 65536). Zero or a negative value disables the check.
        """
        self.max_arguments = max_arguments
        self._statements: List[PreparedStatement] = []
        self._total_arguments = 0

    @property
    def statements(self) -> Tuple[PreparedStatement, ...]:
        """Statements in execution order."""
        return tuple(self._statements)

    @property
    def total_arguments(self) -> int:
        return self._total_arguments

    def __len__(self) -> int:
        return len(self._statements)

    def __bool__(self) -> bool:
        return bool(self._statements)

    def __repr__(self) -> str:
        return (
            f"Batch(statements={len(self._statements)}, "
            f"total_arguments={self._total_arguments}, max_arguments={self.max_arguments})"
        )

    def add_statement(self, statement: PreparedStatement) -> None:
        """
        Add a statement to the end of the batch.

        Args:
            statement: Statement to add

        Raises:
            TooManyArgumentsError: If the statement's arguments would push the
                batch past ``max_arguments``. The batch is left unchanged.
        """
        adding = len(statement.arguments)
        if self.max_arguments > 0 and self._total_arguments + adding > self.max_arguments:
            logger.warning(
                f"Rejected statement with {adding} arguments: batch has "
                f"{self._total_arguments} of {self.max_arguments}"
            )
            raise TooManyArgumentsError(adding, self._total_arguments, self.max_arguments)

        self._statements.append(statement)
        self._total_arguments += adding
        logger.debug(
            f"Added statement #{len(self._statements)} with {adding} arguments "
            f"(total {self._total_arguments})"
        )

    def reset(self) -> None:
        """Remove all statements from the batch."""
        self._statements = []
        self._total_arguments = 0

    def assemble(
        self,
        separator: str = DEFAULT_SEPARATOR,
        start: str = "",
        end: str = "",
    ) -> Tuple[str, List[Any]]:
        """
        Build the combined statement text and flattened argument list.

        Deferred arguments are resolved here, once each, in statement order.
        Nothing is returned if one of them fails.

        Args:
            separator: String placed between fragments
            start: Optional fragment placed before the first statement
                (for example a begin-batch keyword)
            end: Optional fragment placed after the last statement
                (for example a commit keyword)

        Returns:
            Tuple of (combined text, flattened argument list)

        Raises:
            DeferredResolutionError: If a deferred argument fails
        """
        fragments: List[str] = []
        arguments: List[Any] = []
        for statement in self._statements:
            fragments.append(statement.text)
            arguments.extend(resolve_argument(arg) for arg in statement.arguments)

        if start:
            fragments.insert(0, start)
        if end:
            fragments.append(end)

        logger.debug(
            f"Assembled batch of {len(self._statements)} statements "
            f"with {len(arguments)} arguments"
        )
        return separator.join(fragments), arguments

    def resolve_statements(self) -> List[Tuple[str, List[Any]]]:
        """
        Resolve every statement's arguments without joining the texts.

        This suits drivers that take a list of statements, or that execute one
        statement per call inside a transaction. As with ``assemble``, all
        deferred arguments are resolved before anything is returned.

        Returns:
            List of (statement text, resolved arguments) pairs in execution order

        Raises:
            DeferredResolutionError: If a deferred argument fails
        """
        return [
            (statement.text, [resolve_argument(arg) for arg in statement.arguments])
            for statement in self._statements
        ]
