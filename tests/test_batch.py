"""
Unit tests for the Batch accumulator.
"""
import unittest
from unittest.mock import MagicMock

import pytest

from batch_builder import (
    Batch,
    Deferred,
    DeferredResolutionError,
    TooManyArgumentsError,
    new_delete,
    new_insert,
    new_statement,
    new_update,
)
from batch_builder.config import DEFAULT_MAX_ARGUMENTS


@pytest.mark.core
class TestBatchAdmission(unittest.TestCase):
    """Test cases for adding statements to a batch."""

    def test_init_with_defaults(self):
        """Test initialization with default values."""
        batch = Batch()
        self.assertEqual(batch.max_arguments, DEFAULT_MAX_ARGUMENTS)
        self.assertEqual(batch.max_arguments, 65536)
        self.assertEqual(batch.total_arguments, 0)
        self.assertEqual(len(batch), 0)
        self.assertFalse(batch)

    def test_add_statement(self):
        """Statements are kept in insertion order and counted."""
        batch = Batch()
        first = new_insert("users", {"id": 1, "name": "bob"})
        second = new_delete("users", {"id": 2})
        batch.add_statement(first)
        batch.add_statement(second)

        self.assertEqual(batch.statements, (first, second))
        self.assertEqual(batch.total_arguments, 3)
        self.assertEqual(len(batch), 2)
        self.assertTrue(batch)

    def test_rejects_statement_over_ceiling(self):
        """A rejected statement leaves the batch unchanged."""
        batch = Batch(max_arguments=3)
        first = new_statement("INSERT INTO t (a, b) VALUES (?, ?)", 1, 2)
        batch.add_statement(first)
        self.assertEqual(batch.total_arguments, 2)

        with self.assertRaises(TooManyArgumentsError) as ctx:
            batch.add_statement(new_statement("INSERT INTO t (a, b) VALUES (?, ?)", 3, 4))

        error = ctx.exception
        self.assertEqual(error.adding, 2)
        self.assertEqual(error.current, 2)
        self.assertEqual(error.maximum, 3)
        self.assertIn("2 arguments", str(error))
        self.assertEqual(batch.total_arguments, 2)
        self.assertEqual(batch.statements, (first,))

    def test_accepts_statement_reaching_ceiling(self):
        batch = Batch(max_arguments=3)
        batch.add_statement(new_statement("SELECT ?, ?", 1, 2))
        batch.add_statement(new_statement("SELECT ?", 3))
        self.assertEqual(batch.total_arguments, 3)

    def test_zero_ceiling_disables_check(self):
        batch = Batch(max_arguments=0)
        for i in range(10):
            batch.add_statement(new_statement("SELECT ?, ?", i, i))
        self.assertEqual(batch.total_arguments, 20)

    def test_retry_after_rejection(self):
        """A rejected statement can be added to a fresh batch."""
        batch = Batch(max_arguments=2)
        statement = new_statement("SELECT ?, ?", 1, 2)
        batch.add_statement(statement)
        with self.assertRaises(TooManyArgumentsError):
            batch.add_statement(statement)

        next_batch = Batch(max_arguments=2)
        next_batch.add_statement(statement)
        self.assertEqual(next_batch.total_arguments, 2)

    def test_reset(self):
        batch = Batch()
        batch.add_statement(new_delete("users", {"id": 1}))
        batch.reset()
        self.assertEqual(batch.total_arguments, 0)
        self.assertEqual(batch.statements, ())


@pytest.mark.core
class TestBatchAssembly(unittest.TestCase):
    """Test cases for assembling a batch."""

    def setUp(self):
        """Set up test fixtures."""
        self.first = new_insert("users", {"id": 1, "name": "bob"})
        self.second = new_update("users", {"name": "alice"}, {"id": 2})
        self.batch = Batch()
        self.batch.add_statement(self.first)
        self.batch.add_statement(self.second)

    def test_single_insert(self):
        batch = Batch()
        batch.add_statement(new_insert("users", {"id": 1, "name": "bob"}))
        query, args = batch.assemble(", ", "", "")
        self.assertEqual(query, "INSERT INTO users (id, name) VALUES (?, ?)")
        self.assertEqual(args, [1, "bob"])

    def test_markers(self):
        """Start and end markers wrap the statements."""
        query, args = self.batch.assemble("\n", "BEGIN", "END")
        self.assertEqual(query, "\n".join(["BEGIN", self.first.text, self.second.text, "END"]))
        self.assertEqual(args, [1, "bob", "alice", 2])

    def test_without_markers(self):
        query, _ = self.batch.assemble("; ", "", "")
        self.assertEqual(query, self.first.text + "; " + self.second.text)

    def test_only_start_marker(self):
        query, _ = self.batch.assemble("|", "BEGIN")
        self.assertEqual(query, "BEGIN|" + self.first.text + "|" + self.second.text)

    def test_argument_alignment(self):
        """The N-th placeholder is bound to the N-th argument."""
        batch = Batch()
        batch.add_statement(new_statement("A ? ?", "a1", "a2"))
        batch.add_statement(new_statement("B"))
        batch.add_statement(new_statement("C ? ? ?", "c1", "c2", "c3"))

        query, args = batch.assemble(" ; ", "BEGIN", "END")
        self.assertEqual(query.count("?"), len(args))
        self.assertEqual(args, ["a1", "a2", "c1", "c2", "c3"])

        # Substituting in scan order rebuilds each statement with its own values
        rendered = query
        for arg in args:
            rendered = rendered.replace("?", arg, 1)
        self.assertEqual(rendered, "BEGIN ; A a1 a2 ; B ; C c1 c2 c3 ; END")

    def test_empty_batch(self):
        self.assertEqual(Batch().assemble("; "), ("", []))
        self.assertEqual(Batch().assemble("\n", "BEGIN", "END"), ("BEGIN\nEND", []))

    def test_deferred_argument_resolved(self):
        batch = Batch()
        batch.add_statement(new_statement("INSERT INTO t (a, b, c) VALUES (?, ?, ?)", 1, Deferred(lambda: 42), 3))
        _, args = batch.assemble()
        self.assertEqual(args, [1, 42, 3])

    def test_deferred_argument_called_once_per_assembly(self):
        func = MagicMock(return_value="generated")
        batch = Batch()
        batch.add_statement(new_insert("t", {"id": Deferred(func)}))

        batch.assemble()
        self.assertEqual(func.call_count, 1)
        batch.assemble()
        self.assertEqual(func.call_count, 2)

    def test_deferred_resolved_at_assembly_time(self):
        """Statements built early see values computed at assembly."""
        state = {"now": 1}
        batch = Batch()
        batch.add_statement(new_insert("t", {"ts": Deferred(lambda: state["now"])}))
        state["now"] = 2
        _, args = batch.assemble()
        self.assertEqual(args, [2])

    def test_deferred_failure_returns_nothing(self):
        later = MagicMock(return_value=1)
        batch = Batch()
        batch.add_statement(new_insert("t", {"a": 1}))
        batch.add_statement(new_insert("t", {"a": Deferred(MagicMock(side_effect=RuntimeError("boom")))}))
        batch.add_statement(new_insert("t", {"a": Deferred(later)}))

        with self.assertRaises(DeferredResolutionError) as ctx:
            batch.assemble()

        self.assertIsInstance(ctx.exception.cause, RuntimeError)
        later.assert_not_called()

    def test_assembly_does_not_change_batch(self):
        before = self.batch.statements
        self.batch.assemble()
        self.assertEqual(self.batch.statements, before)
        self.assertEqual(self.batch.total_arguments, 4)

    def test_resolve_statements(self):
        batch = Batch()
        batch.add_statement(new_insert("t", {"a": Deferred(lambda: "x")}))
        batch.add_statement(new_delete("t", {"a": "y"}))
        self.assertEqual(
            batch.resolve_statements(),
            [
                ("INSERT INTO t (a) VALUES (?)", ["x"]),
                ("DELETE FROM t WHERE a = ?", ["y"]),
            ],
        )

    def test_resolve_statements_failure(self):
        batch = Batch()
        batch.add_statement(new_insert("t", {"a": Deferred(MagicMock(side_effect=KeyError("k")))}))
        with self.assertRaises(DeferredResolutionError):
            batch.resolve_statements()


if __name__ == '__main__':
    unittest.main()
