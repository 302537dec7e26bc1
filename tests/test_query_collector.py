"""
Unit tests for the QueryCollector.
"""
import unittest

from batch_builder import QueryCollector


class TestQueryCollector(unittest.TestCase):
    """Test cases for QueryCollector."""

    def setUp(self):
        """Set up test fixtures."""
        self.collector = QueryCollector()

    def test_add_query(self):
        self.collector.add_query("INSERT INTO t (a) VALUES (?)", (1,), metadata={"table_name": "t"})
        self.assertEqual(len(self.collector.queries), 1)
        self.assertEqual(self.collector.queries[0], {
            "query": "INSERT INTO t (a) VALUES (?)",
            "args": [1],
            "statement_count": 1,
            "metadata": {"table_name": "t"},
        })
        self.assertEqual(self.collector.total_argument_count, 1)

    def test_get_stats(self):
        self.collector.add_query("A ?; B ?", [1, 2], statement_count=2)
        self.collector.add_query("C", [])
        self.assertEqual(self.collector.get_stats(), {
            "total_queries": 2,
            "total_statements": 3,
            "total_argument_count": 2,
        })

    def test_clear(self):
        self.collector.add_query("A ?", [1])
        self.collector.clear()
        self.assertEqual(self.collector.queries, [])
        self.assertEqual(self.collector.total_argument_count, 0)


if __name__ == '__main__':
    unittest.main()
