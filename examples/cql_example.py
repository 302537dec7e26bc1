#!/usr/bin/env python
"""
CQL example for Batch Builder

This example runs the CQL adapter in dry run mode and prints the batches it
would send to Cassandra.
"""
import logging
import time

from batch_builder import Deferred, QueryCollector, new_insert
from batch_builder.adapters import CqlAdapter


# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def now_micros():
    return int(time.time() * 1_000_000)


def main():
    """Run the CQL dry run example."""
    collector = QueryCollector()
    adapter = CqlAdapter(
        session=None,
        max_arguments=6,
        batch_type="UNLOGGED",
        dry_run=True,
        query_collector=collector,
    )

    statements = [
        new_insert("readings", {"sensor": f"s-{i}", "value": i * 1.5, "at": Deferred(now_micros)}).with_ttl(3600)
        for i in range(5)
    ]
    adapter.apply_statements(statements)

    for i, payload in enumerate(collector.queries):
        logger.info(f"-- Batch {i + 1}\n{payload['query']}\n{payload['args']}")
    logger.info(f"Stats: {collector.get_stats()}")


if __name__ == "__main__":
    main()
