#!/usr/bin/env python
"""
Basic usage example for Batch Builder

This example builds a few statements, assembles them into one batch and
prints the payload a driver would receive.
"""
import logging
import time
import uuid

from batch_builder import Batch, Deferred, TooManyArgumentsError, new_delete, new_insert, new_update


# Set up logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def main():
    """Run the basic Batch Builder example."""
    batch = Batch(max_arguments=7)

    statements = [
        new_insert("users", {"id": Deferred(uuid.uuid4), "name": "Alice"}).with_ttl(86400),
        new_update("users", {"last_seen": Deferred(time.time)}, {"name": "Bob"}),
        new_delete("sessions", {"user": "Carol", "expired": True}),
        new_insert("audit", {"event": "cleanup", "at": Deferred(time.time)}),
    ]

    for statement in statements:
        try:
            batch.add_statement(statement)
        except TooManyArgumentsError as e:
            logger.info(f"Left out of this batch: {e}")

    query, args = batch.assemble("\n", "BEGIN BATCH", "APPLY BATCH")
    logger.info(f"Query:\n{query}")
    logger.info(f"Arguments: {args}")


if __name__ == "__main__":
    main()
