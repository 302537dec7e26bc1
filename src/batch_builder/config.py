"""
Default settings for Batch Builder.

This module contains the default ceilings, separators and batch markers used
throughout the package. Every value can be overridden per instance.
"""

# Positional placeholder emitted by the statement factory
PLACEHOLDER = "?"
# Placeholder for drivers using the pyformat paramstyle (psycopg2)
PYFORMAT_PLACEHOLDER = "%s"

# Default ceiling on the cumulative argument count of one batch
DEFAULT_MAX_ARGUMENTS = 65536

# Separator used when joining statements without a dialect envelope
DEFAULT_SEPARATOR = "; "

# CQL batch envelope
CQL_SEPARATOR = "\n"
CQL_APPLY_BATCH = "APPLY BATCH"
CQL_BATCH_TYPES = ("UNLOGGED", "COUNTER")
# The native protocol encodes the bound value count as an unsigned short
CQL_MAX_ARGUMENTS = 65535

# SQLite's default SQLITE_MAX_VARIABLE_NUMBER on older builds
SQLITE_MAX_ARGUMENTS = 999
