"""
Redis Playground: an embedded Redis-style command interpreter

A pure, in-memory interpreter for a subset of the Redis command
language. Callers hold the store snapshot and thread it between
calls; nothing in this package owns a clock or a background loop.
"""

__version__ = "1.1.0"
