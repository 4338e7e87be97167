"""In-memory adapter for advanced results."""

from devcamper.adapters.memory.executor import InMemoryQueryExecutor

__all__ = ["InMemoryQueryExecutor"]
