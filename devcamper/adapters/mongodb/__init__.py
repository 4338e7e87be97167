"""MongoDB adapter for advanced results."""

from devcamper.adapters.mongodb.executor import MongoQueryExecutor
from devcamper.adapters.mongodb.pipeline import build_pipeline

__all__ = ["MongoQueryExecutor", "build_pipeline"]
