"""Query execution and result formatting."""

from devcamper.execution.executor import QueryExecutor
from devcamper.execution.result_formatter import ResultFormatter

__all__ = ["QueryExecutor", "ResultFormatter"]
