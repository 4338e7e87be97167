"""
Query execution coordinator.

Runs the count and the windowed fetch of one request through a store
adapter.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from devcamper.core.errors import QueryExecutionError
from devcamper.core.interfaces import IQueryExecutor
from devcamper.core.models import QueryDescriptor

logger = logging.getLogger(__name__)


class QueryExecutor:
    """
    Coordinates query execution.

    Wraps a store-specific executor. Failures are logged and re-raised
    unchanged; there are no retries here.
    """

    def __init__(self, executor: IQueryExecutor):
        """
        Initialize query executor.

        Args:
            executor: Store-specific query executor implementation
        """
        self.executor = executor

    def execute(self, descriptor: QueryDescriptor) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Count matches and fetch the requested page.

        Args:
            descriptor: Windowed query

        Returns:
            Tuple of (total matches ignoring the window, page documents)
        """
        try:
            total = self.executor.count(descriptor.collection, descriptor.filter)
            documents = self.executor.fetch(descriptor)
        except QueryExecutionError as e:
            logger.warning("Query on %s failed: %s", descriptor.collection, e)
            raise
        return total, documents

    async def execute_async(self, descriptor: QueryDescriptor) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Async version of execute().

        Count and fetch run concurrently on worker threads. The first
        failure is raised as soon as it happens; the other thread is not
        waited for and its result is discarded.
        """
        try:
            total, documents = await asyncio.gather(
                asyncio.to_thread(self.executor.count, descriptor.collection, descriptor.filter),
                asyncio.to_thread(self.executor.fetch, descriptor),
            )
        except QueryExecutionError as e:
            logger.warning("Query on %s failed: %s", descriptor.collection, e)
            raise
        return total, documents

    def find_one(self, descriptor: QueryDescriptor) -> Optional[Dict[str, Any]]:
        try:
            return self.executor.find_one(descriptor)
        except QueryExecutionError as e:
            logger.warning("Lookup on %s failed: %s", descriptor.collection, e)
            raise
