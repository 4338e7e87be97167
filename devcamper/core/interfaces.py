"""
Abstract interfaces for store adapters.

These protocols define the contract that every store adapter must implement
to serve the advanced results system.
"""

from typing import Any, Dict, List, Optional, Protocol

from devcamper.core.models import QueryDescriptor


class IQueryExecutor(Protocol):
    """
    Execute query descriptors against a document store.

    Every method raises ``QueryExecutionError`` when the store rejects the
    query or cannot be reached. Documents are returned as plain dicts with
    their identity under ``_id``.
    """

    def count(self, collection: str, filter: Dict[str, Any]) -> int:
        """
        Count documents matching a filter.

        Args:
            collection: Name of the collection
            filter: Store-native filter predicate

        Returns:
            Number of matching documents, ignoring any window
        """
        ...

    def fetch(self, descriptor: QueryDescriptor) -> List[Dict[str, Any]]:
        """
        Run a windowed, sorted, projected fetch.

        Args:
            descriptor: Query to execute, including relation expansions

        Returns:
            Matching documents in sort order, at most ``descriptor.limit``
        """
        ...

    def find_one(self, descriptor: QueryDescriptor) -> Optional[Dict[str, Any]]:
        """Return the first document the descriptor matches, or None."""
        ...

    def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document and return it with its assigned ``_id``."""
        ...

    def update_one(
        self, collection: str, filter: Dict[str, Any], changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply ``changes`` to the first match and return the updated document."""
        ...

    def delete_one(self, collection: str, filter: Dict[str, Any]) -> bool:
        """Delete the first match; True if a document was removed."""
        ...

    def delete_many(self, collection: str, filter: Dict[str, Any]) -> int:
        """Delete every match and return how many were removed."""
        ...
