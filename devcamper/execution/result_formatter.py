"""
Result formatting utilities.

Builds the uniform list envelope and makes documents JSON friendly.
"""

from typing import Any, Dict, List

from bson import ObjectId

from devcamper.core.models import PageLink, PageWindow, Pagination, ResultEnvelope


class ResultFormatter:
    """
    Formats query results into the result envelope.

    Stateless; every call builds a fresh envelope.
    """

    @staticmethod
    def build_pagination(window: PageWindow, total: int) -> Pagination:
        """
        Pagination links for a page window.

        ``next`` is present iff the window ends before ``total``; ``prev``
        iff the page is past the first.
        """
        pagination = Pagination()
        if window.end_index < total:
            pagination.next = PageLink(page=window.page + 1, limit=window.limit)
        if window.page > 1:
            pagination.prev = PageLink(page=window.page - 1, limit=window.limit)
        return pagination

    @staticmethod
    def format_envelope(
        documents: List[Dict[str, Any]], window: PageWindow, total: int
    ) -> ResultEnvelope:
        """
        Format one page of results.

        Args:
            documents: Documents of the page, as returned by the store
            window: Page window the documents were fetched with
            total: Number of matching documents ignoring the window

        Returns:
            Result envelope with serialized documents
        """
        return ResultEnvelope(
            success=True,
            count=len(documents),
            pagination=ResultFormatter.build_pagination(window, total),
            data=[ResultFormatter.format_document(doc) for doc in documents],
        )

    @staticmethod
    def format_document(document: Dict[str, Any]) -> Dict[str, Any]:
        """Convert ObjectIds to strings for JSON serialization, at any depth."""
        return ResultFormatter._serialize(document)

    @staticmethod
    def _serialize(value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        if isinstance(value, dict):
            return {key: ResultFormatter._serialize(item) for key, item in value.items()}
        if isinstance(value, list):
            return [ResultFormatter._serialize(item) for item in value]
        return value
