"""Core interfaces, models and errors for advanced results."""

from devcamper.core.errors import (
    DevcamperError,
    DuplicateDocumentError,
    ErrorResponse,
    InvalidIdError,
    QueryExecutionError,
)
from devcamper.core.interfaces import IQueryExecutor
from devcamper.core.models import (
    PageLink,
    PageWindow,
    Pagination,
    Population,
    QueryDescriptor,
    RelationSpec,
    ResultEnvelope,
    TranslatorConfig,
)

__all__ = [
    "DevcamperError",
    "DuplicateDocumentError",
    "ErrorResponse",
    "InvalidIdError",
    "QueryExecutionError",
    "IQueryExecutor",
    "PageLink",
    "PageWindow",
    "Pagination",
    "Population",
    "QueryDescriptor",
    "RelationSpec",
    "ResultEnvelope",
    "TranslatorConfig",
]
