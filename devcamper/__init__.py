"""
devcamper - query translation and pagination for the bootcamp REST API.

Turns HTTP query strings into filtered, sorted, paginated, projected and
relation-populated fetches against a document store.
"""

from devcamper.core.errors import DevcamperError, ErrorResponse, QueryExecutionError
from devcamper.core.models import RelationSpec, ResultEnvelope, TranslatorConfig
from devcamper.orchestrator import AdvancedResults
from devcamper.query import QueryTranslator, parse_query_params

__version__ = "1.0.0"

__all__ = [
    "AdvancedResults",
    "DevcamperError",
    "ErrorResponse",
    "QueryExecutionError",
    "QueryTranslator",
    "RelationSpec",
    "ResultEnvelope",
    "TranslatorConfig",
    "parse_query_params",
]
