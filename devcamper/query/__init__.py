"""Query-string parsing and translation."""

from devcamper.query.params import parse_query_params
from devcamper.query.translator import QueryTranslator

__all__ = ["QueryTranslator", "parse_query_params"]
