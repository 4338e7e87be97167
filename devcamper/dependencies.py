"""
Shared FastAPI dependencies.
"""

from typing import Any, Dict

from fastapi import Request

from devcamper.orchestrator import AdvancedResults
from devcamper.query.params import parse_query_params


def get_results(request: Request) -> AdvancedResults:
    """The AdvancedResults instance the application was created with."""
    return request.app.state.results


def get_query_params(request: Request) -> Dict[str, Any]:
    """Nested query-string parameters of the request."""
    return parse_query_params(request.query_params.multi_items())
