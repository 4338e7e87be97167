"""
Response helpers shared by the resource routers.
"""

from typing import Any, Dict

from devcamper.core.errors import ErrorResponse
from devcamper.execution.result_formatter import ResultFormatter


def document_response(document: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": True, "data": ResultFormatter.format_document(document)}


def not_found(document_id: Any) -> ErrorResponse:
    return ErrorResponse(f"Resource not found with id of {document_id}", 404)


def ensure_owner(document: Dict[str, Any], user: Dict[str, Any], resource: str) -> None:
    """Only the document's owner or an admin may change it."""
    if document.get("user") != user["_id"] and user.get("role") != "admin":
        raise ErrorResponse(f"User {user['_id']} is not authorized to modify this {resource}", 403)
