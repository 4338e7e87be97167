"""
Admin-only user management routes.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from devcamper.auth import authorize_roles, create_user
from devcamper.dependencies import get_query_params, get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.routes.responses import document_response, not_found
from devcamper.schema.payloads import UserCreate, UserUpdate

router = APIRouter(
    prefix="/admin/users",
    tags=["users"],
    dependencies=[Depends(authorize_roles("admin"))],
)


@router.get("")
async def get_users(
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    envelope = await results.translate_async("users", params)
    return envelope.to_response()


@router.post("", status_code=201)
def create_user_account(payload: UserCreate, results: AdvancedResults = Depends(get_results)):
    return document_response(create_user(results, payload))


@router.get("/{user_id}")
def get_user(user_id: str, results: AdvancedResults = Depends(get_results)):
    user = results.get_by_id("users", user_id)
    if user is None:
        raise not_found(user_id)
    return document_response(user)


@router.put("/{user_id}")
def update_user(user_id: str, payload: UserUpdate, results: AdvancedResults = Depends(get_results)):
    """Update a user's name or email."""
    user = results.get_by_id("users", user_id)
    if user is None:
        raise not_found(user_id)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        results.store.update_one("users", {"_id": user["_id"]}, changes)
        user = results.get_by_id("users", user_id)
    return document_response(user)


@router.delete("/{user_id}")
def delete_user(user_id: str, results: AdvancedResults = Depends(get_results)):
    user = results.get_by_id("users", user_id)
    if user is None:
        raise not_found(user_id)
    results.store.delete_one("users", {"_id": user["_id"]})
    return {"success": True, "data": {}}
