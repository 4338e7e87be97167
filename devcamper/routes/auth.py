"""
Registration, login and the authenticated user.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from devcamper.auth import authenticate, create_access_token, create_user, protect_route
from devcamper.dependencies import get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.routes.responses import document_response
from devcamper.schema.payloads import LoginRequest, UserCreate

router = APIRouter(prefix="/auth", tags=["auth"])


def token_response(user: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": True, "token": create_access_token(user["_id"])}


@router.post("/register")
def register(payload: UserCreate, results: AdvancedResults = Depends(get_results)):
    """Create a user or publisher account and sign them in."""
    return token_response(create_user(results, payload))


@router.post("/login")
def login(payload: LoginRequest, results: AdvancedResults = Depends(get_results)):
    return token_response(authenticate(results, payload.email, payload.password))


@router.get("/me")
def get_me(user: Dict[str, Any] = Depends(protect_route)):
    """The user the bearer token belongs to."""
    return document_response(user)
