"""
Bearer-token authentication, role checks and account credentials.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from fastapi import Depends, Request
from jose import JWTError, jwt

from devcamper import config
from devcamper.core.errors import DuplicateDocumentError, ErrorResponse
from devcamper.core.models import QueryDescriptor
from devcamper.dependencies import get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.passwords import DUMMY_PASSWORD_HASH, hash_password, verify_password
from devcamper.schema.payloads import UserCreate

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "Not authorized to access this route"
INVALID_CREDENTIALS = "Invalid credentials"


def create_access_token(user_id: Any) -> str:
    """Sign a token identifying ``user_id``."""
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=config.JWT_EXPIRE_MINUTES)
    payload = {"id": str(user_id), "exp": int(expires_at.timestamp())}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as exc:
        raise ErrorResponse(NOT_AUTHORIZED, 401) from exc

    if "id" not in payload:
        raise ErrorResponse(NOT_AUTHORIZED, 401)
    return payload


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise ErrorResponse(NOT_AUTHORIZED, 401)
    return token.strip()


def protect_route(request: Request, results: AdvancedResults = Depends(get_results)) -> Dict[str, Any]:
    """
    Current user from the request's bearer token.

    Raises:
        ErrorResponse: 401 when the token is missing, invalid, expired or
            names a user that no longer exists
    """
    payload = decode_access_token(_bearer_token(request))
    user = results.get_by_id("users", payload["id"])
    if user is None:
        logger.info("Token for unknown user %s rejected", payload["id"])
        raise ErrorResponse(NOT_AUTHORIZED, 401)
    return user


def authorize_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency that admits only users holding one of ``roles``."""

    def check_role(user: Dict[str, Any] = Depends(protect_route)) -> Dict[str, Any]:
        if user.get("role") not in roles:
            raise ErrorResponse(
                f"User role {user.get('role')} is not authorized to access this route", 403
            )
        return user

    return check_role


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(results: AdvancedResults, payload: UserCreate) -> Dict[str, Any]:
    """
    Store a new account with a hashed password.

    Returns:
        The user as the read routes return it, without the password

    Raises:
        DuplicateDocumentError: If the email is already registered
    """
    email = normalize_email(payload.email)
    if results.store.count("users", {"email": email}):
        raise DuplicateDocumentError(f"Email {email} is already registered", fields={"email": email})

    stored = results.store.insert_one(
        "users",
        {
            "name": payload.name,
            "email": email,
            "role": payload.role,
            "password": hash_password(payload.password),
            "createdAt": datetime.now(timezone.utc),
        },
    )
    logger.info("Created %s account %s", payload.role, stored["_id"])
    return results.get_by_id("users", stored["_id"])


def authenticate(results: AdvancedResults, email: str, password: str) -> Dict[str, Any]:
    """
    User matching an email and password.

    Raises:
        ErrorResponse: 401 when the email is unknown or the password wrong
    """
    descriptor = QueryDescriptor(collection="users").where({"email": normalize_email(email)})
    user = results.store.find_one(descriptor)
    if user is None:
        verify_password(DUMMY_PASSWORD_HASH, password)
        raise ErrorResponse(INVALID_CREDENTIALS, 401)
    if not verify_password(user.get("password") or DUMMY_PASSWORD_HASH, password):
        logger.info("Failed login for user %s", user["_id"])
        raise ErrorResponse(INVALID_CREDENTIALS, 401)
    return user
