"""
Review routes. Creation lives under the bootcamp routes.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from devcamper.auth import authorize_roles
from devcamper.core.models import RelationSpec
from devcamper.dependencies import get_query_params, get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.routes.responses import document_response, ensure_owner, not_found
from devcamper.schema.payloads import ReviewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("")
async def get_reviews(
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """List reviews with the name of their bootcamp."""
    envelope = await results.translate_async("reviews", params, populate=RelationSpec(path="bootcamp", select="name"))
    return envelope.to_response()


@router.get("/{review_id}")
def get_review(review_id: str, results: AdvancedResults = Depends(get_results)):
    review = results.get_by_id(
        "reviews", review_id, populate=RelationSpec(path="bootcamp", select="name description")
    )
    if review is None:
        raise not_found(review_id)
    return document_response(review)


def _owned_review(results: AdvancedResults, review_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    review = results.get_by_id("reviews", review_id)
    if review is None:
        raise not_found(review_id)
    ensure_owner(review, user, "review")
    return review


@router.put("/{review_id}")
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    user: Dict[str, Any] = Depends(authorize_roles("user", "admin")),
    results: AdvancedResults = Depends(get_results),
):
    """Edit a review; only its author or an admin may."""
    review = _owned_review(results, review_id, user)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        review = results.store.update_one("reviews", {"_id": review["_id"]}, changes) or review
    return document_response(review)


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    user: Dict[str, Any] = Depends(authorize_roles("user", "admin")),
    results: AdvancedResults = Depends(get_results),
):
    review = _owned_review(results, review_id, user)
    results.store.delete_one("reviews", {"_id": review["_id"]})
    logger.info("User %s deleted review %s", user["_id"], review["_id"])
    return {"success": True, "data": {}}
