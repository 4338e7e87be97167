"""
Course routes. Creation lives under the bootcamp routes.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from devcamper.auth import authorize_roles
from devcamper.core.models import RelationSpec
from devcamper.dependencies import get_query_params, get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.routes.responses import document_response, ensure_owner, not_found
from devcamper.schema.payloads import CourseUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["courses"])

COURSE_BOOTCAMP = RelationSpec(path="bootcamp", select="name description")


@router.get("")
async def get_courses(
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """List courses with the name and description of their bootcamp."""
    envelope = await results.translate_async("courses", params, populate=COURSE_BOOTCAMP)
    return envelope.to_response()


@router.get("/{course_id}")
def get_course(course_id: str, results: AdvancedResults = Depends(get_results)):
    course = results.get_by_id("courses", course_id, populate=COURSE_BOOTCAMP)
    if course is None:
        raise not_found(course_id)
    return document_response(course)


def _owned_course(results: AdvancedResults, course_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    course = results.get_by_id("courses", course_id)
    if course is None:
        raise not_found(course_id)
    ensure_owner(course, user, "course")
    return course


@router.put("/{course_id}")
def update_course(
    course_id: str,
    payload: CourseUpdate,
    user: Dict[str, Any] = Depends(authorize_roles("publisher", "admin")),
    results: AdvancedResults = Depends(get_results),
):
    course = _owned_course(results, course_id, user)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        course = results.store.update_one("courses", {"_id": course["_id"]}, changes) or course
    return document_response(course)


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    user: Dict[str, Any] = Depends(authorize_roles("publisher", "admin")),
    results: AdvancedResults = Depends(get_results),
):
    course = _owned_course(results, course_id, user)
    results.store.delete_one("courses", {"_id": course["_id"]})
    logger.info("User %s deleted course %s", user["_id"], course["_id"])
    return {"success": True, "data": {}}
