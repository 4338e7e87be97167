"""
Bootcamp routes, including the courses and reviews nested under a bootcamp.
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from devcamper.auth import authorize_roles
from devcamper.core.errors import DuplicateDocumentError, ErrorResponse
from devcamper.dependencies import get_query_params, get_results
from devcamper.orchestrator import AdvancedResults
from devcamper.routes.responses import document_response, ensure_owner, not_found
from devcamper.schema.payloads import BootcampCreate, BootcampUpdate, CourseCreate, ReviewCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bootcamps", tags=["bootcamps"])

EARTH_RADIUS_MILES = 3963

PUBLISHERS = ("publisher", "admin")


@router.get("")
async def get_bootcamps(
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """List bootcamps with their courses."""
    envelope = await results.translate_async("bootcamps", params, populate="courses")
    return envelope.to_response()


@router.get("/radius/{lng}/{lat}/{distance}")
async def get_bootcamps_in_radius(
    lng: float,
    lat: float,
    distance: float,
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """
    List bootcamps within ``distance`` miles of a point.

    The radius is converted to radians by dividing by the earth's radius.
    """
    within = {"location": {"$geoWithin": {"$centerSphere": [[lng, lat], distance / EARTH_RADIUS_MILES]}}}
    envelope = await results.translate_async("bootcamps", params, base_filter=within)
    return envelope.to_response()


def slugify(name: str) -> str:
    """Lower-case, dash-separated form of a bootcamp name."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _check_unique_name(results: AdvancedResults, name: str) -> None:
    if results.store.count("bootcamps", {"name": name}):
        raise DuplicateDocumentError(f"Bootcamp {name} already exists", fields={"name": name})


@router.post("", status_code=201)
def create_bootcamp(
    payload: BootcampCreate,
    user: Dict[str, Any] = Depends(authorize_roles(*PUBLISHERS)),
    results: AdvancedResults = Depends(get_results),
):
    _check_unique_name(results, payload.name)
    bootcamp = results.store.insert_one(
        "bootcamps",
        {
            **payload.model_dump(exclude_none=True),
            "slug": slugify(payload.name),
            "user": user["_id"],
            "createdAt": datetime.now(timezone.utc),
        },
    )
    logger.info("User %s created bootcamp %s", user["_id"], bootcamp["_id"])
    return document_response(bootcamp)


def _require_bootcamp(results: AdvancedResults, bootcamp_id: str) -> Dict[str, Any]:
    bootcamp = results.get_by_id("bootcamps", bootcamp_id)
    if bootcamp is None:
        raise not_found(bootcamp_id)
    return bootcamp


@router.get("/{bootcamp_id}")
def get_bootcamp(bootcamp_id: str, results: AdvancedResults = Depends(get_results)):
    return document_response(_require_bootcamp(results, bootcamp_id))


def _owned_bootcamp(results: AdvancedResults, bootcamp_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    bootcamp = _require_bootcamp(results, bootcamp_id)
    ensure_owner(bootcamp, user, "bootcamp")
    return bootcamp


@router.put("/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: str,
    payload: BootcampUpdate,
    user: Dict[str, Any] = Depends(authorize_roles(*PUBLISHERS)),
    results: AdvancedResults = Depends(get_results),
):
    """Edit a bootcamp; only its publisher or an admin may."""
    bootcamp = _owned_bootcamp(results, bootcamp_id, user)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if payload.location is not None:
        changes["location"] = payload.location.model_dump(exclude_none=True)
    if "name" in changes and changes["name"] != bootcamp.get("name"):
        _check_unique_name(results, changes["name"])
        changes["slug"] = slugify(changes["name"])
    if changes:
        bootcamp = results.store.update_one("bootcamps", {"_id": bootcamp["_id"]}, changes) or bootcamp
    return document_response(bootcamp)


@router.delete("/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: str,
    user: Dict[str, Any] = Depends(authorize_roles(*PUBLISHERS)),
    results: AdvancedResults = Depends(get_results),
):
    """Delete a bootcamp together with its courses and reviews."""
    bootcamp = _owned_bootcamp(results, bootcamp_id, user)
    for collection in ("courses", "reviews"):
        results.store.delete_many(collection, {"bootcamp": bootcamp["_id"]})
    results.store.delete_one("bootcamps", {"_id": bootcamp["_id"]})
    logger.info("User %s deleted bootcamp %s", user["_id"], bootcamp["_id"])
    return {"success": True, "data": {}}


@router.get("/{bootcamp_id}/courses")
async def get_bootcamp_courses(
    bootcamp_id: str,
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """List the courses of one bootcamp."""
    bootcamp = await asyncio.to_thread(_require_bootcamp, results, bootcamp_id)
    envelope = await results.translate_async("courses", params, base_filter={"bootcamp": bootcamp["_id"]})
    return envelope.to_response()


@router.post("/{bootcamp_id}/courses", status_code=201)
def create_bootcamp_course(
    bootcamp_id: str,
    payload: CourseCreate,
    user: Dict[str, Any] = Depends(authorize_roles(*PUBLISHERS)),
    results: AdvancedResults = Depends(get_results),
):
    """Add a course to a bootcamp the user publishes."""
    bootcamp = _owned_bootcamp(results, bootcamp_id, user)
    course = results.store.insert_one(
        "courses",
        {
            **payload.model_dump(),
            "bootcamp": bootcamp["_id"],
            "user": user["_id"],
            "createdAt": datetime.now(timezone.utc),
        },
    )
    logger.info("User %s added course %s to bootcamp %s", user["_id"], course["_id"], bootcamp["_id"])
    return document_response(course)


@router.get("/{bootcamp_id}/reviews")
async def get_bootcamp_reviews(
    bootcamp_id: str,
    params: Dict[str, Any] = Depends(get_query_params),
    results: AdvancedResults = Depends(get_results),
):
    """List the reviews of one bootcamp."""
    bootcamp = await asyncio.to_thread(_require_bootcamp, results, bootcamp_id)
    envelope = await results.translate_async("reviews", params, base_filter={"bootcamp": bootcamp["_id"]})
    return envelope.to_response()


@router.post("/{bootcamp_id}/reviews", status_code=201)
def create_bootcamp_review(
    bootcamp_id: str,
    payload: ReviewCreate,
    user: Dict[str, Any] = Depends(authorize_roles("user", "admin")),
    results: AdvancedResults = Depends(get_results),
):
    """
    Add a review to a bootcamp.

    A user can review each bootcamp once.
    """
    bootcamp = _require_bootcamp(results, bootcamp_id)
    if results.store.count("reviews", {"bootcamp": bootcamp["_id"], "user": user["_id"]}):
        raise ErrorResponse("User already reviewed this bootcamp before", 400)

    review = results.store.insert_one(
        "reviews",
        {
            **payload.model_dump(),
            "bootcamp": bootcamp["_id"],
            "user": user["_id"],
            "createdAt": datetime.now(timezone.utc),
        },
    )
    logger.info("User %s reviewed bootcamp %s", user["_id"], bootcamp["_id"])
    return document_response(review)
