"""HTTP routes of the bootcamp API."""

from fastapi import APIRouter

from devcamper.routes import auth, bootcamps, courses, reviews, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(bootcamps.router)
api_router.include_router(courses.router)
api_router.include_router(reviews.router)
api_router.include_router(users.router)
api_router.include_router(auth.router)

__all__ = ["api_router"]
