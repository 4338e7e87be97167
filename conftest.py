"""
Shared fixtures: a small bootcamp data set served from the in-memory store.
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from devcamper.auth import create_access_token
from devcamper.orchestrator import AdvancedResults
from devcamper.passwords import hash_password

BOOTCAMP_DEVWORKS = ObjectId("5d713995b721c3bb38c1f5d0")
BOOTCAMP_MODERNTECH = ObjectId("5d713a66ec8f2b88b8f830b8")
BOOTCAMP_CODEMASTERS = ObjectId("5d725a037b292f5f8ceff787")
BOOTCAMP_DEVCENTRAL = ObjectId("5d725a1b7b292f5f8ceff788")

USER_ADMIN = ObjectId("5c8a1d5b0190b214360dc031")
USER_PUBLISHER = ObjectId("5c8a1d5b0190b214360dc032")
USER_JOHN = ObjectId("5c8a1d5b0190b214360dc033")
USER_JANE = ObjectId("5c8a1d5b0190b214360dc034")

REVIEW_JOHN_DEVWORKS = ObjectId("5d7a514b5d2c12c7449be020")
REVIEW_JANE_DEVWORKS = ObjectId("5d7a514b5d2c12c7449be021")
REVIEW_JOHN_MODERNTECH = ObjectId("5d7a514b5d2c12c7449be022")

COURSE_FRONT_END = ObjectId("5d725a4a7b292f5f8ceff789")

SAMPLE_PASSWORD = "123456"
SAMPLE_PASSWORD_HASH = hash_password(SAMPLE_PASSWORD)


def _bootcamp(_id, name, careers, cost, coordinates, city, created):
    return {
        "_id": _id,
        "name": name,
        "description": f"{name} is a full stack JavaScript bootcamp",
        "careers": careers,
        "housing": cost > 9000,
        "averageCost": cost,
        "location": {"type": "Point", "coordinates": coordinates, "city": city},
        "user": USER_PUBLISHER,
        "createdAt": created,
    }


def sample_collections():
    """Fresh copy of the sample data set."""
    return {
        "bootcamps": [
            _bootcamp(
                BOOTCAMP_DEVWORKS, "Devworks Bootcamp", ["Web Development", "UI/UX", "Business"],
                10000, [-71.104028, 42.350846], "Boston", datetime(2024, 1, 1),
            ),
            _bootcamp(
                BOOTCAMP_MODERNTECH, "ModernTech Bootcamp", ["Web Development", "UI/UX", "Mobile Development"],
                7500, [-71.525909, 41.483657], "Kingston", datetime(2024, 2, 1),
            ),
            _bootcamp(
                BOOTCAMP_CODEMASTERS, "Codemasters", ["Web Development", "Data Science", "Business"],
                11000, [-72.290114, 43.702706], "Hanover", datetime(2024, 3, 1),
            ),
            _bootcamp(
                BOOTCAMP_DEVCENTRAL, "Devcentral Bootcamp", ["Mobile Development", "Data Science"],
                6000, [-117.842119, 33.684567], "Irvine", datetime(2024, 4, 1),
            ),
        ],
        "courses": [
            {"_id": COURSE_FRONT_END, "title": "Front End Web Development", "tuition": 8000,
             "minimumSkill": "beginner", "bootcamp": BOOTCAMP_DEVWORKS, "user": USER_PUBLISHER,
             "createdAt": datetime(2024, 1, 2)},
            {"title": "Full Stack Web Development", "tuition": 10000, "minimumSkill": "intermediate",
             "bootcamp": BOOTCAMP_DEVWORKS, "user": USER_PUBLISHER, "createdAt": datetime(2024, 1, 3)},
            {"title": "Full Stack Web Dev", "tuition": 12000, "minimumSkill": "intermediate",
             "bootcamp": BOOTCAMP_MODERNTECH, "user": USER_PUBLISHER, "createdAt": datetime(2024, 2, 2)},
            {"title": "UI/UX", "tuition": 6000, "minimumSkill": "beginner",
             "bootcamp": BOOTCAMP_CODEMASTERS, "user": USER_PUBLISHER, "createdAt": datetime(2024, 3, 2)},
            {"title": "Mobile Development", "tuition": 9000, "minimumSkill": "advanced",
             "bootcamp": BOOTCAMP_DEVCENTRAL, "user": USER_PUBLISHER, "createdAt": datetime(2024, 4, 2)},
        ],
        "users": [
            {"_id": USER_ADMIN, "name": "Admin Account", "email": "admin@gmail.com", "role": "admin",
             "password": SAMPLE_PASSWORD_HASH, "createdAt": datetime(2023, 12, 1)},
            {"_id": USER_PUBLISHER, "name": "Publisher Account", "email": "publisher@gmail.com",
             "role": "publisher", "password": SAMPLE_PASSWORD_HASH, "createdAt": datetime(2023, 12, 2)},
            {"_id": USER_JOHN, "name": "John Doe", "email": "john@gmail.com", "role": "user",
             "password": SAMPLE_PASSWORD_HASH, "createdAt": datetime(2023, 12, 3)},
            {"_id": USER_JANE, "name": "Jane Doe", "email": "jane@gmail.com", "role": "user",
             "password": SAMPLE_PASSWORD_HASH, "createdAt": datetime(2023, 12, 4)},
        ],
        "reviews": [
            {"_id": REVIEW_JOHN_DEVWORKS, "title": "Learned a ton!", "text": "Great instructors", "rating": 8,
             "bootcamp": BOOTCAMP_DEVWORKS, "user": USER_JOHN, "createdAt": datetime(2024, 5, 1)},
            {"_id": REVIEW_JANE_DEVWORKS, "title": "Great bootcamp", "text": "Got a job after", "rating": 9,
             "bootcamp": BOOTCAMP_DEVWORKS, "user": USER_JANE, "createdAt": datetime(2024, 5, 2)},
            {"_id": REVIEW_JOHN_MODERNTECH, "title": "Not worth it", "text": "Outdated material", "rating": 4,
             "bootcamp": BOOTCAMP_MODERNTECH, "user": USER_JOHN, "createdAt": datetime(2024, 5, 3)},
        ],
    }


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def results():
    return AdvancedResults.in_memory(sample_collections())


@pytest.fixture
def client(results):
    from api import create_app

    with TestClient(create_app(results)) as test_client:
        yield test_client
