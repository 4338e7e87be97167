"""Resource schemas and field type casting."""

from devcamper.schema.resources import (
    BOOTCAMPS,
    COURSES,
    RESOURCES,
    REVIEWS,
    USERS,
    Relation,
    ResourceSchema,
)
from devcamper.schema.payloads import (
    BootcampCreate,
    BootcampUpdate,
    CourseCreate,
    CourseUpdate,
    LoginRequest,
    ReviewCreate,
    ReviewUpdate,
    UserCreate,
    UserUpdate,
)
from devcamper.schema.type_mappings import TypeMapper

__all__ = [
    "BOOTCAMPS",
    "COURSES",
    "RESOURCES",
    "REVIEWS",
    "USERS",
    "BootcampCreate",
    "BootcampUpdate",
    "CourseCreate",
    "CourseUpdate",
    "LoginRequest",
    "Relation",
    "ReviewCreate",
    "ReviewUpdate",
    "ResourceSchema",
    "TypeMapper",
    "UserCreate",
    "UserUpdate",
]
