"""
Request bodies accepted by the write routes.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^https?://\S+$"

Career = Literal[
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
]
MinimumSkill = Literal["beginner", "intermediate", "advanced"]


class GeoPoint(BaseModel):
    """GeoJSON point with optional address parts."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2, description="[longitude, latitude]")
    formattedAddress: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class BootcampCreate(BaseModel):
    """Body of a new bootcamp."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1)
    careers: List[Career] = Field(..., min_length=1)
    website: Optional[str] = Field(None, pattern=URL_PATTERN)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    location: Optional[GeoPoint] = None
    averageCost: Optional[float] = Field(None, ge=0)
    housing: bool = False
    jobAssistance: bool = False
    jobGuarantee: bool = False
    acceptGi: bool = False


class BootcampUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    address: Optional[str] = Field(None, min_length=1)
    careers: Optional[List[Career]] = Field(None, min_length=1)
    website: Optional[str] = Field(None, pattern=URL_PATTERN)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    location: Optional[GeoPoint] = None
    averageCost: Optional[float] = Field(None, ge=0)
    housing: Optional[bool] = None
    jobAssistance: Optional[bool] = None
    jobGuarantee: Optional[bool] = None
    acceptGi: Optional[bool] = None


class CourseCreate(BaseModel):
    """Body of a new course."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, description="Course title")
    description: str = Field(..., min_length=1)
    weeks: str = Field(..., min_length=1, description="Number of weeks")
    tuition: float = Field(..., ge=0, description="Tuition cost")
    minimumSkill: MinimumSkill
    scholarshipAvailable: bool = False


class CourseUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    weeks: Optional[str] = Field(None, min_length=1)
    tuition: Optional[float] = Field(None, ge=0)
    minimumSkill: Optional[MinimumSkill] = None
    scholarshipAvailable: Optional[bool] = None


class ReviewCreate(BaseModel):
    """Body of a new review."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=100, description="Review title")
    text: str = Field(..., min_length=1, description="Review text")
    rating: int = Field(..., ge=1, le=10, description="Rating between 1 and 10")


class ReviewUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    text: Optional[str] = Field(None, min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=10)


class UserCreate(BaseModel):
    """New account, from registration or from an admin."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    role: Literal["user", "publisher"] = "user"


class UserUpdate(BaseModel):
    """Admin edits of a user account; credentials are not editable here."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
