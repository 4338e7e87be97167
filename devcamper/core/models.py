"""
Shared data models for the advanced results system.
"""

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class TranslatorConfig(BaseModel):
    """Knobs of the query translator, passed explicitly per call or resource."""

    model_config = ConfigDict(frozen=True)

    reserved_fields: Tuple[str, ...] = ("select", "sort", "page", "limit")
    operators: Tuple[str, ...] = ("gt", "gte", "lt", "lte", "in")
    default_page: int = Field(1, ge=1)
    default_limit: int = Field(25, ge=1)
    max_limit: Optional[int] = Field(None, ge=1)
    default_sort: Tuple[Tuple[str, int], ...] = (("createdAt", -1), ("name", -1))
    operator_rewrite: Literal["structural", "textual"] = "structural"


class RelationSpec(BaseModel):
    """
    Which relation to expand, and optionally which of its fields to keep.

    ``select`` is space separated, e.g. ``"name description"``.
    """

    path: str
    select: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union[str, Dict[str, Any], "RelationSpec"]) -> "RelationSpec":
        """Accept a bare relation name, a ``{path, select}`` mapping or a spec."""
        if isinstance(value, RelationSpec):
            return value
        if isinstance(value, str):
            return cls(path=value)
        return cls.model_validate(value)

    @property
    def field_list(self) -> Optional[List[str]]:
        if not self.select:
            return None
        return [f for f in self.select.replace(",", " ").split() if f]


class Population(BaseModel):
    """A relation expansion resolved against the resource's declared linkage."""

    model_config = ConfigDict(frozen=True)

    path: str
    collection: str
    local_field: str
    foreign_field: str = "_id"
    just_one: bool = True
    select_fields: Optional[Tuple[str, ...]] = None
    exclude: Tuple[str, ...] = ()

    def projection(self) -> Optional[Dict[str, int]]:
        """Projection applied to the related documents."""
        if self.select_fields:
            return {field: 1 for field in self.select_fields}
        if self.exclude:
            return {field: 0 for field in self.exclude}
        return None


class QueryDescriptor(BaseModel):
    """
    Immutable description of one windowed fetch.

    Every builder method returns a new descriptor; nothing touches the
    store until an executor runs it.
    """

    model_config = ConfigDict(frozen=True)

    collection: str
    filter: Dict[str, Any] = Field(default_factory=dict)
    projection: Optional[Dict[str, int]] = None
    sort: Tuple[Tuple[str, int], ...] = ()
    skip: int = 0
    limit: Optional[int] = None
    populate: Tuple[Population, ...] = ()

    def where(self, filter: Dict[str, Any]) -> "QueryDescriptor":
        return self.model_copy(update={"filter": dict(filter)})

    def select(self, projection: Optional[Dict[str, int]]) -> "QueryDescriptor":
        return self.model_copy(update={"projection": dict(projection) if projection else None})

    def order_by(self, sort: Tuple[Tuple[str, int], ...]) -> "QueryDescriptor":
        return self.model_copy(update={"sort": tuple(sort)})

    def window(self, skip: int, limit: Optional[int]) -> "QueryDescriptor":
        return self.model_copy(update={"skip": skip, "limit": limit})

    def expand(self, population: Population) -> "QueryDescriptor":
        return self.model_copy(update={"populate": self.populate + (population,)})

    def output_projection(self) -> Optional[Dict[str, int]]:
        """
        Projection applied to the final documents.

        Reverse (one-to-many) relations are not stored on the document, so
        an inclusion projection keeps their expanded paths.
        """
        if not self.projection:
            return None
        projection = dict(self.projection)
        if any(value == 1 for value in projection.values()):
            for population in self.populate:
                if not population.just_one:
                    projection.setdefault(population.path, 1)
        return projection


class PageWindow(BaseModel):
    """Pagination state derived from the ``page``/``limit`` parameters."""

    model_config = ConfigDict(frozen=True)

    page: int
    limit: int

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end_index(self) -> int:
        return self.page * self.limit


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


class ResultEnvelope(BaseModel):
    """Standardized list response: success flag, count, links and data."""

    success: bool = True
    count: int = 0
    pagination: Pagination = Field(default_factory=Pagination)
    data: List[Dict[str, Any]] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Render for JSON, leaving out absent pagination links."""
        return {
            "success": self.success,
            "count": self.count,
            "pagination": self.pagination.model_dump(exclude_none=True),
            "data": self.data,
        }
