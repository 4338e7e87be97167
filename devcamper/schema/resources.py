"""
Resource schemas for the bootcamp API.

Each schema names its collection, declares field types (used to cast
query-string filter values), the relations that can be expanded and the
fields that are never returned unless explicitly selected.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from devcamper.core.models import Population, RelationSpec, TranslatorConfig


class Relation(BaseModel):
    """Foreign-key linkage from a resource to another collection."""

    collection: str
    local_field: str
    foreign_field: str = "_id"
    just_one: bool = True


class ResourceSchema(BaseModel):
    """Declared shape of one resource collection."""

    name: str
    collection: str
    field_types: Dict[str, str] = Field(default_factory=dict)
    relations: Dict[str, Relation] = Field(default_factory=dict)
    hidden_fields: List[str] = Field(default_factory=list)
    translator_config: Optional[TranslatorConfig] = None

    def field_type(self, field_path: str) -> str:
        """Normalized type of a field, ``unknown`` when undeclared."""
        return self.field_types.get(field_path, "unknown")

    def resolve_relation(
        self, spec: RelationSpec, registry: Dict[str, "ResourceSchema"]
    ) -> Population:
        """
        Resolve a relation spec into a concrete expansion.

        Args:
            spec: Relation to expand
            registry: All schemas by collection, used to find hidden fields
                of the related collection

        Raises:
            ValueError: If the relation is not declared on this resource
        """
        relation = self.relations.get(spec.path)
        if relation is None:
            raise ValueError(
                f"Cannot populate path '{spec.path}' on {self.name}: no such relation"
            )

        related = registry.get(relation.collection)
        hidden = tuple(related.hidden_fields) if related else ()
        field_list = spec.field_list

        return Population(
            path=spec.path,
            collection=relation.collection,
            local_field=relation.local_field,
            foreign_field=relation.foreign_field,
            just_one=relation.just_one,
            select_fields=tuple(field_list) if field_list else None,
            exclude=() if field_list else hidden,
        )


BOOTCAMPS = ResourceSchema(
    name="Bootcamp",
    collection="bootcamps",
    field_types={
        "_id": "objectid",
        "name": "string",
        "slug": "string",
        "description": "string",
        "website": "string",
        "phone": "string",
        "email": "string",
        "careers": "string",
        "location.city": "string",
        "location.state": "string",
        "location.zipcode": "string",
        "location.country": "string",
        "averageRating": "number",
        "averageCost": "number",
        "housing": "boolean",
        "jobAssistance": "boolean",
        "jobGuarantee": "boolean",
        "acceptGi": "boolean",
        "user": "objectid",
        "createdAt": "date",
    },
    relations={
        "courses": Relation(
            collection="courses",
            local_field="_id",
            foreign_field="bootcamp",
            just_one=False,
        ),
        "reviews": Relation(
            collection="reviews",
            local_field="_id",
            foreign_field="bootcamp",
            just_one=False,
        ),
    },
)

COURSES = ResourceSchema(
    name="Course",
    collection="courses",
    field_types={
        "_id": "objectid",
        "title": "string",
        "description": "string",
        "weeks": "string",
        "tuition": "number",
        "minimumSkill": "string",
        "scholarshipAvailable": "boolean",
        "bootcamp": "objectid",
        "user": "objectid",
        "createdAt": "date",
    },
    relations={
        "bootcamp": Relation(collection="bootcamps", local_field="bootcamp"),
    },
)

REVIEWS = ResourceSchema(
    name="Review",
    collection="reviews",
    field_types={
        "_id": "objectid",
        "title": "string",
        "text": "string",
        "rating": "number",
        "bootcamp": "objectid",
        "user": "objectid",
        "createdAt": "date",
    },
    relations={
        "bootcamp": Relation(collection="bootcamps", local_field="bootcamp"),
        "user": Relation(collection="users", local_field="user"),
    },
)

USERS = ResourceSchema(
    name="User",
    collection="users",
    field_types={
        "_id": "objectid",
        "name": "string",
        "email": "string",
        "role": "string",
        "createdAt": "date",
    },
    hidden_fields=["password", "resetPasswordToken", "resetPasswordExpire"],
)

RESOURCES: Dict[str, ResourceSchema] = {
    schema.collection: schema for schema in (BOOTCAMPS, COURSES, REVIEWS, USERS)
}
