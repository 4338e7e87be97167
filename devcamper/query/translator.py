"""
Query translation.

Turns a parsed query-string parameter map into a store-native query
descriptor: filter, projection, sort, page window and relation expansions.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from devcamper.core.errors import InvalidIdError, QueryExecutionError
from devcamper.core.models import (
    PageWindow,
    QueryDescriptor,
    RelationSpec,
    TranslatorConfig,
)
from devcamper.query.operators import (
    LIST_OPERATORS,
    is_operator,
    rewrite_operators,
    rewrite_operators_text,
)
from devcamper.query.params import parse_field_list, parse_page_window, split_reserved
from devcamper.schema.resources import RESOURCES, ResourceSchema
from devcamper.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)

PopulateArg = Union[None, str, Dict[str, Any], RelationSpec, Iterable[Union[str, Dict[str, Any], RelationSpec]]]

# Operators whose operand is cast to the field type.
_COMPARISON_OPERATORS = {"$eq", "$ne", "$gt", "$gte", "$lt", "$lte"}


class QueryTranslator:
    """
    Translates query-string parameters for one resource.

    Stateless between calls; a translator can serve concurrent requests.
    """

    def __init__(
        self,
        schema: ResourceSchema,
        registry: Optional[Dict[str, ResourceSchema]] = None,
        config: Optional[TranslatorConfig] = None,
    ):
        """
        Initialize query translator.

        Args:
            schema: Resource being queried
            registry: Schemas of every collection, for relation expansion
            config: Translator settings; defaults to the resource's own
                settings, then to ``TranslatorConfig()``
        """
        self.schema = schema
        self.registry = registry if registry is not None else RESOURCES
        self.config = config or schema.translator_config or TranslatorConfig()

    def build(
        self,
        params: Dict[str, Any],
        populate: PopulateArg = None,
        base_filter: Optional[Dict[str, Any]] = None,
    ) -> Tuple[QueryDescriptor, PageWindow]:
        """
        Build the windowed query for a request.

        Args:
            params: Parsed query-string parameters
            populate: Relation(s) to expand in each result document
            base_filter: Store-native conditions forced on top of the
                request's filter (e.g. a parent id from the route)

        Returns:
            Tuple of (descriptor, page window)

        Raises:
            QueryExecutionError: If a filter value cannot be cast
        """
        draft, reserved = split_reserved(params, self.config.reserved_fields)

        predicate = self.build_filter(draft)
        if base_filter:
            predicate.update(base_filter)

        window = parse_page_window(reserved.get("page"), reserved.get("limit"), self.config)

        descriptor = (
            QueryDescriptor(collection=self.schema.collection)
            .where(predicate)
            .select(self.build_projection(reserved.get("select")))
            .order_by(self.build_sort(reserved.get("sort")))
            .window(window.start_index, window.limit)
        )
        descriptor = self.expand(descriptor, populate)

        logger.debug("Translated %s query: %s", self.schema.collection, descriptor)
        return descriptor, window

    def expand(self, descriptor: QueryDescriptor, populate: PopulateArg) -> QueryDescriptor:
        """
        Add relation expansions to a descriptor.

        Raises:
            ValueError: If a relation is not declared on the resource
        """
        for spec in _as_specs(populate):
            descriptor = descriptor.expand(self.schema.resolve_relation(spec, self.registry))
        return descriptor

    def build_filter(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rewrite operator tokens and cast values to the declared field types.

        Every top-level name is a field; store operators such as ``$where``
        or ``$or`` are only accepted through ``base_filter``.

        Raises:
            InvalidIdError: If an object id value is malformed
            QueryExecutionError: If a name is a store operator or a value
                cannot be cast
        """
        if self.config.operator_rewrite == "textual":
            rewritten = rewrite_operators_text(draft, self.config.operators)
        else:
            rewritten = rewrite_operators(draft, self.config.operators)

        operators = [field for field in rewritten if is_operator(field)]
        if operators:
            raise QueryExecutionError(
                f"Unsupported filter field: {', '.join(operators)}", query=rewritten
            )

        try:
            return {field: self._cast_condition(field, value) for field, value in rewritten.items()}
        except InvalidIdError:
            raise
        except ValueError as e:
            raise QueryExecutionError(f"Invalid filter value: {e}", query=rewritten) from e

    def build_projection(self, select: Optional[str]) -> Optional[Dict[str, int]]:
        """
        Projection for a comma-separated ``select`` list.

        Named fields are included (identity always comes along); ``-field``
        excludes instead. Hidden fields are excluded unless named.

        Raises:
            QueryExecutionError: If inclusions and exclusions are mixed
        """
        hidden = {name: 0 for name in self.schema.hidden_fields}
        fields = parse_field_list(select)
        if not fields:
            return hidden or None

        includes = {f: 1 for f in fields if not f.startswith("-")}
        # Identity is always returned
        excludes = {f[1:]: 0 for f in fields if f.startswith("-") and f[1:] not in ("", "_id")}

        if includes:
            if excludes:
                raise QueryExecutionError(
                    "Projection cannot mix inclusion and exclusion",
                    query={"select": select},
                )
            return includes

        return {**hidden, **excludes} or None

    def build_sort(self, sort: Optional[str]) -> Tuple[Tuple[str, int], ...]:
        """Sort keys for a comma-separated ``sort`` list; ``-`` means descending."""
        fields = parse_field_list(sort)
        if not fields:
            return tuple(self.config.default_sort)

        keys: List[Tuple[str, int]] = []
        seen = set()
        for field in fields:
            direction = -1 if field.startswith("-") else 1
            name = field.lstrip("-+")
            if name and name not in seen:
                seen.add(name)
                keys.append((name, direction))
        return tuple(keys)

    def _cast_condition(self, field: str, value: Any) -> Any:
        field_type = self.schema.field_type(field)
        if isinstance(value, dict):
            return {
                key: self._cast_operand(key, operand, field_type) if is_operator(key) else operand
                for key, operand in value.items()
            }
        if isinstance(value, list):
            return [TypeMapper.cast(item, field_type) for item in value]
        return TypeMapper.cast(value, field_type)

    def _cast_operand(self, operator: str, operand: Any, field_type: str) -> Any:
        if operator in LIST_OPERATORS:
            if isinstance(operand, str):
                operand = [item for item in operand.split(",") if item != ""]
            if isinstance(operand, list):
                return [TypeMapper.cast(item, field_type) for item in operand]
            return operand
        if operator == "$exists":
            return TypeMapper.cast(operand, "boolean")
        if operator in _COMPARISON_OPERATORS:
            if isinstance(operand, list):
                return [TypeMapper.cast(item, field_type) for item in operand]
            return TypeMapper.cast(operand, field_type)
        return operand


def _as_specs(populate: PopulateArg) -> List[RelationSpec]:
    if populate is None:
        return []
    if isinstance(populate, (str, dict, RelationSpec)):
        return [RelationSpec.coerce(populate)]
    return [RelationSpec.coerce(item) for item in populate]
