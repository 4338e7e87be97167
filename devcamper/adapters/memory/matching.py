"""
Filter evaluation, sorting and projection over plain dict documents.

Follows MongoDB query semantics closely enough for the operators the
translator produces; anything else is rejected the way the store would.
"""

import math
import re
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from devcamper.core.errors import QueryExecutionError

_ORDERING = {"$gt", "$gte", "$lt", "$lte"}


def matches(document: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    """Check whether a document satisfies a store-native filter."""
    for key, condition in filter.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in _clauses(key, condition)):
                return False
        elif key == "$or":
            if not any(matches(document, sub) for sub in _clauses(key, condition)):
                return False
        elif key == "$nor":
            if any(matches(document, sub) for sub in _clauses(key, condition)):
                return False
        elif key.startswith("$"):
            raise QueryExecutionError(f"unknown top level operator: {key}", query=filter)
        elif not _match_field(document, key, condition):
            return False
    return True


def _clauses(operator: str, condition: Any) -> List[Dict[str, Any]]:
    if not isinstance(condition, list) or not all(isinstance(c, dict) for c in condition):
        raise QueryExecutionError(f"{operator} must be an array of objects")
    return condition


def _match_field(document: Dict[str, Any], path: str, condition: Any) -> bool:
    values = resolve_path(document, path)
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        return all(
            _apply_operator(op, operand, values, condition)
            for op, operand in condition.items()
            if op != "$options"
        )
    return _equals_any(values, condition)


def resolve_path(document: Any, path: str) -> List[Any]:
    """
    Values reachable at a dotted path.

    Arrays along the path fan out; an array at the end contributes itself
    and each of its elements. Missing paths resolve to an empty list.
    """
    current = [document]
    for part in path.split("."):
        found = []
        for value in current:
            if isinstance(value, dict):
                if part in value:
                    found.append(value[part])
            elif isinstance(value, list):
                found.extend(item[part] for item in value if isinstance(item, dict) and part in item)
        current = found

    values: List[Any] = []
    for value in current:
        values.append(value)
        if isinstance(value, list):
            values.extend(value)
    return values


def _equals_any(values: List[Any], expected: Any) -> bool:
    if expected is None and not values:
        return True
    return any(value == expected for value in values)


def _apply_operator(op: str, operand: Any, values: List[Any], condition: Dict[str, Any]) -> bool:
    if op == "$eq":
        return _equals_any(values, operand)
    if op == "$ne":
        return not _equals_any(values, operand)
    if op in _ORDERING:
        return any(_compare(value, operand, op) for value in values if not isinstance(value, list))
    if op in ("$in", "$nin"):
        if not isinstance(operand, list):
            raise QueryExecutionError(f"{op} needs an array", query=condition)
        found = any(_equals_any(values, item) for item in operand)
        return found if op == "$in" else not found
    if op == "$exists":
        return bool(values) == bool(operand)
    if op == "$regex":
        flags = re.IGNORECASE if "i" in str(condition.get("$options", "")) else 0
        try:
            pattern = re.compile(str(operand), flags)
        except re.error as e:
            raise QueryExecutionError(f"invalid regex: {e}", query=condition) from e
        return any(isinstance(value, str) and pattern.search(value) for value in values)
    if op == "$geoWithin":
        return _geo_within(values, operand, condition)
    raise QueryExecutionError(f"unknown operator: {op}", query=condition)


def _compare(value: Any, operand: Any, op: str) -> bool:
    if value is None or operand is None:
        return False
    try:
        if op == "$gt":
            return value > operand
        if op == "$gte":
            return value >= operand
        if op == "$lt":
            return value < operand
        return value <= operand
    except TypeError:
        # Different types never match, as with BSON type bracketing
        return False


def _geo_within(values: List[Any], operand: Any, condition: Dict[str, Any]) -> bool:
    if not isinstance(operand, dict) or "$centerSphere" not in operand:
        raise QueryExecutionError("$geoWithin supports $centerSphere only", query=condition)
    try:
        (center_lng, center_lat), radius = operand["$centerSphere"]
        center_lng, center_lat, radius = float(center_lng), float(center_lat), float(radius)
    except (TypeError, ValueError) as e:
        raise QueryExecutionError("malformed $centerSphere", query=condition) from e

    for value in values:
        point = _point(value)
        if point is None:
            continue
        if _angular_distance(center_lng, center_lat, *point) <= radius:
            return True
    return False


def _point(value: Any) -> Optional[Tuple[float, float]]:
    coordinates = value.get("coordinates") if isinstance(value, dict) else value
    if (
        isinstance(coordinates, list)
        and len(coordinates) == 2
        and all(isinstance(c, (int, float)) for c in coordinates)
    ):
        return float(coordinates[0]), float(coordinates[1])
    return None


def _angular_distance(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle distance in radians (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(a)))


def sort_documents(
    documents: List[Dict[str, Any]], sort: Tuple[Tuple[str, int], ...]
) -> List[Dict[str, Any]]:
    """Sort by the given keys in priority order; ties keep insertion order."""
    ordered = list(documents)
    for field, direction in reversed(sort):
        ordered.sort(key=lambda doc: _sort_key(doc, field), reverse=direction < 0)
    return ordered


def _sort_key(document: Dict[str, Any], field: str) -> Tuple[int, Any]:
    values = resolve_path(document, field)
    value = values[0] if values else None
    # BSON comparison order between types
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (6, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, dict):
        return (3, str(value))
    if isinstance(value, list):
        return (4, str(value))
    if isinstance(value, ObjectId):
        return (5, str(value))
    if isinstance(value, datetime):
        aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return (7, aware.timestamp())
    return (8, str(value))


def project(document: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    """Apply an inclusion or exclusion projection; ``_id`` stays unless excluded."""
    if not projection:
        return document

    include = [path for path, flag in projection.items() if flag and path != "_id"]
    if include:
        result: Dict[str, Any] = {}
        if projection.get("_id", 1) and "_id" in document:
            result["_id"] = document["_id"]
        for path in include:
            _copy_path(document, result, path)
        return result

    result = deepcopy(document)
    for path, flag in projection.items():
        if not flag:
            _drop_path(result, path)
    return result


def _copy_path(source: Dict[str, Any], target: Dict[str, Any], path: str) -> None:
    head, _, rest = path.partition(".")
    if head not in source:
        return
    if not rest:
        target[head] = deepcopy(source[head])
    elif isinstance(source[head], dict):
        child = target.setdefault(head, {})
        _copy_path(source[head], child, rest)


def _drop_path(document: Dict[str, Any], path: str) -> None:
    head, _, rest = path.partition(".")
    if not rest:
        document.pop(head, None)
    elif isinstance(document.get(head), dict):
        _drop_path(document[head], rest)
