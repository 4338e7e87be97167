"""
Type mapping utilities for casting query-string values to field types.
"""

from datetime import datetime
from typing import Any, Dict, Type

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import TypeAdapter, ValidationError

from devcamper.core.errors import InvalidIdError


class TypeMapper:
    """Maps normalized field types to Python types and casts raw values."""

    # Normalized type names used by resource schemas. Array fields declare
    # the type of their elements, since filters compare elements.
    COMMON_TYPE_MAP: Dict[str, Type] = {
        "string": str,
        "number": float,
        "integer": int,
        "boolean": bool,
        "date": datetime,
        "datetime": datetime,
        "objectid": ObjectId,
    }

    _adapters: Dict[str, TypeAdapter] = {}

    @classmethod
    def get_python_type(cls, field_type: str) -> Type:
        """
        Get Python type for a normalized field type.

        Args:
            field_type: Normalized type string

        Returns:
            Python type class, or ``Any`` for unknown types
        """
        return cls.COMMON_TYPE_MAP.get(field_type.lower(), Any)

    @classmethod
    def cast(cls, value: Any, field_type: str) -> Any:
        """
        Cast a raw value to a field type.

        Strings are cast; values that already have the target type pass
        through. Unknown types and ``string`` leave the value untouched.

        Raises:
            InvalidIdError: If an object id is malformed
            ValueError: If any other value cannot be cast
        """
        python_type = cls.get_python_type(field_type)
        if python_type is Any or python_type is str or isinstance(value, python_type):
            return value

        if python_type is ObjectId:
            try:
                return ObjectId(value)
            except (InvalidId, TypeError) as e:
                raise InvalidIdError(value) from e

        try:
            return cls._adapter(field_type).validate_python(value)
        except ValidationError as e:
            raise ValueError(f"'{value}' is not a valid {field_type}") from e

    @classmethod
    def _adapter(cls, field_type: str) -> TypeAdapter:
        key = field_type.lower()
        if key not in cls._adapters:
            cls._adapters[key] = TypeAdapter(cls.COMMON_TYPE_MAP[key])
        return cls._adapters[key]
