"""
Conversion between typed in-memory values and their JSON representation.

Every supported ValueType has a ValueCodec backed by a pydantic TypeAdapter.
Encoding validates the value against the codec's type first, so a value is
narrowed (for example ``"5"`` stored as ``integer`` becomes ``5``) before it
reaches disk. Decoding applies the same validation to what was read.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import (
    AfterValidator,
    BeforeValidator,
    FiniteFloat,
    StrictBool,
    StrictStr,
    TypeAdapter,
    ValidationError,
)
from pydantic_core import PydanticSerializationError

from thingstore.core.exceptions import UnknownValueTypeError, ValueConversionError
from thingstore.domain.models import Absent, ValueType

TypeTag = Union[ValueType, str]


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    return value


def _reject_non_finite(value: Any) -> Any:
    # JSON has no representation for inf or nan, at any nesting depth.
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{value!r} cannot be stored as JSON")
    if isinstance(value, dict):
        for item in value.values():
            _reject_non_finite(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _reject_non_finite(item)
    return value


def _parse_percentage(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            text = text[:-1].strip()
        try:
            value = float(text)
        except ValueError:
            raise ValueError(f"{value!r} is not a percentage")
    if isinstance(value, bool):
        raise ValueError("booleans are not percentages")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"{value!r} is not a percentage")
        return min(100.0, max(0.0, float(value)))
    return value


JsonValue = Annotated[Any, AfterValidator(_reject_non_finite)]
Number = Annotated[Union[int, FiniteFloat], BeforeValidator(_reject_bool)]
Integer = Annotated[int, BeforeValidator(_reject_bool)]
Percentage = Annotated[FiniteFloat, BeforeValidator(_parse_percentage)]


class ValueCodec:
    """Encode/decode pair for one ValueType."""

    def __init__(self, value_type: ValueType, python_type: Any, default: Any = None):
        self.value_type = value_type
        self.default = default
        self._adapter = TypeAdapter(python_type)

    def to_json(self, value: Any) -> Any:
        if value is None:
            return None
        try:
            validated = self._adapter.validate_python(value)
            return self._adapter.dump_python(validated, mode="json")
        except ValidationError as e:
            raise ValueConversionError(self.value_type.value, _first_error(e)) from e
        except PydanticSerializationError as e:
            raise ValueConversionError(self.value_type.value, str(e)) from e

    def from_json(self, raw: Any) -> Any:
        if isinstance(raw, Absent) or raw is None:
            return self.default
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            raise ValueConversionError(self.value_type.value, _first_error(e)) from e

    def __repr__(self) -> str:
        return f"ValueCodec({self.value_type.value})"


def _first_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    return errors[0].get("msg", str(error))


_CODECS: Dict[ValueType, ValueCodec] = {
    ValueType.MIXED: ValueCodec(ValueType.MIXED, JsonValue),
    ValueType.STRING: ValueCodec(ValueType.STRING, StrictStr),
    ValueType.NUMBER: ValueCodec(ValueType.NUMBER, Number),
    ValueType.INTEGER: ValueCodec(ValueType.INTEGER, Integer),
    ValueType.BOOLEAN: ValueCodec(ValueType.BOOLEAN, StrictBool),
    ValueType.ARRAY: ValueCodec(ValueType.ARRAY, List[JsonValue]),
    ValueType.OBJECT: ValueCodec(ValueType.OBJECT, Dict[str, JsonValue]),
    ValueType.DATETIME: ValueCodec(ValueType.DATETIME, datetime),
    ValueType.DURATION: ValueCodec(ValueType.DURATION, timedelta),
    ValueType.PERCENTAGE: ValueCodec(ValueType.PERCENTAGE, Percentage),
}


def get_codec(type_tag: Optional[TypeTag] = None) -> ValueCodec:
    """Look up the codec for a tag. ``None`` selects the ``mixed`` passthrough."""
    if type_tag is None:
        return _CODECS[ValueType.MIXED]
    try:
        value_type = ValueType(type_tag)
    except ValueError:
        raise UnknownValueTypeError(str(type_tag)) from None
    return _CODECS[value_type]


def to_json(type_tag: Optional[TypeTag], value: Any) -> Any:
    return get_codec(type_tag).to_json(value)


def from_json(type_tag: Optional[TypeTag], raw: Any) -> Any:
    """
    Decode a stored value. ``ABSENT`` decodes to the codec default (``None``).
    """
    return get_codec(type_tag).from_json(raw)
