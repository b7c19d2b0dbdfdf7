import json
from dataclasses import is_dataclass, asdict, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Type, TypeVar, Union, get_args, get_origin, get_type_hints
from uuid import uuid4

from jobtrack_backend.modules.errors import ValidationFailure


def new_entity_id() -> str:
    """Random id for a new record. Unique within a session regardless of timing."""
    return str(uuid4())


def to_local_naive(value: datetime) -> datetime:
    """Local wall-clock time without tzinfo. Naive values are already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: Union[str, date]) -> datetime:
    """Parse an ISO-8601 date or timestamp, including the trailing 'Z' form browsers write.

    Timestamps with an offset are converted to local time, so every decoded
    value is naive and the calendar day is the one the user saw.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValidationFailure(f"Expected an ISO-8601 string, got {type(value).__name__}")
    try:
        return to_local_naive(datetime.fromisoformat(value.strip()))
    except ValueError:
        raise ValidationFailure(f"Invalid ISO-8601 date: {value!r}")


def parse_date(value: Union[str, date]) -> date:
    """Parse an ISO-8601 value and keep its local calendar day"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_datetime(value).date()


class DataClassJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if is_dataclass(obj):
            return asdict(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


def to_jsonable(obj: Any) -> Any:
    """Convert dataclasses, enums and dates into plain JSON types"""
    return json.loads(json.dumps(obj, cls=DataClassJSONEncoder))


T = TypeVar('T')


def _unwrap_optional(field_type):
    if get_origin(field_type) is Union:
        args = [arg for arg in get_args(field_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return field_type, False


def _decode_value(field_type, value: Any, name: str) -> Any:
    field_type, optional = _unwrap_optional(field_type)
    if value is None:
        if optional:
            return None
        raise ValidationFailure(f"Field '{name}' must not be null")

    if is_dataclass(field_type):
        if not isinstance(value, dict):
            raise ValidationFailure(f"Field '{name}' must be an object")
        return decode_dataclass(field_type, value)
    if get_origin(field_type) in (list, List):
        item_type = get_args(field_type)[0]
        if not isinstance(value, list):
            raise ValidationFailure(f"Field '{name}' must be a list")
        return [_decode_value(item_type, item, name) for item in value]
    if isinstance(field_type, type) and issubclass(field_type, Enum):
        try:
            return field_type(value)
        except ValueError:
            raise ValidationFailure(f"Invalid value for '{name}': {value!r}")
    if field_type is datetime:
        return parse_datetime(value)
    if field_type is date:
        return parse_date(value)
    if field_type is bool and not isinstance(value, bool):
        raise ValidationFailure(f"Field '{name}' must be a boolean")
    if field_type is str and not isinstance(value, str):
        raise ValidationFailure(f"Field '{name}' must be a string")
    return value


def decode_dataclass(cls: Type[T], data: Dict[str, Any]) -> T:
    """Recursively decode dictionary into dataclass instance.

    Unknown keys are ignored. Dates, enums and nested dataclasses are converted
    from their JSON form; anything that cannot be converted raises ValidationFailure.
    """
    if not is_dataclass(cls):
        return data

    hints = get_type_hints(cls)
    decoded_data = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        decoded_data[f.name] = _decode_value(hints[f.name], data[f.name], f.name)

    try:
        return cls(**decoded_data)
    except TypeError as e:
        raise ValidationFailure(f"Invalid {cls.__name__}: {e}")
