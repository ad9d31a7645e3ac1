from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Mapping


def to_jsonable(obj: Any) -> Any:
    """Convert domain objects to a JSON-serializable structure.

    Handles:
    - Basic types (str, int, float, bool, None)
    - Enums (by value)
    - Collections (list, tuple, mappings)
    - Dataclasses (field by field, in declaration order)
    - Exceptions (as their message)

    Args:
        obj: Any Python object

    Returns:
        A JSON-serializable version of the object
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        if isinstance(obj, Enum):
            return obj.value
        return obj
    elif isinstance(obj, Enum):
        return to_jsonable(obj.value)
    elif isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    elif isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    elif is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, BaseException):
        return str(obj)
    else:
        return str(obj)
