"""
Type coercion for positional string arguments

Converts textual values (e.g. taken from a command line) into the types that a
remote procedure declares for its parameters.
"""

import json
import math
from typing import Any, Dict, List, Sequence, Union

from seam_jsonrpc.errors import CoercionError, UnknownTypeError

# Decoded JSON: None, bool, int, float, str, list or dict
JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

TYPE_TAGS = ("bit", "num", "str", "arr", "obj", "any", "nil")

_TRUTHY = {"true", "1", "yes", "on"}


def coerce(value: str, type_tag: str) -> JsonValue:
    """Convert ``value`` to the type named by ``type_tag``

    Args:
        value: Textual value
        type_tag: One of bit, num, str, arr, obj, any, nil

    Returns:
        The typed value

    Raises:
        CoercionError: ``num`` or JSON text that does not parse
        UnknownTypeError: Unrecognised type tag
    """
    if type_tag == "bit":
        return value.strip().lower() in _TRUTHY
    elif type_tag == "num":
        if "_" in value:
            raise CoercionError(f"Not a number: {value!r}")
        try:
            return int(value)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            raise CoercionError(f"Not a number: {value!r}") from None
        if not math.isfinite(number):
            raise CoercionError(f"Not a finite number: {value!r}")
        return number
    elif type_tag == "str":
        return value
    elif type_tag in ("arr", "obj", "any"):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise CoercionError(f"Invalid JSON for type {type_tag}: {value!r} ({e.msg})") from e
    elif type_tag == "nil":
        return None
    else:
        raise UnknownTypeError(type_tag)


def coerce_all(values: Sequence[str], parameters: Sequence) -> List[JsonValue]:
    """Coerce ``values`` positionally against ParameterDescription objects"""
    return [coerce(value, param.type) for value, param in zip(values, parameters)]
