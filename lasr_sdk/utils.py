"""
Input validation helpers for program authors.

Program handlers pull loosely-typed values out of `transactionInputs` and the
account snapshot; these helpers turn "absent" into a `MissingRequiredField`
raised at the point of use.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional, TypeVar

from .errors import MalformedInput, MissingRequiredField

T = TypeVar("T")

__all__ = [
    "get_undefined_properties",
    "check_if_values_are_undefined",
    "validate",
    "validate_and_create_json_string",
]


def get_undefined_properties(props: Mapping[str, Any]) -> List[str]:
    """Names of the entries in `props` whose value is None, in input order."""
    return [k for k, v in props.items() if v is None]


def check_if_values_are_undefined(props: Mapping[str, Any], *, where: str = "") -> None:
    """Raise MissingRequiredField naming every None entry of `props`."""
    missing = get_undefined_properties(props)
    if missing:
        raise MissingRequiredField.for_fields(missing, where=where)


def validate(value: Optional[T], message: str) -> T:
    """
    Return `value` if it is truthy, else raise MissingRequiredField(message).

    Zero fails like any other falsy value, so `validate(len(ids), "minted out")`
    and `validate(quantity <= available, ...)` both guard as expected. NaN fails too.
    """
    if not value or (isinstance(value, float) and value != value):
        raise MissingRequiredField(message=message)
    return value


def validate_and_create_json_string(props: Mapping[str, Any]) -> str:
    """
    Compact JSON object text for `props`, after checking no entry is None.

    Used to build data/metadata payloads for update fields.
    """
    check_if_values_are_undefined(props)
    try:
        return json.dumps(dict(props), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MalformedInput("values must be JSON-serializable") from e
