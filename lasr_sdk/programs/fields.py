"""
lasr_sdk.programs.fields
========================

Shared machinery for field-level update operations.

A field update is one closed variant: ``(scope, field, action, payload)``.
Each (scope, field) pair registers the actions it supports in an explicit
table; every action entry carries two plain functions:

- ``shape``  : raw caller value -> canonical immutable payload (or MalformedInput)
- ``encode`` : canonical payload -> JSON value

Wire shape of a single field value::

    {<field>: {<action>: <encoded payload>}}

so a decoder can dispatch on the (field, action) pair without inspecting the
payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from ..address import AddressOrNamespace, as_address
from ..amount import U256
from ..errors import InvalidAddress, InvalidAmount, MalformedInput, UnsupportedAction


class Action(str, Enum):
    VALUE = "value"
    INSERT = "insert"
    EXTEND = "extend"
    REMOVE = "remove"
    PUSH = "push"
    POP = "pop"
    REVOKE = "revoke"


@dataclass(frozen=True)
class ActionSpec:
    shape: Callable[[Any], Any]
    encode: Callable[[Any], Any]


# (scope, field) -> {action: spec}
_REGISTRY: Dict[Tuple[str, str], Dict[Action, ActionSpec]] = {}


def register(scope: str, field: str, specs: Mapping[Action, ActionSpec]) -> None:
    _REGISTRY[(scope, field)] = dict(specs)


def allowed_actions(scope: str, field: str) -> Tuple[str, ...]:
    specs = _REGISTRY.get((scope, field))
    if specs is None:
        raise MalformedInput(f"unknown {scope} field {field!r}")
    return tuple(a.value for a in specs)


def _field_key(field: Any) -> str:
    return field.value if isinstance(field, Enum) else str(field)


def _spec(scope: str, field: str, action: Any) -> Tuple[Action, ActionSpec]:
    specs = _REGISTRY.get((scope, field))
    if specs is None:
        raise MalformedInput(f"unknown {scope} field {field!r}")
    name = _field_key(action)
    try:
        act = Action(name)
    except ValueError:
        act = None
    if act is None or act not in specs:
        raise UnsupportedAction(
            message=f"action not supported for {scope} field {field!r}",
            target=f"{scope}.{field}",
            action=name,
            allowed=tuple(a.value for a in specs),
        )
    return act, specs[act]


@dataclass(frozen=True)
class FieldValue:
    """One mutation of one field. Build with `FieldValue.build`."""

    scope: str
    field: str
    action: Action
    payload: Any

    @classmethod
    def build(cls, scope: str, field: Any, action: Any, value: Any = None) -> "FieldValue":
        key = _field_key(field)
        act, spec = _spec(scope, key, action)
        return cls(scope=scope, field=key, action=act, payload=spec.shape(value))

    def to_json(self) -> Dict[str, Any]:
        _, spec = _spec(self.scope, self.field, self.action)
        return {self.field: {self.action.value: spec.encode(self.payload)}}


# ---------------------------------------------------------------------------
# Payload shapes
# ---------------------------------------------------------------------------


def _maybe_json(value: Any) -> Any:
    """Decode JSON text; anything else passes through."""
    if isinstance(value, (str, bytes, bytearray)):
        try:
            return json.loads(value)
        except ValueError as e:
            raise MalformedInput("payload is not valid JSON") from e
    return value


def _stringify(v: Any) -> str:
    if isinstance(v, str):
        return v
    return json.dumps(v, separators=(",", ":"), ensure_ascii=False)


def shape_str_map(value: Any) -> Tuple[Tuple[str, str], ...]:
    """Mapping (or JSON object text) -> ordered (key, value) string pairs."""
    obj = _maybe_json(value)
    if not isinstance(obj, Mapping):
        raise MalformedInput("payload must be an object of string values")
    return tuple((str(k), _stringify(v)) for k, v in obj.items())


def encode_str_map(pairs: Tuple[Tuple[str, str], ...]) -> Dict[str, str]:
    return dict(pairs)


def _pair(value: Any, what: str) -> Tuple[Any, Any]:
    obj = value
    if isinstance(value, (str, bytes, bytearray)):
        obj = _maybe_json(value)
    if isinstance(obj, Mapping) and len(obj) == 1:
        return next(iter(obj.items()))
    if isinstance(obj, (list, tuple)) and len(obj) == 2:
        return obj[0], obj[1]
    raise MalformedInput(f"{what} must be a [key, value] pair or a single-entry object")


def shape_str_entry(value: Any) -> Tuple[str, str]:
    k, v = _pair(value, "insert payload")
    return str(k), _stringify(v)


def encode_pair(pair: Tuple[Any, Any]) -> List[Any]:
    k, v = pair
    return [k, list(v) if isinstance(v, tuple) else v]


def shape_key(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise MalformedInput("remove payload must be a non-empty key")
    return value


def encode_plain(value: Any) -> Any:
    return value


def _u256_hex(value: Any) -> str:
    try:
        return U256.parse(value).to_hex()
    except InvalidAmount as e:
        raise MalformedInput(f"not a U256 value: {value!r}") from e


def _seq(value: Any, what: str) -> Sequence[Any]:
    obj = value
    if isinstance(value, (bytes, bytearray)) or (
        isinstance(value, str) and value.lstrip().startswith("[")
    ):
        obj = _maybe_json(value)
    if not isinstance(obj, (list, tuple)):
        raise MalformedInput(f"{what} must be a list")
    return obj


def shape_u256_list(value: Any) -> Tuple[str, ...]:
    return tuple(_u256_hex(v) for v in _seq(value, "id payload"))


def encode_list(items: Tuple[Any, ...]) -> List[Any]:
    return list(items)


def shape_u256(value: Any) -> str:
    return _u256_hex(value)


def shape_indexed_u256(value: Any) -> Tuple[int, str]:
    idx, v = _pair(value, "insert payload")
    if isinstance(idx, bool) or not isinstance(idx, int) or idx < 0:
        raise MalformedInput("insert index must be a non-negative integer")
    return idx, _u256_hex(v)


def shape_nothing(value: Any) -> None:
    if value is not None:
        raise MalformedInput("this action takes no payload")
    return None


def shape_status(value: Any) -> str:
    if value not in ("locked", "free"):
        raise MalformedInput("status must be 'locked' or 'free'")
    return value


def _spender(value: Any) -> str:
    try:
        return as_address(value).value
    except InvalidAddress as e:
        raise MalformedInput(f"spender is not an address: {value!r}") from e


def _amounts(value: Any) -> Tuple[str, ...]:
    items = value if isinstance(value, (list, tuple)) else [value]
    return tuple(_u256_hex(v) for v in items)


ApprovalMap = Tuple[Tuple[str, Tuple[str, ...]], ...]


def shape_approvals_map(value: Any) -> ApprovalMap:
    obj = _maybe_json(value)
    if not isinstance(obj, Mapping):
        raise MalformedInput("approvals payload must be an object of spender -> amounts")
    return tuple((_spender(k), _amounts(v)) for k, v in obj.items())


def encode_approvals_map(m: ApprovalMap) -> Dict[str, List[str]]:
    return {k: list(v) for k, v in m}


def shape_approval_entry(value: Any) -> Tuple[str, Tuple[str, ...]]:
    k, v = _pair(value, "approval payload")
    return _spender(k), _amounts(v)


def shape_approvals_list(value: Any) -> Tuple[ApprovalMap, ...]:
    obj = _maybe_json(value)
    if isinstance(obj, Mapping):
        obj = [obj]
    if not isinstance(obj, (list, tuple)):
        raise MalformedInput("approvals extend payload must be a list of objects")
    return tuple(shape_approvals_map(m) for m in obj)


def encode_approvals_list(ms: Tuple[ApprovalMap, ...]) -> List[Dict[str, List[str]]]:
    return [encode_approvals_map(m) for m in ms]


def shape_spender(value: Any) -> str:
    return _spender(value)


def _linked(value: Any) -> str:
    try:
        return AddressOrNamespace.parse(value).to_json()
    except InvalidAddress as e:
        raise MalformedInput(f"linked program is not an address: {value!r}") from e


def shape_linked(value: Any) -> str:
    return _linked(value)


def shape_linked_list(value: Any) -> Tuple[str, ...]:
    return tuple(_linked(v) for v in _seq(value, "linked programs payload"))


# Data/metadata maps are identical for tokens and programs
STR_MAP_ACTIONS: Dict[Action, ActionSpec] = {
    Action.VALUE: ActionSpec(shape_str_map, encode_str_map),
    Action.INSERT: ActionSpec(shape_str_entry, encode_pair),
    Action.EXTEND: ActionSpec(shape_str_map, encode_str_map),
    Action.REMOVE: ActionSpec(shape_key, encode_plain),
}


__all__ = [
    "Action",
    "ActionSpec",
    "FieldValue",
    "register",
    "allowed_actions",
    "STR_MAP_ACTIONS",
]
