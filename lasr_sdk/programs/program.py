"""
Program account update fields.

| Field          | Actions                       |
|----------------|-------------------------------|
| data           | value, insert, extend, remove |
| metadata       | value, insert, extend, remove |
| linkedPrograms | value, insert, extend, remove |

Linked programs are addresses (or namespace tokens); the other fields are
string maps with the same payload shapes as token data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Tuple, Union

from ..address import AddressLike, AddressOrNamespace
from ..errors import MalformedInput
from .fields import (STR_MAP_ACTIONS, Action, ActionSpec, FieldValue,
                     allowed_actions, encode_list, encode_plain, register,
                     shape_linked, shape_linked_list)

SCOPE = "program"


class ProgramField(str, Enum):
    DATA = "data"
    METADATA = "metadata"
    LINKED_PROGRAMS = "linkedPrograms"

    def to_json(self) -> str:
        return self.value


register(SCOPE, ProgramField.DATA.value, STR_MAP_ACTIONS)
register(SCOPE, ProgramField.METADATA.value, STR_MAP_ACTIONS)
register(
    SCOPE,
    ProgramField.LINKED_PROGRAMS.value,
    {
        Action.VALUE: ActionSpec(shape_linked_list, encode_list),
        Action.INSERT: ActionSpec(shape_linked, encode_plain),
        Action.EXTEND: ActionSpec(shape_linked_list, encode_list),
        Action.REMOVE: ActionSpec(shape_linked, encode_plain),
    },
)


def _program_field(field: Union[str, ProgramField]) -> ProgramField:
    try:
        return ProgramField(field)
    except ValueError as e:
        raise MalformedInput(
            f"unknown program field {field!r}; expected one of {[f.value for f in ProgramField]}"
        ) from e


@dataclass(frozen=True)
class ProgramUpdateField:
    field: ProgramField
    value: FieldValue

    def __post_init__(self) -> None:
        if self.value.scope != SCOPE or self.value.field != self.field.value:
            raise MalformedInput(
                f"value for {self.value.scope}.{self.value.field} cannot update program.{self.field.value}"
            )

    @property
    def action(self) -> Action:
        return self.value.action

    def to_json(self) -> Dict[str, Any]:
        return {"field": self.field.value, "value": self.value.to_json()}


def build_program_update_field(
    *, field: Union[str, ProgramField], action: Union[str, Action], value: Any = None
) -> ProgramUpdateField:
    """
    Build one program field update.

    Raises:
        UnsupportedAction: `action` is not allowed for `field` (nothing is built).
        MalformedInput: unknown field, or `value` does not fit the action.
    """
    pf = _program_field(field)
    return ProgramUpdateField(pf, FieldValue.build(SCOPE, pf, action, value))


def program_field_actions(field: Union[str, ProgramField]) -> Tuple[str, ...]:
    return allowed_actions(SCOPE, _program_field(field).value)


@dataclass(frozen=True, init=False)
class ProgramUpdate:
    """Ordered field updates applied to the program account `account`."""

    account: AddressOrNamespace
    updates: Tuple[ProgramUpdateField, ...]

    kind: ClassVar[str] = "programUpdate"

    def __init__(self, account: AddressLike, updates: Iterable[ProgramUpdateField]) -> None:
        object.__setattr__(self, "account", AddressOrNamespace.parse(account))
        object.__setattr__(self, "updates", tuple(updates))

    def to_json(self) -> Dict[str, Any]:
        return {
            "account": self.account.to_json(),
            "updates": [u.to_json() for u in self.updates],
        }


__all__ = [
    "ProgramField",
    "ProgramUpdateField",
    "ProgramUpdate",
    "build_program_update_field",
    "program_field_actions",
]
