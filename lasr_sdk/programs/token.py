"""
Token update fields.

| Field      | Actions                               |
|------------|---------------------------------------|
| data       | value, insert, extend, remove         |
| metadata   | value, insert, extend, remove         |
| tokenIds   | value, push, extend, insert, pop      |
| status     | value                                 |
| approvals  | value, insert, extend, remove, revoke |

Payloads per action:

- data/metadata: ``value``/``extend`` take an object of strings (or its JSON
  text), ``insert`` a ``[key, value]`` pair, ``remove`` a key.
- tokenIds: ``value``/``extend`` a list of ids, ``push`` one id, ``insert`` an
  ``[index, id]`` pair, ``pop`` nothing. Ids are on-chain U256 values and are
  emitted as 64-digit hex.
- status: ``"locked"`` or ``"free"``.
- approvals: ``value`` an object spender -> amounts, ``insert``/``remove`` a
  ``[spender, amounts]`` pair, ``extend`` a list of such objects, ``revoke`` a
  spender address.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Tuple, Union

from ..address import AddressLike, AddressOrNamespace
from ..errors import MalformedInput
from .fields import (STR_MAP_ACTIONS, Action, ActionSpec, FieldValue,
                     allowed_actions, encode_approvals_list,
                     encode_approvals_map, encode_list, encode_pair,
                     encode_plain, register, shape_approval_entry,
                     shape_approvals_list, shape_approvals_map,
                     shape_indexed_u256, shape_nothing, shape_spender,
                     shape_status, shape_u256, shape_u256_list)

SCOPE = "token"


class TokenField(str, Enum):
    APPROVALS = "approvals"
    DATA = "data"
    METADATA = "metadata"
    STATUS = "status"
    TOKEN_IDS = "tokenIds"

    def to_json(self) -> str:
        return self.value


register(SCOPE, TokenField.DATA.value, STR_MAP_ACTIONS)
register(SCOPE, TokenField.METADATA.value, STR_MAP_ACTIONS)
register(
    SCOPE,
    TokenField.TOKEN_IDS.value,
    {
        Action.VALUE: ActionSpec(shape_u256_list, encode_list),
        Action.PUSH: ActionSpec(shape_u256, encode_plain),
        Action.EXTEND: ActionSpec(shape_u256_list, encode_list),
        Action.INSERT: ActionSpec(shape_indexed_u256, encode_pair),
        Action.POP: ActionSpec(shape_nothing, encode_plain),
    },
)
register(SCOPE, TokenField.STATUS.value, {Action.VALUE: ActionSpec(shape_status, encode_plain)})
register(
    SCOPE,
    TokenField.APPROVALS.value,
    {
        Action.VALUE: ActionSpec(shape_approvals_map, encode_approvals_map),
        Action.INSERT: ActionSpec(shape_approval_entry, encode_pair),
        Action.EXTEND: ActionSpec(shape_approvals_list, encode_approvals_list),
        Action.REMOVE: ActionSpec(shape_approval_entry, encode_pair),
        Action.REVOKE: ActionSpec(shape_spender, encode_plain),
    },
)


def _token_field(field: Union[str, TokenField]) -> TokenField:
    try:
        return TokenField(field)
    except ValueError as e:
        raise MalformedInput(
            f"unknown token field {field!r}; expected one of {[f.value for f in TokenField]}"
        ) from e


@dataclass(frozen=True)
class TokenUpdateField:
    """A token field name paired with exactly one operation on that field."""

    field: TokenField
    value: FieldValue

    def __post_init__(self) -> None:
        if self.value.scope != SCOPE or self.value.field != self.field.value:
            raise MalformedInput(
                f"value for {self.value.scope}.{self.value.field} cannot update token.{self.field.value}"
            )

    @property
    def action(self) -> Action:
        return self.value.action

    def to_json(self) -> Dict[str, Any]:
        return {"field": self.field.value, "value": self.value.to_json()}


def build_token_update_field(
    *, field: Union[str, TokenField], action: Union[str, Action], value: Any = None
) -> TokenUpdateField:
    """
    Build one token field update.

    Raises:
        UnsupportedAction: `action` is not allowed for `field` (nothing is built).
        MalformedInput: unknown field, or `value` does not fit the action.
    """
    tf = _token_field(field)
    return TokenUpdateField(tf, FieldValue.build(SCOPE, tf, action, value))


def token_field_actions(field: Union[str, TokenField]) -> Tuple[str, ...]:
    return allowed_actions(SCOPE, _token_field(field).value)


@dataclass(frozen=True, init=False)
class TokenUpdate:
    """
    Ordered field updates for one token.

    `account` is the account whose token is updated, `token` the token
    (program) address.
    """

    account: AddressOrNamespace
    token: AddressOrNamespace
    updates: Tuple[TokenUpdateField, ...]

    kind: ClassVar[str] = "tokenUpdate"

    def __init__(
        self,
        account: AddressLike,
        token: AddressLike,
        updates: Iterable[TokenUpdateField],
    ) -> None:
        object.__setattr__(self, "account", AddressOrNamespace.parse(account))
        object.__setattr__(self, "token", AddressOrNamespace.parse(token))
        object.__setattr__(self, "updates", tuple(updates))

    def to_json(self) -> Dict[str, Any]:
        return {
            "account": self.account.to_json(),
            "token": self.token.to_json(),
            "updates": [u.to_json() for u in self.updates],
        }


__all__ = [
    "TokenField",
    "TokenUpdateField",
    "TokenUpdate",
    "build_token_update_field",
    "token_field_actions",
]
