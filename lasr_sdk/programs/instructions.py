"""
lasr_sdk.programs.instructions
==============================

Immutable instruction values and their wire encoding.

An instruction is emitted as a single-key object whose key is the kind::

    {"create":   {programNamespace, programId, programOwner, totalSupply,
                  initializedSupply, distribution}}
    {"update":   {updates}}
    {"transfer": {token, from, to, amount, ids}}
    {"burn":     {caller, programId, token, from, amount, ids}}
    {"log":      {}}

Amounts and ids are already-encoded on-chain values and are emitted as
``0x`` 64-digit hex; ``amount`` is ``null`` when the instruction moves ids only.
Use the functions in `lasr_sdk.programs.builders` to construct these from raw
call values; the constructors here only normalize types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Union

from ..address import Address, AddressLike, AddressOrNamespace, as_address
from ..amount import U256
from ..errors import MalformedInput
from .token import TokenUpdateField
from .updates import TokenOrProgramUpdate


class InstructionKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    TRANSFER = "transfer"
    BURN = "burn"
    LOG = "log"


def _supply_text(value: Any) -> str:
    return value.to_hex() if isinstance(value, U256) else str(value)


def _hex_or_none(value: Any) -> Optional[str]:
    return None if value is None else U256.parse(value).to_hex()


def _hex_tuple(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    return tuple(U256.parse(v).to_hex() for v in (values or ()))


@dataclass(frozen=True, init=False)
class TokenDistribution:
    """
    Initial token allocation carried by a create instruction.

    Fungible distributions set `amount`; non-fungible ones list `token_ids`
    and leave `amount` unset. `update_fields` are applied to the recipient's
    token as part of genesis, in order.
    """

    program_id: AddressOrNamespace
    to: AddressOrNamespace
    amount: Optional[str]
    token_ids: Tuple[str, ...]
    update_fields: Tuple[TokenUpdateField, ...]

    def __init__(
        self,
        program_id: AddressLike,
        to: AddressLike,
        amount: Any = None,
        token_ids: Optional[Iterable[Any]] = None,
        update_fields: Iterable[TokenUpdateField] = (),
    ) -> None:
        object.__setattr__(self, "program_id", AddressOrNamespace.parse(program_id))
        object.__setattr__(self, "to", AddressOrNamespace.parse(to))
        object.__setattr__(self, "amount", _hex_or_none(amount))
        object.__setattr__(self, "token_ids", _hex_tuple(token_ids))
        object.__setattr__(self, "update_fields", tuple(update_fields))

    def to_json(self) -> Dict[str, Any]:
        return {
            "programId": self.program_id.to_json(),
            "to": self.to.to_json(),
            "amount": self.amount,
            "tokenIds": list(self.token_ids),
            "updateFields": [f.to_json() for f in self.update_fields],
        }


@dataclass(frozen=True, init=False)
class CreateInstruction:
    program_namespace: AddressOrNamespace
    program_id: AddressOrNamespace
    program_owner: Address
    total_supply: str
    initialized_supply: str
    distribution: Tuple[TokenDistribution, ...]

    kind: ClassVar[InstructionKind] = InstructionKind.CREATE

    def __init__(
        self,
        program_namespace: AddressLike,
        program_id: AddressLike,
        program_owner: Union[Address, str],
        total_supply: Any,
        initialized_supply: Any,
        distribution: Iterable[TokenDistribution] = (),
    ) -> None:
        object.__setattr__(self, "program_namespace", AddressOrNamespace.parse(program_namespace))
        object.__setattr__(self, "program_id", AddressOrNamespace.parse(program_id))
        object.__setattr__(self, "program_owner", as_address(program_owner))
        object.__setattr__(self, "total_supply", _supply_text(total_supply))
        object.__setattr__(self, "initialized_supply", _supply_text(initialized_supply))
        object.__setattr__(self, "distribution", tuple(distribution))

    def to_json(self) -> Dict[str, Any]:
        return {
            "programNamespace": self.program_namespace.to_json(),
            "programId": self.program_id.to_json(),
            "programOwner": self.program_owner.to_json(),
            "totalSupply": self.total_supply,
            "initializedSupply": self.initialized_supply,
            "distribution": [d.to_json() for d in self.distribution],
        }


@dataclass(frozen=True, init=False)
class UpdateInstruction:
    """Ordered updates; the runtime applies them in sequence."""

    updates: Tuple[TokenOrProgramUpdate, ...]

    kind: ClassVar[InstructionKind] = InstructionKind.UPDATE

    def __init__(self, updates: Iterable[TokenOrProgramUpdate]) -> None:
        object.__setattr__(self, "updates", tuple(updates))

    def to_json(self) -> Dict[str, Any]:
        return {"updates": [u.to_json() for u in self.updates]}


@dataclass(frozen=True, init=False)
class TransferInstruction:
    token: Address
    from_: AddressOrNamespace
    to: AddressOrNamespace
    amount: Optional[str]
    ids: Tuple[str, ...]

    kind: ClassVar[InstructionKind] = InstructionKind.TRANSFER

    def __init__(
        self,
        token: Union[Address, str],
        from_: AddressLike,
        to: AddressLike,
        amount: Any = None,
        ids: Optional[Iterable[Any]] = None,
    ) -> None:
        object.__setattr__(self, "token", as_address(token))
        object.__setattr__(self, "from_", AddressOrNamespace.parse(from_))
        object.__setattr__(self, "to", AddressOrNamespace.parse(to))
        object.__setattr__(self, "amount", _hex_or_none(amount))
        object.__setattr__(self, "ids", _hex_tuple(ids))

    def to_json(self) -> Dict[str, Any]:
        return {
            "token": self.token.to_json(),
            "from": self.from_.to_json(),
            "to": self.to.to_json(),
            "amount": self.amount,
            "ids": list(self.ids),
        }


@dataclass(frozen=True, init=False)
class BurnInstruction:
    caller: Address
    program_id: AddressOrNamespace
    token: Address
    from_: AddressOrNamespace
    amount: Optional[str]
    ids: Tuple[str, ...]

    kind: ClassVar[InstructionKind] = InstructionKind.BURN

    def __init__(
        self,
        caller: Union[Address, str],
        program_id: AddressLike,
        token: Union[Address, str],
        from_: AddressLike,
        amount: Any = None,
        ids: Optional[Iterable[Any]] = None,
    ) -> None:
        object.__setattr__(self, "caller", as_address(caller))
        object.__setattr__(self, "program_id", AddressOrNamespace.parse(program_id))
        object.__setattr__(self, "token", as_address(token))
        object.__setattr__(self, "from_", AddressOrNamespace.parse(from_))
        object.__setattr__(self, "amount", _hex_or_none(amount))
        object.__setattr__(self, "ids", _hex_tuple(ids))

    def to_json(self) -> Dict[str, Any]:
        return {
            "caller": self.caller.to_json(),
            "programId": self.program_id.to_json(),
            "token": self.token.to_json(),
            "from": self.from_.to_json(),
            "amount": self.amount,
            "ids": list(self.ids),
        }


@dataclass(frozen=True)
class LogInstruction:
    kind: ClassVar[InstructionKind] = InstructionKind.LOG

    def to_json(self) -> Dict[str, Any]:
        return {}


Body = Union[CreateInstruction, UpdateInstruction, TransferInstruction, BurnInstruction, LogInstruction]

_BODIES = {
    InstructionKind.CREATE: CreateInstruction,
    InstructionKind.UPDATE: UpdateInstruction,
    InstructionKind.TRANSFER: TransferInstruction,
    InstructionKind.BURN: BurnInstruction,
    InstructionKind.LOG: LogInstruction,
}


@dataclass(frozen=True)
class Instruction:
    """Tagged instruction: `kind` selects which body type `body` must be."""

    kind: InstructionKind
    body: Body

    def __post_init__(self) -> None:
        try:
            kind = InstructionKind(self.kind)
        except ValueError as e:
            raise MalformedInput(f"unknown instruction kind {self.kind!r}") from e
        if not isinstance(self.body, _BODIES[kind]):
            raise MalformedInput(f"{kind.value} instruction cannot carry {type(self.body).__name__}")
        object.__setattr__(self, "kind", kind)

    @classmethod
    def of(cls, body: Body) -> "Instruction":
        return cls(body.kind, body)

    def to_json(self) -> Dict[str, Any]:
        return {self.kind.value: self.body.to_json()}


__all__ = [
    "InstructionKind",
    "TokenDistribution",
    "CreateInstruction",
    "UpdateInstruction",
    "TransferInstruction",
    "BurnInstruction",
    "LogInstruction",
    "Instruction",
]
