"""
Input envelope models: the JSON a ledger runtime hands to a program.

These are *views* over the runtime's payload and keep wire field names
(camelCase) as aliases so that the envelope can be echoed back unchanged in
the program's output.

Validation:
- `from`, `to` and `programId` are 20-byte ``0x`` addresses.
- `transactionInputs` is a JSON-encoded string; it is decoded lazily by
  `Transaction.inputs()`.
- U256 values (balances, nonces, token ids) may arrive as hex strings or as
  four-limb arrays; helpers turn them into `U256`.

Unknown keys are kept (``extra="allow"``) so that nothing the runtime sends is
dropped from the echo.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (BaseModel, ConfigDict, Field, PrivateAttr,
                      ValidationError, field_validator)

from .address import Address, is_address
from .amount import U256
from .errors import MalformedInput

U256Wire = Union[str, List[int]]

__all__ = [
    "U256Wire",
    "TokenState",
    "Account",
    "Transaction",
    "ComputeInputs",
    "parse_compute_inputs",
]


def _require_address(v: str) -> str:
    if not is_address(v):
        raise ValueError("expected 0x followed by 40 hex characters")
    return v


class TokenState(BaseModel):
    """A token held by an account, as snapshotted by the runtime."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    program_id: Optional[str] = Field(default=None, alias="programId")
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    balance: Optional[U256Wire] = None
    allowance: Dict[str, U256Wire] = Field(default_factory=dict)
    approvals: Dict[str, List[U256Wire]] = Field(default_factory=dict)
    data: Dict[str, str] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)
    token_ids: List[U256Wire] = Field(default_factory=list, alias="tokenIds")
    status: Optional[Literal["locked", "free"]] = None

    def balance_u256(self) -> U256:
        return U256.parse(self.balance) if self.balance is not None else U256(0)

    def token_id_values(self) -> List[U256]:
        return [U256.parse(t) for t in self.token_ids]


class Account(BaseModel):
    """Account snapshot: owner, program account fields and held tokens."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    account_type: Optional[Union[str, Dict[str, Any]]] = Field(default=None, alias="accountType")
    nonce: Optional[U256Wire] = None
    owner_address: Optional[str] = Field(default=None, alias="ownerAddress")
    program_namespace: Optional[str] = Field(default=None, alias="programNamespace")
    program_account_data: Dict[str, str] = Field(default_factory=dict, alias="programAccountData")
    program_account_metadata: Dict[str, str] = Field(
        default_factory=dict, alias="programAccountMetadata"
    )
    program_account_linked_programs: List[Any] = Field(
        default_factory=list, alias="programAccountLinkedPrograms"
    )
    programs: Dict[str, TokenState] = Field(default_factory=dict)

    def token(self, program_address: Union[str, Address]) -> Optional[TokenState]:
        """Token held under `program_address` (case-insensitive lookup)."""
        key = str(program_address)
        if key in self.programs:
            return self.programs[key]
        lowered = key.lower()
        for k, v in self.programs.items():
            if k.lower() == lowered:
                return v
        return None


class Transaction(BaseModel):
    """The signed call that triggered this compute."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    from_: str = Field(alias="from")
    to: str
    program_id: str = Field(alias="programId")
    op: Optional[str] = None
    transaction_inputs: str = Field(default="", alias="transactionInputs")
    transaction_type: Optional[Any] = Field(default=None, alias="transactionType")
    value: str = "0x0"
    nonce: Optional[str] = None
    r: Optional[str] = None
    s: Optional[str] = None
    v: Optional[int] = None

    @field_validator("from_", "to", "program_id")
    @classmethod
    def _address_ok(cls, v: str) -> str:
        return _require_address(v)

    def inputs(self) -> Dict[str, Any]:
        """Decode `transactionInputs`; raises MalformedInput unless it is a JSON object."""
        try:
            decoded = json.loads(self.transaction_inputs)
        except (TypeError, ValueError) as e:
            raise MalformedInput("unable to parse transactionInputs") from e
        if not isinstance(decoded, dict):
            raise MalformedInput("transactionInputs must encode a JSON object")
        return decoded

    def value_u256(self) -> U256:
        return U256.parse(self.value)


class ComputeInputs(BaseModel):
    """Top-level envelope: optional account snapshot, transaction, op and version."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    account_info: Optional[Account] = Field(default=None, alias="accountInfo")
    transaction: Transaction
    op: str
    version: int = 1
    contract_inputs: Optional[str] = Field(default=None, alias="contractInputs")

    _raw: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    def echo(self) -> Dict[str, Any]:
        """The envelope exactly as received (or as constructed, when built in code)."""
        if self._raw is not None:
            return copy.deepcopy(self._raw)
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def token(self, program_address: Union[str, Address]) -> Optional[TokenState]:
        if self.account_info is None:
            return None
        return self.account_info.token(program_address)


def parse_compute_inputs(raw: Union[str, bytes, Mapping[str, Any], ComputeInputs]) -> ComputeInputs:
    """
    Parse the runtime payload into `ComputeInputs`.

    Raises:
        MalformedInput: not JSON, not an object, or missing/invalid envelope fields.
    """
    if isinstance(raw, ComputeInputs):
        return raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            obj = json.loads(raw)
        except ValueError as e:
            raise MalformedInput("payload is not valid JSON") from e
    else:
        obj = raw
    if not isinstance(obj, Mapping):
        raise MalformedInput("payload must be a JSON object")
    try:
        model = ComputeInputs.model_validate(obj)
    except ValidationError as e:
        raise MalformedInput(
            "payload does not match the compute envelope",
            data={"errors": [
                {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ]},
        ) from e
    model._raw = copy.deepcopy(dict(obj))
    return model
