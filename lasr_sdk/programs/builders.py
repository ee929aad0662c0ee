"""
Validating instruction builders.

Builders take the loose values a program pulls out of its call (strings,
ints, parsed JSON) and return finished `Instruction` values. Every check runs
before anything is constructed: a missing input raises
`MissingRequiredField`, a bad address `InvalidAddress`, a bad amount
`InvalidAmount`.

Amount units
------------
`amount`, `token_ids`, `input_value` and `returned_value` are on-chain
integers: an ``int``, a ``0x`` hex string, a raw digit string or a U256. They
are NOT scaled by 10**18. Convert human amounts first with
`parse_amount_to_bigint` / `format_amount_to_hex`.

Transfer and burn accept an amount, a list of token ids, or both. When both
are given they are carried through unchanged and a warning is logged; the
runtime decides what to do with them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..address import Address, AddressLike, AddressOrNamespace, as_address
from ..amount import U256, format_amount_to_hex
from ..consts import THIS
from ..errors import InvalidAmount, MalformedInput, MissingRequiredField
from ..utils import check_if_values_are_undefined
from .instructions import (BurnInstruction, CreateInstruction, Instruction,
                           LogInstruction, TokenDistribution,
                           TransferInstruction, UpdateInstruction)
from .program import ProgramUpdate, build_program_update_field
from .token import TokenUpdate, TokenUpdateField, build_token_update_field
from .updates import TokenOrProgramUpdate

log = logging.getLogger(__name__)

__all__ = [
    "build_create_instruction",
    "build_update_instruction",
    "build_transfer_instruction",
    "build_burn_instruction",
    "build_log_instruction",
    "build_token_distribution_instruction",
    "build_mint_instructions",
    "build_program_metadata_update_instruction",
    "build_program_data_update_instruction",
    "build_token_metadata_update_instruction",
    "build_token_update_field",
    "build_program_update_field",
    "TokenUpdateBuilder",
]

UpdateLike = Union[TokenOrProgramUpdate, TokenUpdate, ProgramUpdate]


def _as_update(value: UpdateLike) -> TokenOrProgramUpdate:
    if isinstance(value, TokenOrProgramUpdate):
        return value
    if isinstance(value, TokenUpdate):
        return TokenOrProgramUpdate.token_update(value)
    if isinstance(value, ProgramUpdate):
        return TokenOrProgramUpdate.program_update(value)
    raise MalformedInput(f"expected a token or program update, got {type(value).__name__}")


def _require_quantity(amount: Any, token_ids: Optional[Sequence[Any]], *, where: str) -> None:
    if amount is None and not token_ids:
        raise MissingRequiredField(
            message=f"{where}: either amount or token_ids is required",
            fields=("amount", "token_ids"),
        )
    if amount is not None and token_ids:
        log.warning(
            "%s carries both amount and token_ids; passing both through", where,
            extra={"amount": str(amount), "token_ids": len(token_ids)},
        )


def _supply(value: Any, what: str) -> int:
    """A supply as an unscaled on-chain integer."""
    try:
        return U256.parse(value).value
    except InvalidAmount as e:
        raise InvalidAmount(f"{what} must be an on-chain integer", value=value) from e


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------


def build_create_instruction(
    *,
    from_addr: Any,
    program_id: Optional[AddressLike],
    program_owner: Optional[Union[Address, str]],
    program_namespace: Optional[AddressLike],
    total_supply: Any,
    initialized_supply: Any,
    distribution_instruction: Optional[TokenDistribution],
) -> Instruction:
    """
    Create a program/token.

    `total_supply` and `initialized_supply` are on-chain integers, like every
    other builder amount: an int, a digit string, a `0x` hex string or a U256.
    They are checked but carried in the instruction as given (a U256 as its
    wire hex). `from_addr` is the caller and
    must be an address; it is validated but not part of the payload.
    """
    check_if_values_are_undefined(
        {
            "from": from_addr,
            "programId": program_id,
            "programOwner": program_owner,
            "programNamespace": program_namespace,
            "totalSupply": total_supply,
            "initializedSupply": initialized_supply,
            "distributionInstruction": distribution_instruction,
        },
        where="create",
    )
    as_address(from_addr)
    _supply(total_supply, "total supply")
    _supply(initialized_supply, "initialized supply")

    body = CreateInstruction(
        program_namespace=program_namespace,
        program_id=program_id,
        program_owner=program_owner,
        total_supply=total_supply,
        initialized_supply=initialized_supply,
        distribution=[distribution_instruction],
    )
    log.debug("built create instruction", extra={"program_id": str(body.program_id)})
    return Instruction.of(body)


def build_update_instruction(
    *,
    update: Optional[UpdateLike] = None,
    updates: Optional[Iterable[UpdateLike]] = None,
) -> Instruction:
    """Update instruction from one `update` or an ordered `updates` sequence (or both, `update` first)."""
    items: List[TokenOrProgramUpdate] = []
    if update is not None:
        items.append(_as_update(update))
    if updates is not None:
        items.extend(_as_update(u) for u in updates)
    if not items:
        raise MissingRequiredField.for_fields(["update"], where="update")
    log.debug("built update instruction", extra={"updates": len(items)})
    return Instruction.of(UpdateInstruction(items))


def build_transfer_instruction(
    *,
    from_addr: Optional[AddressLike],
    to: Optional[AddressLike],
    token_address: Optional[Union[Address, str]],
    amount: Any = None,
    token_ids: Optional[Sequence[Any]] = None,
) -> Instruction:
    check_if_values_are_undefined(
        {"from": from_addr, "to": to, "tokenAddress": token_address}, where="transfer"
    )
    _require_quantity(amount, token_ids, where="transfer")
    body = TransferInstruction(token_address, from_addr, to, amount=amount, ids=token_ids)
    log.debug("built transfer instruction", extra={"token": body.token.value})
    return Instruction.of(body)


def build_burn_instruction(
    *,
    caller: Optional[Union[Address, str]],
    program_id: Optional[AddressLike],
    token_address: Optional[Union[Address, str]],
    from_addr: Optional[AddressLike],
    amount: Any = None,
    token_ids: Optional[Sequence[Any]] = None,
) -> Instruction:
    check_if_values_are_undefined(
        {
            "caller": caller,
            "programId": program_id,
            "tokenAddress": token_address,
            "from": from_addr,
        },
        where="burn",
    )
    _require_quantity(amount, token_ids, where="burn")
    body = BurnInstruction(caller, program_id, token_address, from_addr, amount=amount, ids=token_ids)
    log.debug("built burn instruction", extra={"token": body.token.value})
    return Instruction.of(body)


def build_log_instruction() -> Instruction:
    return Instruction.of(LogInstruction())


def build_token_distribution_instruction(
    *,
    program_id: Optional[AddressLike],
    initialized_supply: Any,
    to: Optional[AddressLike],
    token_updates: Iterable[TokenUpdateField] = (),
    non_fungible: bool = False,
) -> TokenDistribution:
    """
    Initial allocation for a create instruction.

    Fungible: `initialized_supply` is the on-chain amount handed to `to`.
    Non-fungible: `initialized_supply` is a count ``n`` and ids
    ``format_amount_to_hex(0) .. format_amount_to_hex(n - 1)`` are minted;
    no amount is set.
    """
    check_if_values_are_undefined(
        {"programId": program_id, "initializedSupply": initialized_supply, "to": to},
        where="distribution",
    )
    fields = tuple(token_updates)
    for f in fields:
        if not isinstance(f, TokenUpdateField):
            raise MalformedInput(f"token_updates must hold TokenUpdateField values, got {type(f).__name__}")

    if non_fungible:
        count = _supply(initialized_supply, "initialized supply")
        ids = [format_amount_to_hex(i) for i in range(count)]
        return TokenDistribution(program_id, to, amount=None, token_ids=ids, update_fields=fields)
    return TokenDistribution(program_id, to, amount=initialized_supply, update_fields=fields)


def build_mint_instructions(
    *,
    from_addr: Optional[AddressLike],
    program_id: Optional[Union[Address, str]],
    payment_token_address: Optional[Union[Address, str]],
    input_value: Any,
    returned_value: Any = None,
    returned_token_ids: Optional[Sequence[Any]] = None,
) -> List[Instruction]:
    """
    Mint as two ordered transfers:

    1. `input_value` of the payment token from the caller to this program;
    2. `returned_value` (or `returned_token_ids`) of the program's own token
       from this program back to the caller.
    """
    check_if_values_are_undefined(
        {
            "from": from_addr,
            "programId": program_id,
            "paymentTokenAddress": payment_token_address,
            "inputValue": input_value,
        },
        where="mint",
    )
    _require_quantity(returned_value, returned_token_ids, where="mint")
    payment = build_transfer_instruction(
        from_addr=from_addr,
        to=THIS,
        token_address=payment_token_address,
        amount=input_value,
    )
    minted = build_transfer_instruction(
        from_addr=THIS,
        to=from_addr,
        token_address=program_id,
        amount=returned_value,
        token_ids=returned_token_ids,
    )
    return [payment, minted]


# ---------------------------------------------------------------------------
# Update shortcuts
# ---------------------------------------------------------------------------


def build_program_metadata_update_instruction(
    *,
    metadata: Union[Mapping[str, Any], str, None],
    account: AddressLike = THIS,
    action: str = "extend",
) -> Instruction:
    """Single program update touching `metadata` (default: extend)."""
    check_if_values_are_undefined({"metadata": metadata}, where="program metadata update")
    field = build_program_update_field(field="metadata", action=action, value=metadata)
    return build_update_instruction(update=ProgramUpdate(account, [field]))


def build_program_data_update_instruction(
    *,
    data: Union[Mapping[str, Any], str, None],
    account: AddressLike = THIS,
    action: str = "extend",
) -> Instruction:
    """Single program update touching `data` (default: extend)."""
    check_if_values_are_undefined({"data": data}, where="program data update")
    field = build_program_update_field(field="data", action=action, value=data)
    return build_update_instruction(update=ProgramUpdate(account, [field]))


def build_token_metadata_update_instruction(
    *,
    account: Optional[AddressLike],
    token_address: Optional[AddressLike],
    metadata: Union[Mapping[str, Any], str, None],
    action: str = "extend",
) -> Instruction:
    """Token update on `account`'s holding of `token_address`, touching `metadata`."""
    check_if_values_are_undefined(
        {"account": account, "tokenAddress": token_address, "metadata": metadata},
        where="token metadata update",
    )
    field = build_token_update_field(field="metadata", action=action, value=metadata)
    return build_update_instruction(update=TokenUpdate(account, token_address, [field]))


class TokenUpdateBuilder:
    """
    Fluent assembly of an update instruction::

        TokenUpdateBuilder().add_token_address(token).add_update_field(u).build()
    """

    def __init__(self) -> None:
        self._token: Optional[AddressOrNamespace] = None
        self._updates: List[TokenOrProgramUpdate] = []

    def add_token_address(self, token: AddressLike) -> "TokenUpdateBuilder":
        self._token = AddressOrNamespace.parse(token)
        return self

    def add_update_field(self, update: UpdateLike) -> "TokenUpdateBuilder":
        self._updates.append(_as_update(update))
        return self

    @property
    def token_address(self) -> Optional[AddressOrNamespace]:
        return self._token

    def build(self) -> Instruction:
        check_if_values_are_undefined(
            {"tokenAddress": self._token, "updates": self._updates or None},
            where="token update builder",
        )
        return build_update_instruction(updates=self._updates)
