"""
Instruction builders: fail fast on missing or malformed inputs, carry supply
strings unchanged, and assemble mint as two ordered transfers.
"""
from __future__ import annotations

import logging

import pytest

from lasr_sdk.amount import U256, format_amount_to_hex, format_bigint_to_hex
from lasr_sdk.errors import (InvalidAddress, InvalidAmount, MalformedInput,
                             MissingRequiredField)
from lasr_sdk.programs.builders import (
    TokenUpdateBuilder, build_burn_instruction, build_create_instruction,
    build_log_instruction, build_mint_instructions,
    build_program_data_update_instruction,
    build_program_metadata_update_instruction,
    build_token_distribution_instruction,
    build_token_metadata_update_instruction, build_token_update_field,
    build_transfer_instruction, build_update_instruction)
from lasr_sdk.programs.instructions import InstructionKind
from lasr_sdk.programs.program import ProgramUpdate, build_program_update_field
from lasr_sdk.programs.token import TokenUpdate
from lasr_sdk.programs.updates import TokenOrProgramUpdate


def _create(caller, recipient, **overrides):
    kwargs = dict(
        from_addr=caller,
        program_id="this",
        program_owner=caller,
        program_namespace="this",
        total_supply="1000",
        initialized_supply="250",
        distribution_instruction=build_token_distribution_instruction(
            program_id="this", initialized_supply=format_amount_to_hex("250"), to=recipient
        ),
    )
    kwargs.update(overrides)
    return build_create_instruction(**kwargs)


# ---- create -----------------------------------------------------------------


def test_create_serializes_all_fields_in_order(caller, recipient):
    ins = _create(caller, recipient)
    assert ins.kind is InstructionKind.CREATE
    body = ins.to_json()["create"]
    assert list(body) == [
        "programNamespace",
        "programId",
        "programOwner",
        "totalSupply",
        "initializedSupply",
        "distribution",
    ]
    assert all(v is not None for v in body.values())
    assert body["totalSupply"] == "1000"
    assert body["initializedSupply"] == "250"
    assert isinstance(body["distribution"], list) and len(body["distribution"]) == 1
    assert body["distribution"][0]["amount"] == format_amount_to_hex("250")


def test_create_carries_hex_supply_as_given(caller, recipient):
    total = format_amount_to_hex("1000")
    body = _create(caller, recipient, total_supply=total).to_json()["create"]
    assert body["totalSupply"] == total


def test_create_supplies_are_unscaled_on_chain_integers(caller, recipient):
    body = _create(caller, recipient, total_supply=U256(1000), initialized_supply=250).to_json()["create"]
    assert body["totalSupply"] == format_bigint_to_hex(1000)
    assert body["initializedSupply"] == "250"
    for bad in ("1.5", "\u0661", True):
        with pytest.raises(InvalidAmount):
            _create(caller, recipient, initialized_supply=bad)


@pytest.mark.parametrize(
    "missing,name",
    [
        ("program_owner", "programOwner"),
        ("program_namespace", "programNamespace"),
        ("total_supply", "totalSupply"),
        ("distribution_instruction", "distributionInstruction"),
        ("from_addr", "from"),
    ],
)
def test_create_missing_field(caller, recipient, missing, name):
    with pytest.raises(MissingRequiredField) as ei:
        _create(caller, recipient, **{missing: None})
    assert name in ei.value.fields


def test_create_rejects_bad_values(caller, recipient):
    with pytest.raises(InvalidAmount):
        _create(caller, recipient, total_supply="lots")
    with pytest.raises(InvalidAddress):
        _create(caller, recipient, program_owner="0x1234")


# ---- distribution -----------------------------------------------------------


def test_non_fungible_distribution_mints_scaled_ids(recipient):
    meta = build_token_update_field(field="metadata", action="extend", value={"symbol": "NFT"})
    dist = build_token_distribution_instruction(
        program_id="this", initialized_supply="3", to=recipient, token_updates=[meta], non_fungible=True
    )
    out = dist.to_json()
    assert out["amount"] is None
    assert out["tokenIds"] == [format_amount_to_hex(i) for i in range(3)]
    assert out["updateFields"] == [meta.to_json()]


def test_non_fungible_distribution_rejects_fractional_count(recipient):
    with pytest.raises(InvalidAmount):
        build_token_distribution_instruction(
            program_id="this", initialized_supply="1.5", to=recipient, non_fungible=True
        )
    with pytest.raises(InvalidAmount):
        build_token_distribution_instruction(
            program_id="this", initialized_supply="\u0661", to=recipient, non_fungible=True
        )


def test_distribution_requires_inputs_and_fields(recipient):
    with pytest.raises(MissingRequiredField):
        build_token_distribution_instruction(program_id="this", initialized_supply=None, to=recipient)
    with pytest.raises(MalformedInput):
        build_token_distribution_instruction(
            program_id="this", initialized_supply="0x1", to=recipient, token_updates=[{"field": "data"}]
        )


# ---- transfer / burn --------------------------------------------------------


def test_transfer_requires_amount_or_ids(caller, recipient, token):
    with pytest.raises(MissingRequiredField) as ei:
        build_transfer_instruction(from_addr=caller, to=recipient, token_address=token)
    assert ei.value.fields == ("amount", "token_ids")


def test_transfer_requires_addresses(caller, token):
    with pytest.raises(MissingRequiredField) as ei:
        build_transfer_instruction(from_addr=caller, to=None, token_address=token, amount=1)
    assert ei.value.fields == ("to",)
    with pytest.raises(InvalidAddress):
        build_transfer_instruction(from_addr=caller, to="bob", token_address=token, amount=1)


@pytest.mark.parametrize("amount", ["\u00b2", "\u0661", "1e3"])
def test_transfer_rejects_non_ascii_digit_amounts(caller, recipient, token, amount):
    with pytest.raises(InvalidAmount):
        build_transfer_instruction(from_addr=caller, to=recipient, token_address=token, amount=amount)
    with pytest.raises(InvalidAmount):
        build_burn_instruction(
            caller=caller, program_id=token, token_address=token, from_addr=caller, amount=amount
        )


def test_transfer_with_both_amount_and_ids_carries_both(caller, recipient, token, caplog):
    with caplog.at_level(logging.WARNING, logger="lasr_sdk.programs.builders"):
        ins = build_transfer_instruction(
            from_addr=caller, to=recipient, token_address=token, amount="0x2", token_ids=["0x7"]
        )
    body = ins.to_json()["transfer"]
    assert body["amount"] == format_bigint_to_hex(2)
    assert body["ids"] == [format_bigint_to_hex(7)]
    assert "both amount and token_ids" in caplog.text


def test_burn(caller, token):
    ins = build_burn_instruction(
        caller=caller, program_id="this", token_address=token, from_addr=caller, amount="0x" + "0" * 63 + "9"
    )
    body = ins.to_json()["burn"]
    assert body == {
        "caller": caller,
        "programId": "this",
        "token": token,
        "from": caller,
        "amount": format_bigint_to_hex(9),
        "ids": [],
    }
    with pytest.raises(MissingRequiredField):
        build_burn_instruction(caller=caller, program_id="this", token_address=token, from_addr=caller)


def test_log_builder():
    assert build_log_instruction().to_json() == {"log": {}}


# ---- mint -------------------------------------------------------------------


def test_mint_is_two_ordered_transfers(caller, token, payment_token):
    payment, minted = build_mint_instructions(
        from_addr=caller,
        program_id=token,
        payment_token_address=payment_token,
        input_value=5,
        returned_value=10,
    )
    assert payment.to_json() == {
        "transfer": {
            "token": payment_token,
            "from": caller,
            "to": "this",
            "amount": format_bigint_to_hex(5),
            "ids": [],
        }
    }
    assert minted.to_json() == {
        "transfer": {
            "token": token,
            "from": "this",
            "to": caller,
            "amount": format_bigint_to_hex(10),
            "ids": [],
        }
    }


def test_mint_non_fungible_returns_ids(caller, token, payment_token):
    _, minted = build_mint_instructions(
        from_addr=caller,
        program_id=token,
        payment_token_address=payment_token,
        input_value="0x1",
        returned_token_ids=["0x3"],
    )
    body = minted.to_json()["transfer"]
    assert body["amount"] is None
    assert body["ids"] == [format_bigint_to_hex(3)]


def test_mint_requires_inputs(caller, token, payment_token):
    with pytest.raises(MissingRequiredField):
        build_mint_instructions(
            from_addr=caller, program_id=token, payment_token_address=None, input_value=1, returned_value=1
        )
    with pytest.raises(MissingRequiredField):
        build_mint_instructions(
            from_addr=caller, program_id=token, payment_token_address=payment_token, input_value=1
        )


# ---- update -----------------------------------------------------------------


def test_update_requires_something():
    with pytest.raises(MissingRequiredField):
        build_update_instruction()
    with pytest.raises(MalformedInput):
        build_update_instruction(update="metadata")  # type: ignore[arg-type]


def test_update_wraps_and_orders(token):
    prog = ProgramUpdate("this", [build_program_update_field(field="data", action="extend", value={"k": "v"})])
    tok = TokenUpdate("this", token, [build_token_update_field(field="status", action="value", value="free")])
    ins = build_update_instruction(update=prog, updates=[tok])
    updates = ins.to_json()["update"]["updates"]
    assert [list(u) for u in updates] == [["programUpdate"], ["tokenUpdate"]]


def test_program_metadata_and_data_shortcuts():
    meta = build_program_metadata_update_instruction(metadata={"symbol": "TKN"})
    data = build_program_data_update_instruction(data='{"type":"fungible"}', action="value")
    assert meta.to_json() == {
        "update": {
            "updates": [
                {
                    "programUpdate": {
                        "account": "this",
                        "updates": [{"field": "metadata", "value": {"metadata": {"extend": {"symbol": "TKN"}}}}],
                    }
                }
            ]
        }
    }
    inner = data.to_json()["update"]["updates"][0]["programUpdate"]["updates"][0]
    assert inner == {"field": "data", "value": {"data": {"value": {"type": "fungible"}}}}
    with pytest.raises(MissingRequiredField):
        build_program_metadata_update_instruction(metadata=None)


def test_token_metadata_shortcut(caller, token):
    ins = build_token_metadata_update_instruction(account=caller, token_address=token, metadata={"name": "T"})
    upd = ins.to_json()["update"]["updates"][0]["tokenUpdate"]
    assert upd["account"] == caller
    assert upd["token"] == token
    assert upd["updates"][0]["field"] == "metadata"


def test_token_update_builder(caller, token):
    spender = "0x" + "55" * 20
    approve = TokenUpdate(
        caller, token, [build_token_update_field(field="approvals", action="insert", value=[spender, [1]])]
    )
    ins = TokenUpdateBuilder().add_token_address(token).add_update_field(approve).build()
    assert ins.kind is InstructionKind.UPDATE
    assert ins.to_json()["update"]["updates"] == [TokenOrProgramUpdate.token_update(approve).to_json()]


def test_token_update_builder_requires_token_and_updates(caller, token):
    with pytest.raises(MissingRequiredField) as ei:
        TokenUpdateBuilder().build()
    assert set(ei.value.fields) == {"tokenAddress", "updates"}
    with pytest.raises(MissingRequiredField):
        TokenUpdateBuilder().add_token_address(token).build()
