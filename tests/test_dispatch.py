"""
Program dispatch: op name -> handler table, built-in `update`, and the pure
`handle(text) -> text` entry point.
"""
from __future__ import annotations

import json

import pytest

from lasr_sdk import log as llog
from lasr_sdk.amount import format_bigint_to_hex
from lasr_sdk.errors import MalformedInput, MissingRequiredField, UnsupportedAction
from lasr_sdk.programs.builders import build_mint_instructions
from lasr_sdk.programs.dispatch import Program
from lasr_sdk.programs.outputs import Outputs
from lasr_sdk.types import ComputeInputs

pytestmark = pytest.mark.usefixtures("clean_env")


def mint(ci: ComputeInputs):
    tx = ci.transaction
    held = ci.token(tx.to)
    rate = int(held.data["conversionRate"])
    paid = tx.value_u256()
    return build_mint_instructions(
        from_addr=tx.from_,
        program_id=tx.program_id,
        payment_token_address=held.data["paymentProgramAddress"],
        input_value=paid,
        returned_value=paid * rate,
    )


def test_handle_runs_registered_op(make_envelope, caller, token, payment_token):
    program = Program("fungible").with_strategies(mint=mint)
    env = make_envelope(op="mint")
    out = json.loads(program.handle(json.dumps(env)))
    assert out["computeInputs"] == env
    payment, minted = out["instructions"]
    assert payment["transfer"]["token"] == payment_token
    assert payment["transfer"]["amount"] == format_bigint_to_hex(5)
    assert minted["transfer"]["token"] == token
    assert minted["transfer"]["to"] == caller
    assert minted["transfer"]["amount"] == format_bigint_to_hex(10)


def test_start_returns_outputs(make_envelope):
    program = Program("fungible", {"mint": mint})
    result = program.start(make_envelope(op="mint"))
    assert isinstance(result, Outputs)
    assert len(result.instructions) == 2


def test_unknown_op(make_envelope):
    program = Program("fungible").with_strategies(mint=mint)
    with pytest.raises(UnsupportedAction) as ei:
        program.start(make_envelope(op="approve"))
    assert ei.value.action == "approve"
    assert ei.value.target == "fungible"
    assert set(ei.value.allowed) == {"update", "mint"}


def test_with_strategies_returns_new_program():
    base = Program("base")
    extended = base.with_strategies(mint=mint)
    assert base.ops == ("update",)
    assert set(extended.ops) == {"update", "mint"}
    assert extended.name == "base"


def test_builtin_update(make_envelope):
    env = make_envelope(op="update", inputs={"metadata": {"symbol": "TKN"}, "data": {"type": "fungible"}})
    out = Program().start(env).to_json()
    (ins,) = out["instructions"]
    prog = ins["update"]["updates"][0]["programUpdate"]
    assert prog["account"] == "this"
    assert [u["field"] for u in prog["updates"]] == ["metadata", "data"]
    assert prog["updates"][0]["value"] == {"metadata": {"extend": {"symbol": "TKN"}}}


def test_builtin_update_requires_fields(make_envelope):
    with pytest.raises(MissingRequiredField):
        Program().start(make_envelope(op="update", inputs={"other": 1}))


def test_update_can_be_replaced(make_envelope):
    program = Program("locked").with_strategies(update=lambda ci: [])
    assert program.start(make_envelope(op="update")).instructions == ()


def test_malformed_payload():
    with pytest.raises(MalformedInput):
        Program().handle("not json")
    with pytest.raises(MalformedInput):
        Program().handle(json.dumps({"op": "update"}))


def test_log_context_is_restored(make_envelope):
    seen = {}

    def spy(ci):
        seen.update(llog.context())
        return []

    Program("spy").with_strategies(look=spy).start(make_envelope(op="look"))
    assert seen["program"] == "spy"
    assert seen["op"] == "look"
    assert "trace_id" in seen
    assert llog.context() == {}
