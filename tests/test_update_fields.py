"""
Update-field model:
- Each field accepts only its own action set (UnsupportedAction otherwise).
- Payloads are shaped per action; malformed payloads raise MalformedInput.
- Wire shape is {"field": f, "value": {f: {action: payload}}}, order preserved.
"""
from __future__ import annotations

import json

import pytest

from lasr_sdk.amount import format_bigint_to_hex
from lasr_sdk.errors import MalformedInput, UnsupportedAction
from lasr_sdk.programs.fields import Action
from lasr_sdk.programs.program import (ProgramField, ProgramUpdate,
                                       build_program_update_field,
                                       program_field_actions)
from lasr_sdk.programs.token import (TokenField, TokenUpdate,
                                     build_token_update_field,
                                     token_field_actions)
from lasr_sdk.programs.updates import TokenOrProgramUpdate, UpdateKind

SPENDER = "0x" + "55" * 20


def h(n: int) -> str:
    return format_bigint_to_hex(n)


@pytest.mark.parametrize(
    "field,action",
    [
        ("approvals", "push"),
        ("approvals", "pop"),
        ("status", "insert"),
        ("data", "push"),
        ("metadata", "revoke"),
        ("tokenIds", "remove"),
        ("data", "explode"),
    ],
)
def test_token_field_rejects_unsupported_action(field, action):
    with pytest.raises(UnsupportedAction) as ei:
        build_token_update_field(field=field, action=action, value=None)
    err = ei.value
    assert err.action == action
    assert err.target == f"token.{field}"
    assert action not in err.allowed


@pytest.mark.parametrize("action", ["push", "pop", "revoke"])
def test_program_field_rejects_unsupported_action(action):
    with pytest.raises(UnsupportedAction):
        build_program_update_field(field="linkedPrograms", action=action, value=None)


def test_allowed_action_tables():
    assert token_field_actions("tokenIds") == ("value", "push", "extend", "insert", "pop")
    assert token_field_actions(TokenField.STATUS) == ("value",)
    assert set(token_field_actions("approvals")) == {"value", "insert", "extend", "remove", "revoke"}
    assert program_field_actions(ProgramField.DATA) == ("value", "insert", "extend", "remove")


def test_unknown_field_is_malformed():
    with pytest.raises(MalformedInput):
        build_token_update_field(field="balance", action="value", value="1")
    with pytest.raises(MalformedInput):
        build_program_update_field(field="owner", action="value", value="x")


def test_metadata_extend_shape():
    f = build_token_update_field(field="metadata", action="extend", value={"symbol": "TKN", "decimals": 18})
    assert f.action is Action.EXTEND
    assert f.to_json() == {
        "field": "metadata",
        "value": {"metadata": {"extend": {"symbol": "TKN", "decimals": "18"}}},
    }


def test_map_payload_accepts_json_text():
    text = json.dumps({"name": "Token", "symbol": "TKN"})
    f = build_token_update_field(field="data", action="value", value=text)
    assert f.to_json()["value"] == {"data": {"value": {"name": "Token", "symbol": "TKN"}}}


def test_map_insert_and_remove():
    ins = build_token_update_field(field="data", action="insert", value=["color", "red"])
    assert ins.to_json()["value"] == {"data": {"insert": ["color", "red"]}}
    ins_obj = build_token_update_field(field="data", action="insert", value={"color": "blue"})
    assert ins_obj.to_json()["value"] == {"data": {"insert": ["color", "blue"]}}
    rm = build_token_update_field(field="data", action="remove", value="color")
    assert rm.to_json()["value"] == {"data": {"remove": "color"}}
    with pytest.raises(MalformedInput):
        build_token_update_field(field="data", action="remove", value="")
    with pytest.raises(MalformedInput):
        build_token_update_field(field="data", action="value", value="not json")
    with pytest.raises(MalformedInput):
        build_token_update_field(field="data", action="extend", value=["a", "b", "c"])


def test_token_ids_actions():
    push = build_token_update_field(field="tokenIds", action="push", value=1)
    assert push.to_json()["value"] == {"tokenIds": {"push": h(1)}}

    ext = build_token_update_field(field="tokenIds", action="extend", value=["0x2", 3])
    assert ext.to_json()["value"] == {"tokenIds": {"extend": [h(2), h(3)]}}

    ins = build_token_update_field(field="tokenIds", action="insert", value=[0, "0x5"])
    assert ins.to_json()["value"] == {"tokenIds": {"insert": [0, h(5)]}}

    pop = build_token_update_field(field="tokenIds", action="pop")
    assert pop.to_json()["value"] == {"tokenIds": {"pop": None}}

    with pytest.raises(MalformedInput):
        build_token_update_field(field="tokenIds", action="pop", value=1)
    with pytest.raises(MalformedInput):
        build_token_update_field(field="tokenIds", action="insert", value=[-1, 5])
    with pytest.raises(MalformedInput):
        build_token_update_field(field="tokenIds", action="push", value="1.5")


def test_status_value():
    f = build_token_update_field(field="status", action="value", value="locked")
    assert f.to_json() == {"field": "status", "value": {"status": {"value": "locked"}}}
    with pytest.raises(MalformedInput):
        build_token_update_field(field="status", action="value", value="burned")


def test_approvals_actions():
    ins = build_token_update_field(field="approvals", action="insert", value=[SPENDER, [1, "0x2"]])
    assert ins.to_json()["value"] == {"approvals": {"insert": [SPENDER, [h(1), h(2)]]}}

    val = build_token_update_field(field="approvals", action="value", value={SPENDER: 7})
    assert val.to_json()["value"] == {"approvals": {"value": {SPENDER: [h(7)]}}}

    ext = build_token_update_field(field="approvals", action="extend", value=[{SPENDER: [1]}])
    assert ext.to_json()["value"] == {"approvals": {"extend": [{SPENDER: [h(1)]}]}}

    rev = build_token_update_field(field="approvals", action="revoke", value=SPENDER)
    assert rev.to_json()["value"] == {"approvals": {"revoke": SPENDER}}

    with pytest.raises(MalformedInput):
        build_token_update_field(field="approvals", action="revoke", value="this")


def test_program_linked_programs():
    other = "0x" + "66" * 20
    ins = build_program_update_field(field="linkedPrograms", action="insert", value=other)
    assert ins.to_json() == {"field": "linkedPrograms", "value": {"linkedPrograms": {"insert": other}}}
    ext = build_program_update_field(field="linkedPrograms", action="extend", value=[other, "this"])
    assert ext.to_json()["value"] == {"linkedPrograms": {"extend": [other, "this"]}}
    with pytest.raises(MalformedInput):
        build_program_update_field(field="linkedPrograms", action="insert", value="nope")


def test_token_update_preserves_field_order():
    meta = build_token_update_field(field="metadata", action="extend", value={"symbol": "TKN"})
    data = build_token_update_field(field="data", action="extend", value={"type": "fungible"})
    upd = TokenUpdate("this", "0x" + "33" * 20, [meta, data])
    out = upd.to_json()
    assert out["account"] == "this"
    assert out["token"] == "0x" + "33" * 20
    assert [u["field"] for u in out["updates"]] == ["metadata", "data"]


def test_token_or_program_update_tagging():
    meta = build_program_update_field(field="metadata", action="extend", value={"name": "P"})
    prog = ProgramUpdate("this", [meta])
    wrapped = TokenOrProgramUpdate.program_update(prog)
    assert wrapped.kind is UpdateKind.PROGRAM
    assert wrapped.to_json() == {
        "programUpdate": {
            "account": "this",
            "updates": [{"field": "metadata", "value": {"metadata": {"extend": {"name": "P"}}}}],
        }
    }
    assert TokenOrProgramUpdate("programUpdate", prog) == wrapped

    with pytest.raises(MalformedInput):
        TokenOrProgramUpdate("tokenUpdate", prog)
    with pytest.raises(MalformedInput):
        TokenOrProgramUpdate("accountUpdate", prog)
