"""
Shared pytest fixtures:
- Well-known addresses (caller, recipient, token, payment token)
- Compute envelope factory (the JSON a runtime hands to a program)
- Clean LASR_* environment and logging context (`clean_env`)
"""
from __future__ import annotations

import json
import typing as t

import pytest

from lasr_sdk import log as llog

CALLER = "0x" + "11" * 20
RECIPIENT = "0x" + "22" * 20
TOKEN = "0x" + "33" * 20
PAYMENT_TOKEN = "0x" + "44" * 20


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> t.Iterator[None]:
    for name in ("LASR_LIMB_ORDER", "LASR_LOG_LEVEL", "LASR_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    llog.clear_context()
    yield
    llog.clear_context()


@pytest.fixture
def caller() -> str:
    return CALLER


@pytest.fixture
def recipient() -> str:
    return RECIPIENT


@pytest.fixture
def token() -> str:
    return TOKEN


@pytest.fixture
def payment_token() -> str:
    return PAYMENT_TOKEN


@pytest.fixture
def make_envelope() -> t.Callable[..., t.Dict[str, t.Any]]:
    """
    Factory for compute envelopes. Keyword arguments override the defaults:
    `op`, `inputs` (dict, JSON-encoded into transactionInputs), `value`,
    `programs` (accountInfo.programs).
    """

    def _make(
        op: str = "mint",
        *,
        inputs: t.Optional[t.Dict[str, t.Any]] = None,
        value: str = "0x" + "0" * 63 + "5",
        programs: t.Optional[t.Dict[str, t.Any]] = None,
    ) -> t.Dict[str, t.Any]:
        return {
            "accountInfo": {
                "accountType": "user",
                "ownerAddress": CALLER,
                "programs": programs if programs is not None else {
                    TOKEN: {
                        "programId": TOKEN,
                        "ownerId": CALLER,
                        "balance": "0x" + "0" * 62 + "ff",
                        "data": {"paymentProgramAddress": PAYMENT_TOKEN, "conversionRate": "2"},
                        "metadata": {"symbol": "TKN"},
                        "tokenIds": [],
                    }
                },
            },
            "transaction": {
                "from": CALLER,
                "to": TOKEN,
                "programId": TOKEN,
                "op": op,
                "transactionInputs": json.dumps(inputs or {}),
                "transactionType": {"call": "0x" + "0" * 63 + "1"},
                "value": value,
                "nonce": "0x01",
                "r": "0x" + "aa" * 32,
                "s": "0x" + "bb" * 32,
                "v": 0,
            },
            "op": op,
            "version": 1,
        }

    return _make
