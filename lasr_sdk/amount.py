"""
lasr_sdk.amount
===============

Fixed-point amount codec and the `U256` value type.

On-chain amounts are unsigned 256-bit integers scaled by 10**18 (the ledger's
native unit has 18 decimals). On the wire they travel as `0x`-prefixed,
64-digit, zero-padded hex strings.

Accepted inputs for `parse_amount_to_bigint`
--------------------------------------------
- ``int``            : whole units, scaled by 10**18 (``1`` -> 10**18)
- ``float``          : read through its shortest ``repr`` then scaled
- ``Decimal``        : scaled exactly
- decimal ``str``    : ``"1.1234123"`` -> 1123412300000000000
- ``0x`` hex ``str`` : parsed LITERALLY as the integer value, NOT scaled.
  ``"0x...01"`` is the integer 1 (one wei-like base unit), not 10**18.
  This lets callers pass through values that are already on-chain encoded
  (e.g. ``transaction.value``); it also means ``"1"`` and ``"0x1"`` differ by
  a factor of 10**18. Callers must know which unit they hold.

Nothing here uses binary floating point arithmetic.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence, Union

from .config import DEFAULT
from .consts import (DECIMALS, LIMB_BITS, LIMB_COUNT, LIMB_MASK,
                     U256_HEX_WIDTH, U256_MAX)
from .errors import InvalidAmount

AmountLike = Union[int, float, Decimal, str]

_DECIMAL_RE = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_DIGITS_RE = re.compile(r"[0-9]+")


def _is_hex(s: str) -> bool:
    return s[:2] in ("0x", "0X")


def _check_range(n: int, raw: Any) -> int:
    if n < 0:
        raise InvalidAmount("amount must be non-negative", value=raw)
    if n > U256_MAX:
        raise InvalidAmount("amount exceeds U256 range", value=raw)
    return n


def _parse_hex(s: str, raw: Any) -> int:
    if not _HEX_RE.fullmatch(s):
        raise InvalidAmount("invalid hex amount", value=raw)
    return _check_range(int(s, 16), raw)


def _decimal_text(value: Union[float, Decimal], raw: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidAmount("amount must be finite", value=raw)
    try:
        d = Decimal(repr(value)) if isinstance(value, float) else value
    except InvalidOperation as e:  # pragma: no cover - repr of a finite float always parses
        raise InvalidAmount("amount is not a number", value=raw) from e
    if not d.is_finite():
        raise InvalidAmount("amount must be finite", value=raw)
    return format(d, "f")


def _scale_decimal(text: str, raw: Any, decimals: int) -> int:
    s = text.strip()
    if s.startswith("-"):
        raise InvalidAmount("amount must be non-negative", value=raw)
    m = _DECIMAL_RE.fullmatch(s)
    if m is None:
        raise InvalidAmount("amount contains non-numeric characters", value=raw)
    whole, frac = m.group("int"), m.group("frac") or ""
    if not whole and not frac:
        raise InvalidAmount("amount is empty", value=raw)
    if len(frac) > decimals:
        raise InvalidAmount(
            f"amount has more than {decimals} fractional digits", value=raw
        )
    n = int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")
    return _check_range(n, raw)


def parse_amount_to_bigint(value: AmountLike, *, decimals: int = DECIMALS) -> int:
    """
    Convert a human amount into its on-chain integer.

    Decimal inputs are scaled by ``10**decimals``; ``0x`` hex strings are
    returned as-is (see module docstring).

    Raises:
        InvalidAmount: non-numeric, negative, over-precision or > 2**256-1.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmount("amount must be a number or numeric string", value=value)
    if isinstance(value, int):
        return _check_range(value * 10**decimals, value)
    if isinstance(value, (float, Decimal)):
        return _scale_decimal(_decimal_text(value, value), value, decimals)
    if isinstance(value, str):
        s = value.strip()
        if _is_hex(s):
            return _parse_hex(s, value)
        return _scale_decimal(s, value, decimals)
    raise InvalidAmount(
        f"unsupported amount type {type(value).__name__}", value=value
    )


def format_bigint_to_hex(n: int, *, width: int = U256_HEX_WIDTH) -> str:
    """Raw integer -> ``0x`` + zero-padded hex of `width` digits."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidAmount("expected an integer", value=n)
    _check_range(n, n)
    return "0x" + format(n, f"0{width}x")


def format_amount_to_hex(value: AmountLike, *, decimals: int = DECIMALS) -> str:
    """
    Human amount -> wire hex. ``format_amount_to_hex("1")`` is
    ``0x0000...0de0b6b3a7640000`` (10**18).
    """
    return format_bigint_to_hex(parse_amount_to_bigint(value, decimals=decimals))


def format_hex_to_amount(value: Union[str, int], *, decimals: int = DECIMALS) -> str:
    """
    Wire hex -> canonical decimal string, rescaled by ``10**decimals``.

    The result carries no trailing fractional zeros and no trailing dot, so
    ``format_hex_to_amount(format_amount_to_hex(x)) == x`` for every canonical
    decimal ``x`` with at most 18 fractional digits.
    """
    if isinstance(value, bool):
        raise InvalidAmount("expected a hex string", value=value)
    if isinstance(value, int):
        n = _check_range(value, value)
    elif isinstance(value, str):
        n = _parse_hex(value.strip(), value)
    else:
        raise InvalidAmount("expected a hex string", value=value)
    whole, frac = divmod(n, 10**decimals)
    frac_s = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole}.{frac_s}" if frac_s else str(whole)


# ---------------------------------------------------------------------------
# U256
# ---------------------------------------------------------------------------


def _resolve_order(order: Optional[str]) -> str:
    o = order or DEFAULT.limb_order
    if o not in ("little", "big"):
        raise ValueError(f"limb order must be 'little' or 'big', got: {order!r}")
    return o


@dataclass(frozen=True, order=True)
class U256:
    """
    Unsigned 256-bit integer.

    Arithmetic is checked: results outside ``[0, 2**256-1]`` raise
    `InvalidAmount` instead of wrapping. Limb arrays hold four 64-bit words;
    the default order is least-significant first (``SDKConfig.limb_order``).
    """

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidAmount("U256 value must be an int", value=self.value)
        _check_range(self.value, self.value)

    # -- constructors --

    @classmethod
    def from_limbs(cls, limbs: Sequence[int], *, order: Optional[str] = None) -> "U256":
        if len(limbs) != LIMB_COUNT:
            raise InvalidAmount(f"U256 needs exactly {LIMB_COUNT} limbs", value=list(limbs))
        words: List[int] = []
        for w in limbs:
            if isinstance(w, bool) or not isinstance(w, int) or not 0 <= w <= LIMB_MASK:
                raise InvalidAmount("U256 limb must be a 64-bit unsigned int", value=w)
            words.append(w)
        if _resolve_order(order) == "big":
            words.reverse()
        n = 0
        for i, w in enumerate(words):
            n |= w << (LIMB_BITS * i)
        return cls(n)

    @classmethod
    def from_hex(cls, s: str) -> "U256":
        return cls(_parse_hex(s.strip(), s))

    @classmethod
    def from_amount(cls, value: AmountLike) -> "U256":
        """Human amount (scaled by 10**18, hex passed through) -> U256."""
        return cls(parse_amount_to_bigint(value))

    @classmethod
    def parse(cls, value: Any, *, order: Optional[str] = None) -> "U256":
        """
        Parse an already-encoded on-chain value: a U256, an int, a hex string,
        a decimal digit string (raw, NOT scaled) or a four-limb array.
        """
        if isinstance(value, U256):
            return value
        if isinstance(value, bool):
            raise InvalidAmount("cannot parse bool as U256", value=value)
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            s = value.strip()
            if _is_hex(s):
                return cls.from_hex(s)
            if _DIGITS_RE.fullmatch(s):
                return cls(int(s))
            raise InvalidAmount("invalid U256 string", value=value)
        if isinstance(value, (list, tuple)):
            return cls.from_limbs(value, order=order)
        raise InvalidAmount(f"cannot parse {type(value).__name__} as U256", value=value)

    # -- views --

    def to_limbs(self, *, order: Optional[str] = None) -> List[int]:
        words = [(self.value >> (LIMB_BITS * i)) & LIMB_MASK for i in range(LIMB_COUNT)]
        if _resolve_order(order) == "big":
            words.reverse()
        return words

    def to_hex(self) -> str:
        return format_bigint_to_hex(self.value)

    def to_amount(self) -> str:
        return format_hex_to_amount(self.value)

    def to_json(self) -> str:
        return self.to_hex()

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    # -- checked arithmetic --

    def __add__(self, other: Any) -> "U256":
        return U256(self.value + _as_int(other))

    def __sub__(self, other: Any) -> "U256":
        return U256(self.value - _as_int(other))

    def __mul__(self, other: Any) -> "U256":
        return U256(self.value * _as_int(other))

    def __floordiv__(self, other: Any) -> "U256":
        d = _as_int(other)
        if d == 0:
            raise InvalidAmount("division by zero", value=other)
        return U256(self.value // d)


def _as_int(other: Any) -> int:
    if isinstance(other, U256):
        return other.value
    if isinstance(other, int) and not isinstance(other, bool):
        return other
    raise InvalidAmount(f"cannot combine U256 with {type(other).__name__}", value=other)


def as_u256_list(values: Iterable[Any]) -> List[U256]:
    """Parse every element of `values` with `U256.parse`."""
    return [U256.parse(v) for v in values]


ZERO = U256(0)

__all__ = [
    "AmountLike",
    "parse_amount_to_bigint",
    "format_amount_to_hex",
    "format_bigint_to_hex",
    "format_hex_to_amount",
    "U256",
    "ZERO",
    "as_u256_list",
]
