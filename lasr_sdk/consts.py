"""
Protocol constants shared across the SDK.

Keep these in sync with the ledger runtime; amounts and widths are
consensus-critical.
"""

from __future__ import annotations

from typing import Final

# Reserved namespace tokens, resolved by the runtime (not the SDK)
THIS: Final[str] = "this"
ZERO_VALUE: Final[str] = "zero"

# Fixed-point scale of on-chain amounts (native unit has 18 decimals)
DECIMALS: Final[int] = 18
SCALE: Final[int] = 10**DECIMALS

# Wire width of a U256 in hex digits (32 bytes)
U256_HEX_WIDTH: Final[int] = 64
U256_BITS: Final[int] = 256
U256_MAX: Final[int] = (1 << U256_BITS) - 1
LIMB_BITS: Final[int] = 64
LIMB_COUNT: Final[int] = 4
LIMB_MASK: Final[int] = (1 << LIMB_BITS) - 1

# 20-byte addresses
ADDRESS_LEN: Final[int] = 20
ADDRESS_HEX_LEN: Final[int] = ADDRESS_LEN * 2

# Canonical null address (the native ETH program lives here)
ZERO_ADDRESS: Final[str] = "0x" + "00" * ADDRESS_LEN
ETH_PROGRAM_ADDRESS: Final[str] = ZERO_ADDRESS

__all__ = [
    "THIS",
    "ZERO_VALUE",
    "DECIMALS",
    "SCALE",
    "U256_HEX_WIDTH",
    "U256_BITS",
    "U256_MAX",
    "LIMB_BITS",
    "LIMB_COUNT",
    "LIMB_MASK",
    "ADDRESS_LEN",
    "ADDRESS_HEX_LEN",
    "ZERO_ADDRESS",
    "ETH_PROGRAM_ADDRESS",
]
