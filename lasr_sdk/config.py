"""
SDK configuration: limb order and logging defaults.

- Loads sane defaults and supports overrides via environment variables (LASR_*).
- The amount scale (10**18) and the 64-digit hex width are protocol constants
  and live in `consts`; they are not configurable.
- `DEFAULT` is read from the environment once, at import. `U256.to_limbs` and
  `U256.from_limbs` fall back to its limb order when none is passed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_LIMB_ORDERS = ("little", "big")
_LOG_FORMATS = ("json", "text", "auto")
def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _parse_limb_order(val: Any, default: str = "little") -> str:
    """
    Accepts 'little'/'le'/'lsb' or 'big'/'be'/'msb' (case-insensitive).
    """
    if val is None or val == "":
        return default
    s = str(val).strip().lower()
    if s in ("little", "le", "lsb"):
        return "little"
    if s in ("big", "be", "msb"):
        return "big"
    raise ValueError(f"limb order must be one of {_LIMB_ORDERS}, got: {val!r}")


def _parse_log_format(val: Any, default: str = "auto") -> str:
    if val is None or val == "":
        return default
    s = str(val).strip().lower()
    if s not in _LOG_FORMATS:
        raise ValueError(f"log format must be one of {_LOG_FORMATS}, got: {val!r}")
    return s


@dataclass(slots=True)
class SDKConfig:
    # Order of the four 64-bit limbs of a U256 when emitted as an array
    limb_order: str = field(default="little")
    # Logging
    log_level: str = "WARNING"
    log_format: str = "auto"

    @classmethod
    def from_env(cls, prefix: str = "LASR_") -> "SDKConfig":
        """
        Create config from environment variables:

        LASR_LIMB_ORDER    (little|big)
        LASR_LOG_LEVEL     (DEBUG|INFO|WARNING|ERROR)
        LASR_LOG_FORMAT    (json|text|auto)
        """
        order = _parse_limb_order(_env(f"{prefix}LIMB_ORDER", None))
        level = (_env(f"{prefix}LOG_LEVEL", "WARNING") or "WARNING").upper()
        fmt = _parse_log_format(_env(f"{prefix}LOG_FORMAT", None))

        cfg = cls(
            limb_order=order,
            log_level=level,
            log_format=fmt,
        )
        cfg.validate()
        return cfg

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        if "limb_order" in overrides:
            data["limb_order"] = _parse_limb_order(overrides["limb_order"], base.limb_order)
        if "log_format" in overrides:
            data["log_format"] = _parse_log_format(overrides["log_format"], base.log_format)
        cfg = cls(**data)
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.limb_order not in _LIMB_ORDERS:
            raise ValueError(f"limb_order must be one of {_LIMB_ORDERS}")
        if self.log_format not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {_LOG_FORMATS}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "limb_order": self.limb_order,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


# Process-wide defaults, read from the environment at import
DEFAULT = SDKConfig.from_env()

__all__ = ["SDKConfig", "DEFAULT"]
