"""
Version helpers for the LASR Python SDK.
We keep a static __version__ (PEP 440) and a structured accessor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Bump this when publishing
__version__ = "0.1.0"

# Envelope version emitted by programs built with this SDK
PROTOCOL_VERSION = 1


@dataclass(frozen=True)
class VersionInfo:
    base: str
    protocol: int
    note: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        s = f"{self.base} (protocol v{self.protocol})"
        return s if not self.note else f"{s} {self.note}"


def version_info() -> VersionInfo:
    """Structured version info (SDK version plus wire protocol version)."""
    return VersionInfo(base=__version__, protocol=PROTOCOL_VERSION)


def version() -> str:
    """Human-friendly string, e.g. '0.1.0 (protocol v1)'."""
    return str(version_info())


__all__ = ["__version__", "PROTOCOL_VERSION", "VersionInfo", "version_info", "version"]
