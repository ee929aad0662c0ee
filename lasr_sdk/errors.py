"""
Typed error classes for the LASR Python SDK.

Every failure in the SDK is raised synchronously at the point of construction
(builders fail fast; nothing is built partially). Callers can catch a specific
failure mode or the base `LasrSdkError`. Errors are deterministic: the same
input always fails the same way, so nothing here is retryable.

Hierarchy
---------
LasrSdkError (base)
 ├─ InvalidAmount        : unparseable, negative or over-precision amount
 ├─ InvalidAddress       : malformed 20-byte address string
 ├─ UnsupportedAction    : operation not valid for the target field / op
 ├─ MissingRequiredField : a builder's required input is absent
 └─ MalformedInput       : payload is not valid JSON or has the wrong shape
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Sequence, Tuple

__all__ = [
    "LasrSdkError",
    "InvalidAmount",
    "InvalidAddress",
    "UnsupportedAction",
    "MissingRequiredField",
    "MalformedInput",
]


@dataclass(eq=False)
class LasrSdkError(Exception):
    """
    Base class for all SDK errors.

    Attributes:
        message: Human-readable explanation.
        data:    Optional structured details (kept JSON-serializable).
    """

    message: str = "sdk error"
    data: Optional[Dict[str, Any]] = field(default=None)

    code: ClassVar[str] = "LASR/ERROR"

    def __post_init__(self) -> None:
        # Make Exception(args) meaningful for interop
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for host processes and logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


@dataclass(eq=False)
class InvalidAmount(LasrSdkError):
    """Amount is not a number, is negative, has more than 18 decimals, or overflows U256."""

    value: Any = None

    code: ClassVar[str] = "LASR/INVALID_AMOUNT"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code}: {self.message} (value={self.value!r})"


@dataclass(eq=False)
class InvalidAddress(LasrSdkError):
    """Address is not `0x` followed by 40 hex characters."""

    value: Any = None

    code: ClassVar[str] = "LASR/INVALID_ADDRESS"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code}: {self.message} (value={self.value!r})"


@dataclass(eq=False)
class UnsupportedAction(LasrSdkError):
    """
    The requested action is not in the allowed set for the target.

    Raised for update-field actions (e.g. `push` on approvals) and for program
    ops with no registered handler.
    """

    target: Optional[str] = None
    action: Optional[str] = None
    allowed: Tuple[str, ...] = ()

    code: ClassVar[str] = "LASR/UNSUPPORTED_ACTION"

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f"[{self.target}] " if self.target else ""
        allowed = f" allowed={list(self.allowed)}" if self.allowed else ""
        return f"{self.code}: {where}{self.message} (action={self.action!r}){allowed}"


@dataclass(eq=False)
class MissingRequiredField(LasrSdkError):
    """One or more required inputs were absent (None)."""

    fields: Tuple[str, ...] = ()

    code: ClassVar[str] = "LASR/MISSING_REQUIRED_FIELD"

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.fields:
            return f"{self.code}: {self.message} ({', '.join(self.fields)})"
        return f"{self.code}: {self.message}"

    @classmethod
    def for_fields(cls, names: Sequence[str], *, where: str = "") -> "MissingRequiredField":
        prefix = f"{where}: " if where else ""
        return cls(
            message=f"{prefix}the following properties are undefined: {', '.join(names)}",
            fields=tuple(names),
        )


@dataclass(eq=False)
class MalformedInput(LasrSdkError):
    """The call payload (or a field payload) is not valid JSON or lacks the expected shape."""

    code: ClassVar[str] = "LASR/MALFORMED_INPUT"
