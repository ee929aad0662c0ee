"""
lasr_sdk.address
================

20-byte ledger addresses and the address-or-namespace reference.

Format
------
An address is ``0x`` followed by exactly 40 hex characters. The string is kept
exactly as given (case included) so that serializing an address returns the
input unchanged; use `Address.normalized` for case-insensitive comparisons.

Namespaces
----------
`AddressOrNamespace` is either a concrete `Address` or one of the reserved
namespace tokens:

- ``"this"`` : resolved by the runtime to the calling program's own address
- ``"zero"`` : the canonical null / burn address

Serialization emits the address string for the address variant and the
literal token for the namespace variant, never both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .consts import ADDRESS_HEX_LEN, THIS, ZERO_VALUE
from .errors import InvalidAddress

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{%d}" % ADDRESS_HEX_LEN)

__all__ = [
    "Address",
    "Namespace",
    "AddressOrNamespace",
    "AddressLike",
    "is_address",
    "as_address",
]


def is_address(value: Any) -> bool:
    """True iff `value` is a ``0x`` + 40-hex-character string."""
    return isinstance(value, str) and _ADDRESS_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class Address:
    value: str

    def __post_init__(self) -> None:
        if isinstance(self.value, Address):
            object.__setattr__(self, "value", self.value.value)
        if not is_address(self.value):
            raise InvalidAddress(
                f"address must be 0x followed by {ADDRESS_HEX_LEN} hex characters",
                value=self.value,
            )

    @property
    def normalized(self) -> str:
        return self.value.lower()

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.value[2:])

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Address":
        return cls("0x" + bytes(raw).hex())

    def to_json(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class Namespace(str, Enum):
    THIS = "this"
    ZERO = "zero"

    def to_json(self) -> str:
        return self.value


AddressLike = Union["AddressOrNamespace", Address, Namespace, str]


@dataclass(frozen=True, init=False)
class AddressOrNamespace:
    """
    Tagged reference: exactly one of `address` / `namespace` is set.

    Build with ``AddressOrNamespace(Address(...))``,
    ``AddressOrNamespace(Namespace.THIS)``, or `AddressOrNamespace.parse`.
    """

    address: Optional[Address] = None
    namespace: Optional[Namespace] = None

    def __init__(self, value: Union[Address, Namespace, str]) -> None:
        if isinstance(value, Address):
            address, namespace = value, None
        elif isinstance(value, Namespace):
            address, namespace = None, value
        elif isinstance(value, str) and value in (THIS, ZERO_VALUE):
            address, namespace = None, Namespace(value)
        elif isinstance(value, str):
            address, namespace = Address(value), None
        else:
            raise InvalidAddress(
                "expected an Address, a namespace token or an address string",
                value=value,
            )
        object.__setattr__(self, "address", address)
        object.__setattr__(self, "namespace", namespace)

    @classmethod
    def this(cls) -> "AddressOrNamespace":
        return cls(Namespace.THIS)

    @classmethod
    def zero(cls) -> "AddressOrNamespace":
        return cls(Namespace.ZERO)

    @classmethod
    def parse(cls, value: AddressLike) -> "AddressOrNamespace":
        """Coerce an AddressOrNamespace, Address, Namespace, or raw string."""
        if isinstance(value, AddressOrNamespace):
            return value
        return cls(value)

    @property
    def is_namespace(self) -> bool:
        return self.namespace is not None

    def to_json(self) -> str:
        if self.namespace is not None:
            return self.namespace.value
        assert self.address is not None
        return self.address.value

    def __str__(self) -> str:
        return self.to_json()


def as_address(value: Union[Address, str]) -> Address:
    """Coerce an Address or raw address string (namespaces are rejected)."""
    if isinstance(value, Address):
        return value
    return Address(value)
