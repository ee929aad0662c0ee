"""TokenOrProgramUpdate: the tagged union carried by update instructions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from ..errors import MalformedInput
from .program import ProgramUpdate
from .token import TokenUpdate


class UpdateKind(str, Enum):
    TOKEN = "tokenUpdate"
    PROGRAM = "programUpdate"


@dataclass(frozen=True)
class TokenOrProgramUpdate:
    kind: UpdateKind
    update: Union[TokenUpdate, ProgramUpdate]

    def __post_init__(self) -> None:
        try:
            kind = UpdateKind(self.kind)
        except ValueError as e:
            raise MalformedInput(f"unknown update kind {self.kind!r}") from e
        if getattr(self.update, "kind", None) != kind.value:
            raise MalformedInput(f"{kind.value} cannot carry {type(self.update).__name__}")
        object.__setattr__(self, "kind", kind)

    @classmethod
    def token_update(cls, update: TokenUpdate) -> "TokenOrProgramUpdate":
        return cls(UpdateKind.TOKEN, update)

    @classmethod
    def program_update(cls, update: ProgramUpdate) -> "TokenOrProgramUpdate":
        return cls(UpdateKind.PROGRAM, update)

    def to_json(self) -> Dict[str, Any]:
        return {self.kind.value: self.update.to_json()}


__all__ = ["UpdateKind", "TokenOrProgramUpdate"]
