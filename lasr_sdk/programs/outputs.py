"""Outputs: the payload a program hands back to the runtime."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from ..errors import MalformedInput
from ..types import ComputeInputs, parse_compute_inputs
from .instructions import Instruction


@dataclass(frozen=True, init=False)
class Outputs:
    """
    The call envelope echoed back with the ordered instructions it produced.

    Instructions are kept exactly as given: never reordered, merged or
    deduplicated.
    """

    compute_inputs: ComputeInputs
    instructions: Tuple[Instruction, ...]

    def __init__(
        self,
        compute_inputs: Union[ComputeInputs, Mapping[str, Any], str],
        instructions: Iterable[Instruction],
    ) -> None:
        items = tuple(instructions)
        for i in items:
            if not isinstance(i, Instruction):
                raise MalformedInput(f"outputs accept Instruction values, got {type(i).__name__}")
        object.__setattr__(self, "compute_inputs", parse_compute_inputs(compute_inputs))
        object.__setattr__(self, "instructions", items)

    def to_json(self) -> Dict[str, Any]:
        return {
            "computeInputs": self.compute_inputs.echo(),
            "instructions": [i.to_json() for i in self.instructions],
        }

    def serialize(self) -> str:
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)


__all__ = ["Outputs"]
