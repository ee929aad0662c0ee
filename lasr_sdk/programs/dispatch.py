"""
Op dispatch for programs.

A program is configuration, not a subclass: a name plus a table mapping op
names to handlers. Each handler takes the parsed `ComputeInputs` and returns
`Outputs` (or an iterable of `Instruction`, which is wrapped for it).

    token = Program("fungible").with_strategies(mint=mint, burn=burn)
    stdout_text = token.handle(stdin_text)

Every program supports ``update`` out of the box: it applies ``metadata``
and/or ``data`` objects from ``transactionInputs`` to the program account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Union

from .. import log as llog
from ..consts import THIS
from ..errors import MissingRequiredField, UnsupportedAction
from ..types import ComputeInputs, parse_compute_inputs
from .builders import build_update_instruction
from .instructions import Instruction
from .outputs import Outputs
from .program import ProgramUpdate, build_program_update_field

log = logging.getLogger(__name__)

HandlerResult = Union[Outputs, Iterable[Instruction]]
Handler = Callable[[ComputeInputs], HandlerResult]


def update_program(inputs: ComputeInputs) -> Outputs:
    """Extend the program account's metadata and/or data from transactionInputs."""
    txi = inputs.transaction.inputs()
    fields = []
    for name in ("metadata", "data"):
        value = txi.get(name)
        if value is not None:
            fields.append(build_program_update_field(field=name, action="extend", value=value))
    if not fields:
        raise MissingRequiredField(
            message="update: transactionInputs must carry metadata or data",
            fields=("metadata", "data"),
        )
    instruction = build_update_instruction(update=ProgramUpdate(THIS, fields))
    return Outputs(inputs, [instruction])


BUILTIN_STRATEGIES: Mapping[str, Handler] = MappingProxyType({"update": update_program})


@dataclass(frozen=True)
class Program:
    name: str = "program"
    strategies: Mapping[str, Handler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        merged = dict(BUILTIN_STRATEGIES)
        merged.update(self.strategies)
        object.__setattr__(self, "strategies", MappingProxyType(merged))

    @property
    def ops(self) -> tuple:
        return tuple(self.strategies)

    def with_strategies(self, **handlers: Handler) -> "Program":
        """A new program with `handlers` added (or replacing existing ops)."""
        merged = dict(self.strategies)
        merged.update(handlers)
        return Program(self.name, merged)

    def start(self, inputs: Union[ComputeInputs, Mapping[str, Any], str]) -> Outputs:
        """
        Dispatch on ``inputs.op``.

        Raises:
            UnsupportedAction: no handler is registered for the op.
            MalformedInput: the envelope cannot be parsed.
        """
        ci = parse_compute_inputs(inputs)
        handler = self.strategies.get(ci.op)
        if handler is None:
            raise UnsupportedAction(
                message=f"unknown method {ci.op!r}",
                target=self.name,
                action=ci.op,
                allowed=self.ops,
            )
        with llog.trace_scope():
            llog.bind(program=self.name, op=ci.op, caller=ci.transaction.from_)
            log.debug("dispatching op")
            result = handler(ci)
            if not isinstance(result, Outputs):
                result = Outputs(ci, result)
            log.debug("op produced %d instruction(s)", len(result.instructions))
        return result

    def handle(self, raw: Union[str, bytes]) -> str:
        """Pure entry point: envelope JSON text in, outputs JSON text out."""
        return self.start(parse_compute_inputs(raw)).serialize()


__all__ = ["Program", "Handler", "BUILTIN_STRATEGIES", "update_program"]
