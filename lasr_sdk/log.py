"""
lasr_sdk.log
------------

Structured logging for programs built on the SDK.

Program output (the instruction payload) travels over stdout, so records
always go to stderr or a caller-supplied stream. Two formats:

- JSON lines, one object per record (default when the stream is not a TTY)
- a one-line text form for interactive use

Fields bound with `bind` (trace_id, program, op, caller, ...) live in a
`ContextVar` and are attached to every record emitted in that context.

Usage
-----
    from lasr_sdk import log as llog

    llog.configure(json=True, level="DEBUG")
    with llog.trace_scope():
        llog.bind(program="fungible", op="mint")
        logging.getLogger(__name__).debug("built transfer")
"""

from __future__ import annotations

import datetime as _dt
import io
import json as _json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Union

DEFAULT_CONTEXT_KEYS = ("trace_id", "program", "op", "caller")

_FIELDS: ContextVar[Mapping[str, Any]] = ContextVar("lasr_log_fields", default={})

# Attributes every LogRecord carries; anything else on a record came from `extra=`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}


# ---------------------------------------------------------------------------
# Bound fields
# ---------------------------------------------------------------------------


def context() -> Dict[str, Any]:
    """Snapshot of the fields bound in the current context."""
    return dict(_FIELDS.get())


def bind(**fields: Any) -> None:
    _FIELDS.set({**_FIELDS.get(), **{k: _plain(v) for k, v in fields.items()}})


def unbind(*keys: str) -> None:
    _FIELDS.set({k: v for k, v in _FIELDS.get().items() if k not in keys})


def clear_context() -> None:
    _FIELDS.set({})


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """
    Bind a trace_id (generated when not given) for the duration of the block.
    Everything bound inside the block is dropped on exit.
    """
    token = _FIELDS.set(dict(_FIELDS.get()))
    tid = trace_id or short_uuid()
    bind(trace_id=tid)
    try:
        yield tid
    finally:
        _FIELDS.reset(token)


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _plain(v: Any) -> Any:
    """Reduce a value to something json.dumps accepts."""
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _plain(x) for k, x in v.items()}
    if is_dataclass(v) and not isinstance(v, type):
        return _plain(asdict(v))
    to_json = getattr(v, "to_json", None)
    if callable(to_json):
        return _plain(to_json())
    return str(v)


def _timestamp(record: logging.LogRecord) -> str:
    return _dt.datetime.fromtimestamp(record.created, _dt.timezone.utc).isoformat(timespec="milliseconds")


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _plain(v)
        for k, v in vars(record).items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


def _exc_text(record: logging.LogRecord) -> Optional[str]:
    if not record.exc_info:
        return None
    return "".join(traceback.format_exception(*record.exc_info)).rstrip()


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, bound fields, extras."""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        out.update(context())
        for k, v in _record_extras(record).items():
            out.setdefault(k, v)
        err = _exc_text(record)
        if err:
            out["err"] = err
        return _json.dumps(out, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    ``<ts> | <LEVEL> | <logger> | op=mint program=nft [extras] | <message>``
    """

    def format(self, record: logging.LogRecord) -> str:
        bound = context()
        head = [_timestamp(record), record.levelname, record.name]
        tags = [f"{k}={bound[k]}" for k in DEFAULT_CONTEXT_KEYS if bound.get(k) is not None]
        tags += [f"{k}={v}" for k, v in _record_extras(record).items() if k not in bound]
        if tags:
            head.append(" ".join(tags))
        line = " | ".join(head + [record.getMessage()])
        err = _exc_text(record)
        return f"{line}\n{err}" if err else line


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: Union[str, int] = "WARNING",
    stream: Optional[io.TextIOBase] = None,
    propagate_existing: bool = False,
) -> logging.Handler:
    """
    Install a stream handler on the root logger and return it.

    json:
        Force JSON (True) or text (False). None defers to ``LASR_LOG_FORMAT``,
        then to TTY detection (text on a terminal, JSON otherwise).
    level:
        Minimum level; ``LASR_LOG_LEVEL`` wins when set.
    stream:
        Destination, stderr by default. Never stdout.
    propagate_existing:
        Keep handlers already installed on the root logger.
    """
    out = stream if stream is not None else sys.stderr
    lvl = _level(os.environ.get("LASR_LOG_LEVEL") or level)

    root = logging.getLogger()
    if not propagate_existing:
        for h in list(root.handlers):
            root.removeHandler(h)
    root.setLevel(lvl)

    handler = logging.StreamHandler(out)
    handler.setLevel(lvl)
    handler.setFormatter(JSONFormatter() if _want_json(json, out) else TextFormatter())
    root.addHandler(handler)
    return handler


def configure_from_config(cfg: Any) -> logging.Handler:
    """Configure from an `SDKConfig` (its log_level and log_format)."""
    fmt = getattr(cfg, "log_format", "auto")
    return configure(
        json=None if fmt == "auto" else fmt == "json",
        level=getattr(cfg, "log_level", "WARNING"),
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "lasr_sdk")


def _level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def _want_json(flag: Optional[bool], stream: Any) -> bool:
    if flag is not None:
        return flag
    env = os.environ.get("LASR_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    isatty = getattr(stream, "isatty", None)
    return not (callable(isatty) and isatty())


__all__ = [
    "DEFAULT_CONTEXT_KEYS",
    "JSONFormatter",
    "TextFormatter",
    "bind",
    "unbind",
    "clear_context",
    "context",
    "trace_scope",
    "short_uuid",
    "configure",
    "configure_from_config",
    "get_logger",
]
