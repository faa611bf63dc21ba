"""Type aliases and the serialized form of error chains.

Uses a Pydantic model for the serialized record and orjson for JSON output.
"""

from __future__ import annotations

import traceback
from typing import Any, Union

import orjson
from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer

from .chain import Error, _message_of, _raw_cause, iter_chain

# ═══════════════════════════════════════════════════════════════════════════════
# Type Aliases
# ═══════════════════════════════════════════════════════════════════════════════

# JSON type aliases - using Any for recursive slots
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]
JsonMapping = dict[str, JsonValue]

# Keys built from the exception itself, never copied from instance attributes
_RESERVED = frozenset({"name", "message", "stack", "cause"})
_HEAD = ("name", "message", "stack")


# ═══════════════════════════════════════════════════════════════════════════════
# Serialized Record
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorRecord(BaseModel):
    """One link of a serialized chain. Extra public attributes of the source error ride along as model extras.

    ``cause`` holds a non-exception cause verbatim and is left unset (and omitted
    from dumps) otherwise. Exception causes get their own record; to_dict() and
    to_json() join the records without nesting models.
    """

    model_config = ConfigDict(
        frozen=True, extra="allow", arbitrary_types_allowed=True, revalidate_instances="never",
        json_schema_extra={"title": "Error Record"},
    )

    name: str
    message: str
    stack: str | None = None
    cause: Any = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorRecord:
        """Record for ``exc`` alone, without following exception causes."""
        fields: JsonDict = {"name": _name_of(exc), "message": _message_of(exc), "stack": _stack_of(exc)}
        raw = _raw_cause(exc)
        if raw is not None and not isinstance(raw, BaseException):
            fields["cause"] = raw
        for key, value in vars(exc).items():
            if not key.startswith("_") and key not in _RESERVED:
                fields[key] = value
        return cls.model_construct(**fields)

    @model_serializer(mode="wrap")
    def _omit_absent_cause(self, handler: SerializerFunctionWrapHandler) -> JsonDict:
        data = handler(self)
        if "cause" not in self.model_fields_set:
            data.pop("cause", None)
        return data

    def to_dict(self) -> JsonDict:
        return self.model_dump()


def _name_of(exc: BaseException) -> str:
    return exc.name if isinstance(exc, Error) else type(exc).__name__


def _stack_of(exc: BaseException) -> str | None:
    if isinstance(exc, Error):
        return exc.stack
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__, chain=False))


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def records(err: BaseException) -> list[ErrorRecord]:
    """One record per chain node, outermost first."""
    return [ErrorRecord.from_exception(node) for node in iter_chain(err)]


def to_dict(err: BaseException) -> JsonDict:
    """Structured mapping for ``err``: name, message, stack, cause (if any), then public attributes.

    Built from the root outward, so chain length is not bounded by recursion limits.
    """
    inner: JsonDict | None = None
    for record in reversed(records(err)):
        layer = record.to_dict()
        if inner is not None:
            layer = {**{k: layer.pop(k) for k in _HEAD}, "cause": inner, **layer}
        inner = layer
    return inner  # type: ignore[return-value]


def to_json(err: BaseException) -> str:
    """JSON string of to_dict(). Values orjson can't encode are rendered with str().

    Each link is encoded on its own and spliced into its parent's ``cause`` slot,
    since orjson refuses deeply nested input.
    """
    *outer, last = records(err)
    opens: list[bytes] = []
    closes: list[bytes] = []
    for record in outer:
        layer = record.to_dict()
        opens.append(_dumps({k: layer.pop(k) for k in _HEAD})[:-1] + b',"cause":')
        closes.append(b"," + _dumps(layer)[1:] if layer else b"}")
    return b"".join([*opens, _dumps(last.to_dict()), *reversed(closes)]).decode()


def _dumps(value: object) -> bytes:
    return orjson.dumps(value, default=str, option=orjson.OPT_NON_STR_KEYS)
