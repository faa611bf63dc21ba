"""Error construction, wrapping and chain traversal.

A chain starts at any exception and follows cause links until a node has no
cause or its cause is not an exception:

    >>> root = new("connection refused")
    >>> err = wrap(wrap(root, "fetch user"), "load profile")
    >>> str(err)
    'load profile: fetch user: connection refused'
    >>> cause(err) is root
    True

A node's cause is its ``cause`` attribute when it defines one (library errors,
and foreign classes carrying a ``cause`` field), otherwise the explicit
``__cause__`` set by ``raise ... from ...``. Implicit ``__context__`` is never
followed.
"""

from __future__ import annotations

import inspect
import traceback
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from .config import settings_or_none

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import FrameType

    from .types import JsonDict

C = TypeVar("C", bound=BaseException)
E = TypeVar("E", bound=BaseException)
K = TypeVar("K", bound=BaseException)

SEPARATOR = ": "

_MISSING = object()

# Frames from these modules are dropped from captured stacks
_INTERNAL_MODULES = frozenset({__name__, "errchain.result"})

_current_frame = inspect.currentframe


# ═══════════════════════════════════════════════════════════════════════════════
# Stack Capture
# ═══════════════════════════════════════════════════════════════════════════════


def _capture_stack(name: str, message: str) -> str | None:
    """Best-effort creation-site stack. None when disabled, misconfigured, or frames are unavailable."""
    settings = settings_or_none()
    if settings is None or not settings.capture_stack or (frame := _current_frame()) is None:
        return None
    caller: FrameType | None = frame
    while caller is not None and caller.f_globals.get("__name__") in _INTERNAL_MODULES:
        caller = caller.f_back
    del frame
    if caller is None:
        return None
    frames = traceback.extract_stack(caller, limit=settings.stack_limit)
    return f"{name}: {message}\n" + "".join(traceback.format_list(frames))


# ═══════════════════════════════════════════════════════════════════════════════
# Error Types
# ═══════════════════════════════════════════════════════════════════════════════


class Error(Exception):
    """Error whose string form is its full causal chain.

    ``message``, ``cause`` and ``stack`` are set once at construction and are
    read-only afterwards. Subclasses may add public attributes; they are
    carried through ``to_dict()``. ``name`` defaults to the class name; a
    subclass may override it with a class attribute or assign it in ``__init__``.

    Example:
        >>> class QuotaError(Error):
        ...     def __init__(self, message: str, code: int) -> None:
        ...         super().__init__(message)
        ...         self.code = code
        >>> QuotaError("over quota", 429).to_dict()["code"]
        429
    """

    name: str = "Error"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "name" not in cls.__dict__:
            cls.name = cls.__name__

    def __init__(self, message: str = "", *, cause: object = None) -> None:
        super().__init__(message)
        self._message = message
        self._cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause
        self._stack = _capture_stack(self.name, message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def stack(self) -> str | None:
        """Creation-site stack, or None when capture was unavailable."""
        return self._stack

    @property
    def cause(self) -> object:
        """Direct cause as given at construction (may be a non-exception value)."""
        return self._cause

    def __str__(self) -> str:
        return SEPARATOR.join(messages(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r})"

    def to_dict(self) -> JsonDict:
        """Structured form: name, message, stack, cause (nested), then public attributes."""
        from .types import to_dict
        return to_dict(self)

    def to_json(self) -> str:
        """JSON rendering of to_dict()."""
        from .types import to_json
        return to_json(self)


class WrappedError(Error, Generic[C]):
    """Error that records another exception as its direct cause."""

    def __init__(self, message: str, cause: C) -> None:
        super().__init__(message, cause=cause)

    @property
    def cause(self) -> C:
        return self._cause  # type: ignore[return-value]

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._message, self._cause), self.__dict__)


# ═══════════════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════════════


def new(message: str) -> Error:
    """Create a terminal error (no cause)."""
    return Error(message)


def wrap(original: E, message: str) -> WrappedError[E]:
    """Wrap ``original`` with context. ``result.cause is original`` always holds."""
    return WrappedError(message, original)


new_error = new


# ═══════════════════════════════════════════════════════════════════════════════
# Traversal
# ═══════════════════════════════════════════════════════════════════════════════


def _raw_cause(node: BaseException) -> object:
    """Direct cause of ``node`` without filtering non-exception values."""
    c = getattr(node, "cause", _MISSING)
    return node.__cause__ if c is _MISSING else c


def _cause_of(node: BaseException) -> BaseException | None:
    c = _raw_cause(node)
    return c if isinstance(c, BaseException) else None


def _message_of(node: BaseException) -> str:
    return node.message if isinstance(node, Error) else str(node)


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and each exception cause after it, outermost first."""
    node = err
    while node is not None:
        yield node
        node = _cause_of(node)


def messages(err: BaseException | None) -> list[str]:
    """Per-node messages of the chain, outermost first."""
    return [_message_of(node) for node in iter_chain(err)]


@overload
def cause(err: WrappedError[WrappedError[WrappedError[E]]]) -> E: ...  # type: ignore[overload-overlap]
@overload
def cause(err: WrappedError[WrappedError[E]]) -> E: ...  # type: ignore[overload-overlap]
@overload
def cause(err: WrappedError[E]) -> E: ...  # type: ignore[overload-overlap]
@overload
def cause(err: E) -> BaseException: ...
def cause(err: BaseException) -> BaseException:
    """Deepest cause of ``err``: the last exception reachable through cause links.

    Returns ``err`` itself when it has no exception cause. Traversal stops at a
    node whose cause is a non-exception value, and that node is returned.
    """
    node = err
    while (nxt := _cause_of(node)) is not None:
        node = nxt
    return node


def is_(err: BaseException | None, target: BaseException) -> bool:
    """Whether ``target`` is ``err`` or one of its causes (identity, not equality)."""
    if err is None:
        return False
    return any(node is target for node in iter_chain(err))


def as_(err: BaseException | None, kind: type[K] | tuple[type[K], ...]) -> K | None:
    """First node of the chain that is an instance of ``kind``, or None."""
    for node in iter_chain(err):
        if isinstance(node, kind):
            return node
    return None


is_error = is_
as_error = as_
