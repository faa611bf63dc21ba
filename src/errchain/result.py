"""Result type and adapters from raising code to explicit success/failure values.

A Result carries either ``data`` (success) or ``error`` (failure), never both:

    >>> data, err = try_sync(lambda: int("42"))
    >>> data, err
    (42, None)
    >>> data, err = try_sync(lambda: int("x"))
    >>> data is None, type(err).__name__
    (True, 'ValueError')

Only ``Exception`` subclasses are captured. ``asyncio.CancelledError``,
``KeyboardInterrupt`` and ``SystemExit`` propagate unchanged.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import TYPE_CHECKING, Callable, Generic, ParamSpec, TypeVar

from .chain import Error
from .config import settings_or_none
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterator

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)
U = TypeVar("U")
F = TypeVar("F", bound=BaseException)
P = ParamSpec("P")

_OK = True
_ERR = False


class Result(Generic[T, E]):
    """Discriminated union of success (``data``) and failure (``error``).

    Unpacks as ``data, error``. On success ``error`` is None; ``data`` may
    legitimately be None too. On failure ``data`` is None.

    Examples:
        >>> Ok(21).map(lambda x: x * 2).unwrap()
        42
        >>> Err(ValueError("boom")).map(lambda x: x * 2).is_err()
        True
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("data", "error")

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    # ─── Discrimination ─────────────────────────────────────────────────

    @property
    def data(self) -> T | None:
        return self._value if self._is_ok else None  # type: ignore[return-value]

    @property
    def error(self) -> E | None:
        return None if self._is_ok else self._value  # type: ignore[return-value]

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    # ─── Value Extraction ───────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract data. Re-raises the stored error on failure so its chain stays intact."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise self._value  # type: ignore[misc]

    def unwrap_err(self) -> E:
        """Extract error. Raises RuntimeError on success."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_err() on Ok: {self._value!r}")

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_ok else default  # type: ignore[return-value]

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        """Extract data or compute it from the error via f."""
        return self._value if self._is_ok else f(self._value)  # type: ignore[return-value,arg-type]

    # ─── Combinators ────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Apply f to data. Signature: Result[T,E] → (T→U) → Result[U,E]"""
        return Result(f(self._value), _OK) if self._is_ok else Result(self._value, _ERR)  # type: ignore[arg-type]

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Apply f to error, e.g. ``r.map_err(lambda e: wrap(e, "load config"))``."""
        return Result(f(self._value), _ERR) if not self._is_ok else Result(self._value, _OK)  # type: ignore[arg-type]

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain an operation that can fail. Short-circuits on failure."""
        return f(self._value) if self._is_ok else Result(self._value, _ERR)  # type: ignore[arg-type]

    and_then = flat_map

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """On failure, apply f to recover. On success, pass through."""
        return f(self._value) if not self._is_ok else Result(self._value, _OK)  # type: ignore[arg-type]

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Exhaustive pattern match. Forces handling both outcomes."""
        return ok(self._value) if self._is_ok else err(self._value)  # type: ignore[arg-type]

    # ─── Dunder Methods ─────────────────────────────────────────────────

    __bool__ = lambda self: self._is_ok  # noqa: E731
    __repr__ = lambda self: f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"  # noqa: E731

    def __eq__(self, other: object) -> bool:
        return self._is_ok == other._is_ok and self._value == other._value if isinstance(other, Result) else NotImplemented

    __hash__ = lambda self: hash((self._is_ok, self._value))  # noqa: E731

    def __iter__(self) -> Iterator[T | E | None]:
        """Unpack as ``data, error``."""
        yield self.data
        yield self.error


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct a success."""
    return Result(value, _OK)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct a failure."""
    return Result(error, _ERR)


# ═══════════════════════════════════════════════════════════════════════════════
# Adapters
# ═══════════════════════════════════════════════════════════════════════════════


def to_error(value: object) -> BaseException:
    """Exceptions pass through unchanged; any other value becomes ``Error(str(value))``."""
    return value if isinstance(value, BaseException) else Error(str(value))


def _failure(exc: object) -> Result[T, BaseException]:
    err = to_error(exc)
    if (settings := settings_or_none()) is not None and settings.log_debug_failures:
        get_logger("errchain.result").error_chain("failure captured", err, level="debug")
    return Result(err, _ERR)


def try_sync(fn: Callable[[], T]) -> Result[T, BaseException]:
    """Call ``fn`` now; return its value as data or what it raised as error."""
    try:
        data = fn()
    except Exception as e:
        return _failure(e)
    return Result(data, _OK)


async def try_async(aw: Awaitable[T]) -> Result[T, BaseException]:
    """Await ``aw``; return its value as data or what it raised as error.

    No timeout, retry or cancellation is added. If ``aw`` never settles,
    neither does this.
    """
    try:
        data = await aw
    except Exception as e:
        return _failure(e)
    return Result(data, _OK)


def catch(func: Callable[P, T]) -> Callable[P, Result[T, BaseException]]:
    """Decorator: make ``func`` return a Result instead of raising. Works for sync and async functions.

    Example:
        >>> @catch
        ... def parse(s: str) -> int:
        ...     return int(s)
        >>> parse("7").data
        7
    """
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, BaseException]:
            return await try_async(func(*args, **kwargs))  # type: ignore[arg-type]

        return async_wrapper  # type: ignore[return-value]

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, BaseException]:
        return try_sync(lambda: func(*args, **kwargs))

    return wrapper
