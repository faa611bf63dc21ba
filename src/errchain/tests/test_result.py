"""Tests for Result and the try_sync/try_async adapters.

Validates:
- Discrimination: exactly one of data/error is meaningful
- Identity of captured errors (no re-wrapping)
- Coercion of non-exception failure values
- Railway-style composition with wrap()
"""

from __future__ import annotations

import asyncio

import pytest

from errchain import Err, Error, Ok, Result, catch, clear_settings_cache, to_error, try_async, try_sync, wrap


# ═════════════════════════════════════════════════════════════════════════════
# Result
# ═════════════════════════════════════════════════════════════════════════════


def test_ok_construction() -> None:
    result: Result[int, Exception] = Ok(42)

    assert result.is_ok()
    assert not result.is_err()
    assert result.data == 42
    assert result.error is None
    assert result.unwrap() == 42
    assert bool(result)


def test_err_construction() -> None:
    err = ValueError("failed")
    result: Result[int, ValueError] = Err(err)

    assert result.is_err()
    assert result.data is None
    assert result.error is err
    assert result.unwrap_err() is err
    assert not result


def test_unpacks_as_data_error() -> None:
    data, error = Ok("value")
    assert (data, error) == ("value", None)

    boom = RuntimeError("boom")
    data, error = Err(boom)
    assert data is None and error is boom


def test_unwrap_reraises_stored_error() -> None:
    err = wrap(ValueError("root"), "top")

    with pytest.raises(Error) as info:
        Err(err).unwrap()

    assert info.value is err


def test_unwrap_err_on_ok_raises() -> None:
    with pytest.raises(RuntimeError, match="unwrap_err"):
        Ok(1).unwrap_err()


def test_unwrap_or_and_else() -> None:
    assert Err(ValueError("x")).unwrap_or(7) == 7
    assert Ok(3).unwrap_or(7) == 3
    assert Err(ValueError("abc")).unwrap_or_else(lambda e: len(str(e))) == 3


def test_map_and_map_err() -> None:
    assert Ok(5).map(lambda x: x * 2) == Ok(10)

    err = ValueError("bad")
    assert Err(err).map(lambda x: x * 2).error is err

    wrapped = Err(err).map_err(lambda e: wrap(e, "parse config"))
    assert str(wrapped.error) == "parse config: bad"
    assert wrapped.error.cause is err
    assert Ok(1).map_err(lambda e: wrap(e, "never")) == Ok(1)


def test_flat_map_short_circuits() -> None:
    def positive(n: int) -> Result[int, Exception]:
        return Ok(n) if n > 0 else Err(ValueError("must be positive"))

    assert Ok(5).flat_map(positive).unwrap() == 5
    assert str(Ok(-5).flat_map(positive).error) == "must be positive"

    err = KeyError("k")
    assert Err(err).and_then(positive).error is err


def test_or_else_recovers() -> None:
    result = (
        Err(ConnectionError("primary unavailable"))
        .or_else(lambda _: Err(ConnectionError("backup unavailable")))
        .or_else(lambda _: Ok("cached data"))
    )

    assert result.unwrap() == "cached data"


def test_match_forces_both_arms() -> None:
    assert Ok(2).match(ok=lambda v: f"ok {v}", err=lambda e: f"err {e}") == "ok 2"
    assert Err(ValueError("x")).match(ok=lambda v: f"ok {v}", err=lambda e: f"err {e}") == "err x"


def test_structural_pattern_matching() -> None:
    match Ok(3):
        case Result(data=value, error=None):
            assert value == 3
        case _:
            pytest.fail("expected success")


def test_repr() -> None:
    assert repr(Ok(1)) == "Ok(1)"
    assert repr(Err(ValueError("x"))) == "Err(ValueError('x'))"


# ═════════════════════════════════════════════════════════════════════════════
# to_error
# ═════════════════════════════════════════════════════════════════════════════


def test_to_error_passes_exceptions_through() -> None:
    err = ValueError("x")
    assert to_error(err) is err


def test_to_error_coerces_plain_values() -> None:
    err = to_error("plain string")

    assert isinstance(err, Error)
    assert err.message == "plain string"
    assert str(to_error(404)) == "404"


# ═════════════════════════════════════════════════════════════════════════════
# try_sync
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("value", [42, "text", None, 0, []])
def test_try_sync_success(value: object) -> None:
    result = try_sync(lambda: value)

    assert result.is_ok()
    assert result.data is value
    assert result.error is None


def test_try_sync_failure_keeps_instance() -> None:
    err = wrap(KeyError("k"), "lookup")

    def boom() -> None:
        raise err

    result = try_sync(boom)

    assert result.is_err()
    assert result.data is None
    assert result.error is err


def test_try_sync_calls_immediately() -> None:
    calls: list[int] = []
    try_sync(lambda: calls.append(1))
    assert calls == [1]


def test_try_sync_lets_base_exceptions_through() -> None:
    def interrupt() -> None:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        try_sync(interrupt)


# ═════════════════════════════════════════════════════════════════════════════
# try_async
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [42, None, {"k": "v"}])
async def test_try_async_success(value: object) -> None:
    async def produce() -> object:
        await asyncio.sleep(0)
        return value

    data, error = await try_async(produce())

    assert data is value
    assert error is None


@pytest.mark.asyncio
async def test_try_async_failure_keeps_instance() -> None:
    err = ValueError("x")

    async def fail() -> None:
        await asyncio.sleep(0)
        raise err

    result = await try_async(fail())

    assert result.is_err()
    assert result.data is None
    assert result.error is err


@pytest.mark.asyncio
async def test_try_async_accepts_futures() -> None:
    loop = asyncio.get_running_loop()
    ok_future: asyncio.Future[str] = loop.create_future()
    ok_future.set_result("done")
    bad_future: asyncio.Future[str] = loop.create_future()
    bad_future.set_exception(TimeoutError("slow"))

    assert (await try_async(ok_future)).data == "done"
    assert isinstance((await try_async(bad_future)).error, TimeoutError)


@pytest.mark.asyncio
async def test_try_async_lets_cancellation_through() -> None:
    async def cancelled() -> None:
        raise asyncio.CancelledError

    with pytest.raises(asyncio.CancelledError):
        await try_async(cancelled())


# ═════════════════════════════════════════════════════════════════════════════
# catch
# ═════════════════════════════════════════════════════════════════════════════


def test_catch_sync_function() -> None:
    @catch
    def parse(s: str) -> int:
        return int(s)

    assert parse("7") == Ok(7)
    assert isinstance(parse("x").error, ValueError)
    assert parse.__name__ == "parse"


@pytest.mark.asyncio
async def test_catch_async_function() -> None:
    @catch
    async def fetch(ok: bool) -> str:
        await asyncio.sleep(0)
        if not ok:
            raise ConnectionError("refused")
        return "payload"

    assert (await fetch(True)).data == "payload"
    assert str((await fetch(False)).error) == "refused"


@pytest.mark.parametrize(("key", "value"), [
    ("ERRCHAIN_STACK_LIMIT", "abc"),
    ("ERRCHAIN_CAPTURE_STACK", "maybe"),
    ("ERRCHAIN_LOG_DEBUG_FAILURES", "sometimes"),
])
def test_try_sync_tolerates_invalid_environment(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)
    clear_settings_cache()

    data, err = try_sync(lambda: 1 / 0)

    assert data is None
    assert isinstance(err, ZeroDivisionError)
    assert str(to_error("plain string")) == "plain string"


@pytest.mark.asyncio
async def test_try_async_tolerates_invalid_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRCHAIN_STACK_LIMIT", "abc")
    clear_settings_cache()

    async def fail() -> None:
        raise ConnectionError("refused")

    result = await try_async(fail())

    assert isinstance(result.error, ConnectionError)
    assert (await try_async(asyncio.sleep(0, result="ok"))).data == "ok"
