"""Tests for request context propagation (contextvars) and request id sanitizing."""

import asyncio

from bookshelf.middleware.request_context import sanitize_request_id
from bookshelf.shared.context import (
    current_context,
    elapsed_millis,
    get_actor_id,
    get_request_id,
    request_scope,
    set_actor_id,
)


def test_outside_scope_everything_is_empty() -> None:
    assert current_context() is None
    assert get_request_id() is None
    assert get_actor_id() is None
    assert elapsed_millis() == 0.0


def test_set_actor_outside_scope_is_noop() -> None:
    set_actor_id("user-1")
    assert get_actor_id() is None


def test_scope_binds_and_resets() -> None:
    """Values are visible inside the scope and cleared after it."""
    with request_scope("req-1") as ctx:
        assert get_request_id() == "req-1"
        assert get_actor_id() is None
        set_actor_id("user-1")
        assert get_actor_id() == "user-1"
        assert ctx.actor_id == "user-1"
        assert elapsed_millis() >= 0.0
    assert get_request_id() is None
    assert get_actor_id() is None


def test_scope_resets_when_block_raises() -> None:
    try:
        with request_scope("req-err"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert get_request_id() is None


def test_nested_scope_restores_outer() -> None:
    with request_scope("outer", actor_id="a"):
        with request_scope("inner"):
            assert get_request_id() == "inner"
            assert get_actor_id() is None
        assert get_request_id() == "outer"
        assert get_actor_id() == "a"


async def test_child_tasks_see_actor_set_later_in_request() -> None:
    """set_actor_id mutates the shared context, so tasks started afterwards see it."""
    with request_scope("req-task"):
        set_actor_id("user-9")

        async def read() -> tuple[str | None, str | None]:
            return get_request_id(), get_actor_id()

        assert await asyncio.create_task(read()) == ("req-task", "user-9")


async def test_concurrent_requests_are_isolated() -> None:
    """Interleaved requests never observe each other's ids or actors."""

    async def handle(request_id: str, actor_id: str) -> tuple[str | None, str | None]:
        with request_scope(request_id):
            await asyncio.sleep(0)
            set_actor_id(actor_id)
            await asyncio.sleep(0.01)
            return get_request_id(), get_actor_id()

    results = await asyncio.gather(
        *(handle(f"req-{i}", f"user-{i}") for i in range(20))
    )
    assert results == [(f"req-{i}", f"user-{i}") for i in range(20)]
    assert get_request_id() is None


def test_sanitize_request_id_keeps_safe_value() -> None:
    assert sanitize_request_id("abc-123_XYZ") == "abc-123_XYZ"
    assert sanitize_request_id("  padded  ") == "padded"


def test_sanitize_request_id_replaces_unsafe_values() -> None:
    """Missing, too long or log-injecting ids are replaced by a UUID."""
    for raw in (None, "", "a" * 65, "bad id", "line\nbreak", "semi;colon"):
        value = sanitize_request_id(raw)
        assert value != raw
        assert len(value) == 36
