"""Tests for mdnegotiate._internal.invoke — uniform sync/async calls."""

import threading

import pytest

from mdnegotiate._internal.invoke import invoke


class TestInvoke:
    @pytest.mark.anyio
    async def test_sync(self) -> None:
        assert await invoke(lambda a, b=0: a + b, 1, b=2) == 3

    @pytest.mark.anyio
    async def test_async(self) -> None:
        async def add(a: int, b: int) -> int:
            return a + b

        assert await invoke(add, 1, 2) == 3

    @pytest.mark.anyio
    async def test_sync_inline_by_default(self) -> None:
        seen: list[threading.Thread] = []
        await invoke(lambda: seen.append(threading.current_thread()))
        assert seen == [threading.current_thread()]

    @pytest.mark.anyio
    async def test_sync_in_thread(self) -> None:
        seen: list[threading.Thread] = []
        await invoke(lambda: seen.append(threading.current_thread()), in_thread=True)
        assert seen[0] is not threading.current_thread()

    @pytest.mark.anyio
    async def test_sync_returning_awaitable(self) -> None:
        async def inner() -> str:
            return "done"

        assert await invoke(lambda: inner()) == "done"
