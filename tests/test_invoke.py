"""Tests for wren._internal.invoke — calling sync and async callables."""

from wren._internal.invoke import invoke


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    async def test_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await invoke(double, 4) == 8

    async def test_kwargs(self) -> None:
        def greet(*, name: str) -> str:
            return f"hi {name}"

        assert await invoke(greet, name="ada") == "hi ada"
