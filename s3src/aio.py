from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from anyio import to_thread

from .source import S3Src

if TYPE_CHECKING:
    from collections.abc import Callable

    from .settings import S3SrcSettings


async def _run_sync(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    return await to_thread.run_sync(partial(func, *args, **kwargs))


class AsyncS3Src:
    """Awaitable facade over :class:`S3Src` for async schedulers.

    Each blocking call runs in a worker thread; the wrapped source's lock
    still serialises reads and state changes.
    """

    def __init__(self, source: S3Src | None = None, settings: S3SrcSettings | None = None):
        self.source = source if source is not None else S3Src(settings)

    async def start(self, uri: str) -> None:
        await _run_sync(self.source.start, uri)

    async def stop(self) -> None:
        await _run_sync(self.source.stop)

    async def get_size(self) -> int | None:
        return await _run_sync(self.source.get_size)

    async def read(self, offset: int, length: int, buffer: bytearray | memoryview) -> int:
        return await _run_sync(self.source.read, offset, length, buffer)

    async def read_bytes(self, offset: int, length: int) -> bytes:
        buffer = bytearray(max(length, 0))
        size = await self.read(offset, length, buffer)
        return bytes(buffer[:size])

    def seek(self, start: int, stop: int | None = None) -> None:
        self.source.seek(start, stop)
