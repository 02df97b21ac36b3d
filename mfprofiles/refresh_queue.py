"""Single-slot queue that serializes profile cache refreshes."""

from __future__ import annotations

import asyncio
from typing import Any, Iterable

from .cache import ProfileCache
from .models import DEFAULT_PROFILE_TYPE


class RefreshQueue:
    """Runs at most one refresh at a time and coalesces the rest.

    While a refresh is in flight, further submissions share a single queued
    follow-up that runs with the most recently submitted types.
    """

    def __init__(self, cache: ProfileCache) -> None:
        self._cache = cache
        self._running: asyncio.Task[Any] | None = None
        self._pending: asyncio.Task[Any] | None = None
        self._latest_types: tuple[str, ...] = (DEFAULT_PROFILE_TYPE,)

    @property
    def idle(self) -> bool:
        return (self._running is None or self._running.done()) and self._pending is None

    async def submit(self, known_types: Iterable[str] = (DEFAULT_PROFILE_TYPE,)) -> None:
        """Request a refresh and wait until one covering this request finishes."""

        self._latest_types = tuple(known_types)
        loop = asyncio.get_running_loop()
        if self._pending is not None:
            task = self._pending
        elif self._running is None or self._running.done():
            task = self._running = loop.create_task(self._run(self._latest_types))
        else:
            task = self._pending = loop.create_task(self._run_after(self._running))
        await asyncio.shield(task)

    async def wait(self) -> None:
        """Wait for the in-flight and queued refreshes, if any."""

        for task in (self._running, self._pending):
            if task is not None:
                await asyncio.shield(task)

    async def _run(self, known_types: tuple[str, ...]) -> None:
        await self._cache.refresh(known_types)

    async def _run_after(self, previous: asyncio.Task[Any]) -> None:
        await asyncio.wait({previous})
        self._running = self._pending
        self._pending = None
        # Queued submissions may have replaced the types while waiting.
        await self._run(self._latest_types)


__all__ = ["RefreshQueue"]
