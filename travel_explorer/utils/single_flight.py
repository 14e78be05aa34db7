"""
Per-key request coalescing for asyncio.

Concurrent callers asking for the same key share one running task. Callers
wait on a shield, so a caller that gets cancelled abandons only its own wait;
the shared task keeps running and its side effects (cache writes) still land.
"""

import asyncio
from typing import Awaitable, Callable, Dict, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlight(Generic[K, V]):
    """At most one in-flight operation per key."""

    def __init__(self):
        self._inflight: Dict[K, "asyncio.Task[V]"] = {}

    async def do(self, key: K, fn: Callable[[], Awaitable[V]]) -> V:
        """Run `fn` for `key` unless a run is already in flight, then await it."""
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        return await asyncio.shield(task)

    def _forget(self, key: K, task: "asyncio.Task[V]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # mark the outcome as observed even when every waiter went away
        if not task.cancelled():
            task.exception()
