"""Read-through cache holding the merged conversation list.

The cache owns a single entry, the list of every known conversation, and
mutates it in exactly two ways:

- ``optimistic_insert`` prepends one entry without touching the network;
- a fetch (from ``read`` when the value is stale, or from ``reconcile``)
  replaces the whole list.

Every fetch captures a generation number when it starts. Inserts,
invalidations and newer fetches bump the generation, and a fetch that
finishes after its generation was superseded is dropped instead of applied,
so a slow response can never overwrite newer state.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from chatlist.aggregation.buckets import bucketize
from chatlist.aggregation.fetcher import SourceFetcher
from chatlist.models.conversations import Conversation, DateBuckets

logger = logging.getLogger(__name__)

ALL_CHATS_KEY = "allChats"

Listener = Callable[[list[Conversation]], None]


class ConversationCache:
    """Single-entry conversation cache with read-through fetching."""

    def __init__(
        self,
        fetcher: SourceFetcher,
        *,
        key: str = ALL_CHATS_KEY,
        retries: int = 2,
        stale_after_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.key = key
        self._fetcher = fetcher
        self._retries = retries
        self._stale_after = stale_after_seconds
        self._clock = clock

        self._conversations: list[Conversation] = []
        self._updated_at: float | None = None
        self._invalidated = False
        self._generation = 0
        self._inflight: asyncio.Task[list[Conversation]] | None = None
        self._inflight_generation = 0
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loading(self) -> bool:
        """True while the very first fetch is outstanding."""
        return self._updated_at is None and self.is_fetching

    @property
    def is_fetching(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def is_stale(self) -> bool:
        if self._updated_at is None or self._invalidated:
            return True
        return self._clock() - self._updated_at >= self._stale_after

    def snapshot(self) -> list[Conversation]:
        """Current list, without fetching."""
        return list(self._conversations)

    def buckets(self, now: datetime | None = None) -> DateBuckets:
        return bucketize(self._conversations, now or datetime.now().astimezone())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new list after every applied change.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def read(self) -> list[Conversation]:
        """Return the cached list, fetching first when it is stale.

        Concurrent readers share the fetch already in flight, unless that
        fetch was superseded since it started.
        """
        if not self.is_stale():
            return self.snapshot()
        if self.is_fetching and self._inflight_generation == self._generation:
            return await asyncio.shield(self._inflight)
        return await self._refresh()

    def optimistic_insert(self, entry: Conversation) -> None:
        """Prepend ``entry`` ahead of the server's confirmation.

        The inserted value counts as fresh data, and any fetch already in
        flight is superseded.
        """
        self._generation += 1
        self._conversations = [entry] + [
            c for c in self._conversations if c.id != entry.id
        ]
        self._updated_at = self._clock()
        self._invalidated = False
        logger.info("Optimistically inserted conversation %s", entry.id)
        self._notify()

    async def reconcile(self) -> list[Conversation]:
        """Refetch and replace the whole list, superseding any fetch in flight."""
        logger.info("Reconciling %s with the backend", self.key)
        return await self._refresh()

    def invalidate(self) -> None:
        """Mark the value stale so the next ``read`` refetches."""
        self._generation += 1
        self._invalidated = True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _refresh(self) -> list[Conversation]:
        self._generation += 1
        task = asyncio.ensure_future(self._fetch_and_apply(self._generation))
        self._inflight = task
        self._inflight_generation = self._generation
        return await asyncio.shield(task)

    async def _fetch_and_apply(self, generation: int) -> list[Conversation]:
        fresh = await self._fetcher.fetch_all(retries=self._retries)

        if generation != self._generation:
            logger.debug(
                "Discarding stale fetch for %s (generation %d, current %d)",
                self.key,
                generation,
                self._generation,
            )
            return self.snapshot()

        self._conversations = fresh
        self._updated_at = self._clock()
        self._invalidated = False
        self._notify()
        return self.snapshot()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
