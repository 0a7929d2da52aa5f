"""Session-scoped wiring of the chat list components.

One ``ChatListSession`` owns the HTTP client, the conversation cache, the
scheduler and the creation coordinator for the lifetime of an application
session. Nothing here is a module-level singleton.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

import httpx

from chatlist.aggregation.fetcher import SourceFetcher
from chatlist.api.client import ChatApiClient
from chatlist.cache.store import ConversationCache
from chatlist.config import Settings, get_settings
from chatlist.coordinator.creation import CreationCoordinator
from chatlist.scheduler.service import SchedulerService
from chatlist.views.sidebar import Sidebar, build_sidebar

logger = logging.getLogger(__name__)


class ChatListSession:
    """Builds and owns every component of the chat list.

    Lifecycle:
        session = ChatListSession()
        await session.initialize()   # opens HTTP client, starts scheduler
        ...
        await session.close()

    Also usable as ``async with ChatListSession() as session: ...``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        navigate: Callable[[str], None] | None = None,
        alert: Callable[[str], None] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = ChatApiClient(self.settings, http_client=http_client)
        self.fetcher = SourceFetcher(
            self.client,
            partial_results=self.settings.partial_results,
            retry_backoff_seconds=self.settings.retry_backoff_seconds,
        )
        self.cache = ConversationCache(
            self.fetcher,
            retries=self.settings.fetch_retries,
            stale_after_seconds=self.settings.stale_after_seconds,
        )
        self.scheduler = SchedulerService()

        callbacks = {}
        if navigate is not None:
            callbacks["navigate"] = navigate
        if alert is not None:
            callbacks["alert"] = alert
        self.coordinator = CreationCoordinator(
            client=self.client,
            cache=self.cache,
            scheduler=self.scheduler,
            settings=self.settings,
            **callbacks,
        )

    async def initialize(self) -> None:
        await self.client.initialize()
        await self.scheduler.initialize()
        logger.info("Chat list session started")

    async def close(self) -> None:
        await self.scheduler.shutdown()
        await self.client.close()
        logger.info("Chat list session closed")

    async def __aenter__(self) -> ChatListSession:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def sidebar(self, now: datetime | None = None) -> Sidebar:
        """Sidebar for the current cache contents."""
        return build_sidebar(
            self.cache.snapshot(),
            now or datetime.now().astimezone(),
            origin=self.settings.frontend_url,
            is_loading=self.cache.is_loading,
            is_creating=self.coordinator.is_pending,
        )
