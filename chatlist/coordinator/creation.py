"""CreationCoordinator - create a conversation and keep the list in step."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from chatlist.api.client import ChatApiClient
from chatlist.cache.store import ConversationCache
from chatlist.config import Settings, get_settings
from chatlist.errors import CreationError
from chatlist.models.conversations import Conversation, CreatedConversation
from chatlist.routes import chat_route
from chatlist.scheduler.service import SchedulerService

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create chat. Check the server."


def _log_navigation(route: str) -> None:
    logger.info("Navigate to %s", route)


def _log_alert(message: str) -> None:
    logger.error("Alert: %s", message)


class CreationCoordinator:
    """Creates conversations on the backend and mirrors them in the cache.

    On success the new conversation is inserted into the cache right away,
    the ``navigate`` callback receives its route, and a reconcile is
    scheduled after ``reconcile_delay_seconds``. Only one reconcile is ever
    pending: a newer creation replaces it.
    """

    def __init__(
        self,
        *,
        client: ChatApiClient,
        cache: ConversationCache,
        scheduler: SchedulerService,
        settings: Settings | None = None,
        navigate: Callable[[str], None] = _log_navigation,
        alert: Callable[[str], None] = _log_alert,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._client = client
        self._cache = cache
        self._scheduler = scheduler
        self._settings = settings or get_settings()
        self._navigate = navigate
        self._alert = alert
        self._clock = clock
        self._pending = 0

    @property
    def is_pending(self) -> bool:
        return self._pending > 0

    @property
    def reconcile_job_id(self) -> str:
        return f"reconcile:{self._cache.key}"

    async def create_conversation(self) -> CreatedConversation | None:
        """Create a conversation; returns ``None`` when the backend refused."""
        self._pending += 1
        try:
            created = await self._client.create_chat(self._settings.new_chat_prompt)
        except CreationError as exc:
            logger.error("Error creating chat: %s", exc)
            self._alert(CREATE_FAILED_MESSAGE)
            return None
        finally:
            self._pending -= 1

        title = created.title or self._settings.new_chat_title
        entry = Conversation(
            id=created.chat_id,
            title=title,
            created_at=self._clock(),
            message_count=self._settings.initial_message_count,
        )
        self._cache.optimistic_insert(entry)
        self._navigate(chat_route(created.chat_id))
        self._schedule_reconcile()

        return CreatedConversation(chat_id=created.chat_id, title=title)

    def cancel_pending_reconcile(self) -> bool:
        return self._scheduler.cancel_job(self.reconcile_job_id)

    def _schedule_reconcile(self) -> None:
        if not self._scheduler.initialized:
            logger.warning("Scheduler not running, reconcile of %s skipped", self._cache.key)
            return
        self._scheduler.schedule(
            self.reconcile_job_id,
            self._cache.reconcile,
            self._settings.reconcile_delay_seconds,
        )
