"""Fetch the three conversation windows and merge them into one list."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from chatlist.aggregation.merge import merge_conversations
from chatlist.api.client import (
    SEVEN_DAYS_CHATS_PATH,
    TODAYS_CHATS_PATH,
    YESTERDAYS_CHATS_PATH,
    ChatApiClient,
)
from chatlist.errors import MalformedResponseError, SourceFetchError
from chatlist.models.conversations import Conversation

logger = logging.getLogger(__name__)

# Merge order matters: the first occurrence of an id wins
WINDOW_PATHS: tuple[str, ...] = (
    TODAYS_CHATS_PATH,
    YESTERDAYS_CHATS_PATH,
    SEVEN_DAYS_CHATS_PATH,
)


def _parse_records(path: str, records: list[Any]) -> list[Conversation]:
    """Validate raw records, skipping the ones that are not conversations."""
    conversations: list[Conversation] = []
    for record in records:
        try:
            conversations.append(Conversation.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed record from %s: %s", path, exc.errors()[0]["msg"]
            )
    return conversations


class SourceFetcher:
    """Issues the windowed list requests concurrently.

    By default a failure in any window aborts the whole aggregation. With
    ``partial_results=True`` failed windows contribute nothing and only a
    failure of every window is an error.
    """

    def __init__(
        self,
        client: ChatApiClient,
        *,
        partial_results: bool = False,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        self._client = client
        self._partial_results = partial_results
        self._retry_backoff_seconds = retry_backoff_seconds

    async def _fetch_window(self, path: str) -> list[Conversation]:
        try:
            records = await self._client.get_window(path)
        except MalformedResponseError as exc:
            logger.warning("Treating %s as empty: %s", path, exc)
            return []
        return _parse_records(path, records)

    async def fetch_windows(self) -> list[list[Conversation]]:
        """Fetch every window, in ``WINDOW_PATHS`` order.

        Raises:
            SourceFetchError: a window failed (or, in partial mode, all did).
        """
        results = await asyncio.gather(
            *(self._fetch_window(path) for path in WINDOW_PATHS),
            return_exceptions=True,
        )

        windows: list[list[Conversation]] = []
        failed: list[str] = []
        for path, result in zip(WINDOW_PATHS, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Window %s failed: %s", path, result)
                failed.append(path)
                windows.append([])
            else:
                windows.append(result)

        if failed and (not self._partial_results or len(failed) == len(WINDOW_PATHS)):
            raise SourceFetchError(
                f"{len(failed)} of {len(WINDOW_PATHS)} windows failed", failed
            )
        return windows

    async def fetch_all(self, retries: int = 0) -> list[Conversation]:
        """Fetch and merge all windows; never raises.

        Args:
            retries: Extra attempts after the first failed one, with
                exponential backoff between attempts.

        Returns:
            The merged list, or an empty list once every attempt failed.
        """
        for attempt in range(retries + 1):
            try:
                windows = await self.fetch_windows()
            except SourceFetchError as exc:
                if attempt < retries:
                    delay = self._retry_backoff_seconds * (2**attempt)
                    logger.info(
                        "Aggregation attempt %d failed (%s), retrying in %.2fs",
                        attempt + 1,
                        exc,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("Error fetching chats: %s", exc)
                return []

            merged = merge_conversations(windows)
            logger.debug("Fetched %d unique conversations", len(merged))
            return merged
        return []
