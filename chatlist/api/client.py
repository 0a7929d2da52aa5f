"""HTTP client for the chat backend.

Wraps a single ``httpx.AsyncClient`` and exposes the four endpoints the
chat list depends on:

    GET  /todays_chats/       -> [Conversation, ...]
    GET  /yesterdays_chats/   -> [Conversation, ...]
    GET  /seven_days_chats/   -> [Conversation, ...]
    POST /prompt_gpt/         {"chat_id": "new", "content": "..."}
                              -> {"chat_id": "...", "title": "..."}

Transport failures and non-2xx answers are translated into the package's
error types so callers never see raw ``httpx`` exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from chatlist.config import Settings, get_settings
from chatlist.errors import CreationError, MalformedResponseError, SourceFetchError
from chatlist.models.conversations import CreateChatRequest, CreatedConversation

logger = logging.getLogger(__name__)

TODAYS_CHATS_PATH = "/todays_chats/"
YESTERDAYS_CHATS_PATH = "/yesterdays_chats/"
SEVEN_DAYS_CHATS_PATH = "/seven_days_chats/"
PROMPT_PATH = "/prompt_gpt/"


class ChatApiClient:
    """Async client for the chat backend.

    Lifecycle:
        client = ChatApiClient()
        await client.initialize()   # creates the httpx client
        ...
        await client.close()

    An existing ``httpx.AsyncClient`` can be passed in instead; it is then
    owned by the caller and left open by ``close()``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None

    async def initialize(self) -> None:
        """Create the HTTP client if one was not injected."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._settings.api_base_url,
            timeout=self._settings.request_timeout,
        )
        logger.info("ChatApiClient initialized (base_url=%s)", self._settings.api_base_url)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info("ChatApiClient closed")

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("ChatApiClient not initialized. Call initialize() first.")
        return self._client

    # ------------------------------------------------------------------
    # List endpoints
    # ------------------------------------------------------------------

    async def get_window(self, path: str) -> list[Any]:
        """Fetch one windowed list endpoint and return its raw records.

        Raises:
            SourceFetchError: transport failure or non-2xx status.
            MalformedResponseError: the body is not a JSON array.
        """
        try:
            response = await self.http.get(path)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SourceFetchError(f"GET {path} failed: {exc}", [path]) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"GET {path} returned a non-JSON body") from exc

        if not isinstance(data, list):
            raise MalformedResponseError(
                f"GET {path} returned {type(data).__name__}, expected a list"
            )
        return data

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_chat(self, content: str) -> CreatedConversation:
        """Open a new conversation with an initial prompt.

        Raises:
            CreationError: the client is not initialized, the request failed,
                or the answer had no ``chat_id``.
        """
        payload = CreateChatRequest(content=content)
        if self._client is None:
            raise CreationError("ChatApiClient not initialized. Call initialize() first.")
        try:
            response = await self.http.post(PROMPT_PATH, json=payload.model_dump())
            response.raise_for_status()
            return CreatedConversation.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise CreationError(f"POST {PROMPT_PATH} failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise CreationError(f"POST {PROMPT_PATH} returned an invalid body") from exc
