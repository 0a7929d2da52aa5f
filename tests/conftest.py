"""Shared test fixtures: an in-process fake chat backend."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from chatlist.config import Settings


@dataclass
class BackendState:
    """Mutable state behind the fake backend's endpoints."""

    windows: dict[str, Any] = field(
        default_factory=lambda: {
            "todays_chats": [],
            "yesterdays_chats": [],
            "seven_days_chats": [],
        }
    )
    failing: set[str] = field(default_factory=set)
    calls: dict[str, int] = field(default_factory=dict)
    create_fails: bool = False
    created_title: str | None = "Greeting"
    created: list[dict[str, Any]] = field(default_factory=list)
    next_id: int = 1

    def hit(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1


def build_backend(state: BackendState) -> FastAPI:
    app = FastAPI()

    def window(name: str):
        async def handler() -> Any:
            state.hit(name)
            if name in state.failing:
                raise HTTPException(status_code=500, detail="boom")
            return state.windows[name]

        return handler

    for name in ("todays_chats", "yesterdays_chats", "seven_days_chats"):
        app.get(f"/{name}/")(window(name))

    @app.post("/prompt_gpt/")
    async def prompt_gpt(body: dict[str, Any]) -> dict[str, Any]:
        state.hit("prompt_gpt")
        if state.create_fails:
            raise HTTPException(status_code=503, detail="unavailable")
        state.created.append(body)
        chat_id = f"chat-{state.next_id}"
        state.next_id += 1
        return {"chat_id": chat_id, "title": state.created_title}

    return app


@pytest.fixture
def backend() -> BackendState:
    return BackendState()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        api_base_url="http://test",
        frontend_url="http://frontend.test",
        retry_backoff_seconds=0.0,
        reconcile_delay_seconds=0.05,
    )


@pytest_asyncio.fixture
async def http_client(backend: BackendState) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the fake backend."""
    transport = ASGITransport(app=build_backend(backend))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
