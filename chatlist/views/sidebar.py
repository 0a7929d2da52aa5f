"""Sidebar view model: labelled date sections ready for display."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from chatlist.aggregation.buckets import bucketize
from chatlist.models.conversations import Conversation
from chatlist.routes import chat_route, share_url
from chatlist.utils.titles import clean_title, message_count_label

LOADING_MESSAGE = "Loading chats..."
EMPTY_MESSAGE = 'No chats yet. Click "New Chat" to start!'
NEW_CHAT_LABEL = "New Chat"
CREATING_LABEL = "Creating..."


class SidebarEntry(BaseModel):
    id: str
    title: str
    count_label: str = ""
    route: str
    share_url: str


class SidebarSection(BaseModel):
    name: str
    entries: list[SidebarEntry]

    @property
    def label(self) -> str:
        return f"{self.name} ({len(self.entries)})"


class Sidebar(BaseModel):
    """Everything the chat list renders, derived from the cached list."""

    new_chat_label: str = NEW_CHAT_LABEL
    sections: list[SidebarSection] = Field(default_factory=list)
    status_message: str | None = None


def _entry(conversation: Conversation, origin: str) -> SidebarEntry:
    return SidebarEntry(
        id=conversation.id,
        title=clean_title(conversation.title),
        count_label=message_count_label(conversation.message_count),
        route=chat_route(conversation.id),
        share_url=share_url(origin, conversation.id),
    )


def build_sidebar(
    conversations: list[Conversation],
    now: datetime,
    *,
    origin: str,
    is_loading: bool = False,
    is_creating: bool = False,
) -> Sidebar:
    """Build the sidebar for ``conversations`` as seen at ``now``.

    Sections are only present when they have entries. The empty-state
    message depends on the whole list, so conversations older than seven
    days suppress it even though no section shows them.
    """
    buckets = bucketize(conversations, now)
    sections = [
        SidebarSection(name=name, entries=[_entry(c, origin) for c in bucket])
        for name, bucket in (
            ("Today", buckets.today),
            ("Yesterday", buckets.yesterday),
            ("Last 7 Days", buckets.last_seven_days),
        )
        if bucket
    ]

    status_message = None
    if is_loading:
        status_message = LOADING_MESSAGE
    elif not conversations:
        status_message = EMPTY_MESSAGE

    return Sidebar(
        new_chat_label=CREATING_LABEL if is_creating else NEW_CHAT_LABEL,
        sections=sections,
        status_message=status_message,
    )


def render_sidebar(sidebar: Sidebar) -> str:
    """Plain-text rendering, one line per entry."""
    lines = [f"[{sidebar.new_chat_label}]"]
    if sidebar.status_message:
        lines.append(sidebar.status_message)
    for section in sidebar.sections:
        lines.append("")
        lines.append(section.label.upper())
        for entry in section.entries:
            title = f"{entry.title} {entry.count_label}".rstrip()
            lines.append(f"  {title}  {entry.share_url}")
    return "\n".join(lines)
