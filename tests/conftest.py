"""Shared fixtures and fakes for statsbot tests."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from statsbot.core.config import Settings
from statsbot.handlers import CommandDispatcher
from statsbot.ingestion.github import ActivityBundle, ActivityItem, build_queries

TODAY = "2026-10-19"

_message_ids = itertools.count(1000)


def make_item(title: str = "Fix typo", labels: list[str] | None = None, url: str | None = None) -> ActivityItem:
    """Factory helper for creating ActivityItem instances."""
    return ActivityItem(
        title=title,
        url=url or f"https://github.com/org/repo/pull/{title.lower().replace(' ', '-')}",
        labels=tuple(labels or []),
    )


def raw_item(title: str = "Fix typo", labels: list[str] | None = None, number: int = 1) -> dict[str, Any]:
    """A search-API item as GitHub returns it."""
    return {
        "title": title,
        "html_url": f"https://github.com/org/repo/pull/{number}",
        "labels": [{"name": name} for name in labels or []],
    }


def make_bundle(
    username: str = "alice",
    open_prs: list[ActivityItem] | None = None,
    merged_prs: list[ActivityItem] | None = None,
    merged_today: list[ActivityItem] | None = None,
    assigned_issues: list[ActivityItem] | None = None,
    daily_score: int = 0,
    all_time_score: int = 0,
) -> ActivityBundle:
    return ActivityBundle(
        username=username,
        today=TODAY,
        open_prs=open_prs or [],
        merged_prs=merged_prs or [],
        merged_today=merged_today or [],
        assigned_issues=assigned_issues or [],
        daily_score=daily_score,
        all_time_score=all_time_score,
    )


# ── GitHub fake ──────────────────────────────────────────────────────


class FakeGitHub:
    """In-memory stand-in for the search and profile endpoints.

    Search results are keyed by the exact ``q`` string; any query not
    registered returns no items. Every request is recorded.
    """

    def __init__(self) -> None:
        self.results: dict[str, list[dict]] = {}
        self.profiles: dict[str, dict] = {}
        self.failing_queries: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def add_profile(self, username: str) -> None:
        self.profiles[username] = {
            "login": username,
            "avatar_url": f"https://avatars.githubusercontent.com/{username}",
        }

    def set_activity(
        self,
        username: str,
        *,
        open_prs: list[dict] | None = None,
        merged_prs: list[dict] | None = None,
        merged_today: list[dict] | None = None,
        assigned_issues: list[dict] | None = None,
        today: str = TODAY,
    ) -> None:
        queries = build_queries(username, today)
        self.results[queries["open_prs"]] = open_prs or []
        self.results[queries["merged_prs"]] = merged_prs or []
        self.results[queries["merged_today"]] = merged_today or []
        self.results[queries["assigned_issues"]] = assigned_issues or []

    @property
    def search_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/search/issues"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/users/"):
            username = path.split("/", 2)[2]
            if username in self.profiles:
                return httpx.Response(200, json=self.profiles[username])
            return httpx.Response(404, json={"message": "Not Found"})

        if path == "/search/issues":
            params = request.url.params
            query = params["q"]
            if query in self.failing_queries:
                return httpx.Response(self.failing_queries[query], json={"message": "boom"})
            page = int(params["page"])
            per_page = int(params["per_page"])
            items = self.results.get(query, [])
            chunk = items[(page - 1) * per_page : page * per_page]
            return httpx.Response(200, json={"total_count": len(items), "items": chunk})

        return httpx.Response(404, json={"message": "Not Found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="https://api.github.com",
            transport=httpx.MockTransport(self.handler),
        )


# ── Discord fakes ────────────────────────────────────────────────────


@dataclass
class FakeMessage:
    id: int
    channel: FakeChannel
    content: str | None = None
    embed: Any = None
    deleted: bool = False
    reactions: list[str] = field(default_factory=list)
    reaction_error: Exception | None = None

    async def delete(self) -> None:
        self.deleted = True

    async def add_reaction(self, emoji: str) -> None:
        if self.reaction_error is not None:
            raise self.reaction_error
        self.reactions.append(emoji)


class FakeChannel:
    def __init__(self) -> None:
        self.sent: list[FakeMessage] = []
        # Raised by add_reaction on every message this channel sends
        self.reaction_error: Exception | None = None

    async def send(self, content: str | None = None, *, embed: Any = None) -> FakeMessage:
        message = FakeMessage(
            id=next(_message_ids),
            channel=self,
            content=content,
            embed=embed,
            reaction_error=self.reaction_error,
        )
        self.sent.append(message)
        return message

    @property
    def texts(self) -> list[str]:
        return [m.content for m in self.sent if m.content is not None]

    @property
    def embeds(self) -> list[Any]:
        return [m.embed for m in self.sent if m.embed is not None]


def make_chat_message(content: str, channel: FakeChannel, bot: bool = False) -> SimpleNamespace:
    """A discord.Message-shaped object carrying only what the dispatcher reads."""
    return SimpleNamespace(author=SimpleNamespace(bot=bot), content=content, channel=channel)


def make_reaction(message_id: int, emoji: str) -> SimpleNamespace:
    return SimpleNamespace(message=SimpleNamespace(id=message_id), emoji=emoji)


def make_user(display_name: str = "Ada", bot: bool = False) -> SimpleNamespace:
    return SimpleNamespace(display_name=display_name, bot=bot)


def field_values(embed) -> dict[str, str]:
    return {f.name: f.value for f in embed.fields}


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def frozen_today(monkeypatch):
    """Pin the UTC date the merged-today query is built with."""
    monkeypatch.setattr("statsbot.ingestion.github.utc_today", lambda: TODAY)
    monkeypatch.setattr("statsbot.handlers.utc_today", lambda: TODAY)


@pytest.fixture
def dispatcher(github: FakeGitHub, frozen_today) -> CommandDispatcher:
    return CommandDispatcher(config=Settings(), client_factory=github.client)
