"""GitHub API client for fetching pull-request and issue activity."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from statsbot.core.config import settings
from statsbot.core.errors import FetchError, ProfileNotFound
from statsbot.core.scoring import calculate_score

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search/issues"


@dataclass(frozen=True)
class ActivityItem:
    """A pull request or issue as returned by the search API."""

    title: str
    url: str
    labels: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ActivityItem:
        return cls(
            title=item.get("title") or "",
            url=item.get("html_url") or "",
            labels=tuple(label.get("name", "") for label in item.get("labels") or []),
        )

    def has_label(self, name: str) -> bool:
        wanted = name.lower()
        return any(label.lower() == wanted for label in self.labels)


@dataclass
class ActivityBundle:
    """Container for one account's activity at one point in time."""

    username: str
    today: str
    open_prs: list[ActivityItem] = field(default_factory=list)
    merged_prs: list[ActivityItem] = field(default_factory=list)
    merged_today: list[ActivityItem] = field(default_factory=list)
    assigned_issues: list[ActivityItem] = field(default_factory=list)
    daily_score: int = 0
    all_time_score: int = 0


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if settings.github_token:
        headers["Authorization"] = f"token {settings.github_token}"
    return headers


def github_client() -> httpx.AsyncClient:
    """Build the client used for one command. Callers own closing it."""
    return httpx.AsyncClient(
        base_url=settings.github_api_url,
        headers=_headers(),
        timeout=settings.request_timeout,
    )


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently; on the first error cancel the rest and re-raise it."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def _get(client: httpx.AsyncClient, url: str, params: dict | None = None) -> Any:
    """Make a GET request; any non-2xx status is a FetchError."""
    resp = await client.get(url, params=params)
    if not resp.is_success:
        raise FetchError(resp.status_code, str(resp.request.url))
    return resp.json()


async def fetch_paginated(
    client: httpx.AsyncClient, query: str, page_size: int | None = None
) -> list[ActivityItem]:
    """Fetch every page of a search query, in the order GitHub returns them.

    A page that comes back full means there may be more; the first short page
    (possibly empty) ends the loop. ``total_count`` is never consulted, so a
    result count that is an exact multiple of the page size costs one extra,
    empty request.
    """
    page_size = page_size or settings.page_size
    items: list[ActivityItem] = []
    page = 1

    while True:
        data = await _get(
            client,
            SEARCH_PATH,
            params={
                "q": query,
                "sort": "created",
                "order": "desc",
                "page": page,
                "per_page": page_size,
            },
        )
        batch = data.get("items") or []
        items.extend(ActivityItem.from_api(item) for item in batch)
        if len(batch) != page_size:
            break
        page += 1

    logger.debug("Fetched %d items over %d page(s) for %r", len(items), page, query)
    return items


async def fetch_user_profile(client: httpx.AsyncClient, username: str) -> dict[str, Any]:
    """Fetch a user's public profile (we only rely on ``avatar_url``)."""
    try:
        return await _get(client, f"/users/{username}")
    except FetchError as e:
        raise ProfileNotFound([username], e.status_code, e.url) from e


async def fetch_profiles(
    client: httpx.AsyncClient, usernames: list[str]
) -> list[dict[str, Any]]:
    """Fetch several profiles; failed lookups are combined into one ProfileNotFound."""
    results = await asyncio.gather(
        *(fetch_user_profile(client, u) for u in usernames), return_exceptions=True
    )

    missing: list[ProfileNotFound] = []
    for result in results:
        if isinstance(result, ProfileNotFound):
            missing.append(result)
        elif isinstance(result, BaseException):
            raise result

    if missing:
        failed = [name for err in missing for name in err.usernames]
        raise ProfileNotFound(failed, missing[0].status_code, missing[0].url)
    return list(results)


def utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def build_queries(username: str, today: str) -> dict[str, str]:
    """Search qualifiers for the four activity sets of one account."""
    merged = f"is:pull-request author:{username} state:closed is:merged"
    return {
        "assigned_issues": f"is:issue assignee:{username} state:open",
        "open_prs": f"is:pull-request author:{username} state:open",
        "merged_prs": merged,
        "merged_today": f"{merged} merged:{today}",
    }


async def load_activity(
    client: httpx.AsyncClient, username: str, today: str | None = None
) -> ActivityBundle:
    """Run the four activity searches for ``username`` concurrently.

    ``today`` is fixed once per call (UTC). If any search fails the whole
    load fails with that error; there is no partial bundle.
    """
    today = today or utc_today()
    queries = build_queries(username, today)

    results = await gather_all(*(fetch_paginated(client, q) for q in queries.values()))
    sets = dict(zip(queries, results))

    bundle = ActivityBundle(username=username, today=today, **sets)
    bundle.daily_score = calculate_score(bundle.merged_today)
    bundle.all_time_score = calculate_score(bundle.merged_prs)

    logger.info(
        "Loaded activity for %s: %d open PRs, %d merged PRs, %d merged today, %d assigned issues, daily score %d",
        username,
        len(bundle.open_prs),
        len(bundle.merged_prs),
        len(bundle.merged_today),
        len(bundle.assigned_issues),
        bundle.daily_score,
    )
    return bundle
