"""Short-lived reaction subscriptions on report messages.

A report message listens for tier reactions for a fixed window. Each
subscription records when it started and how long it lasts; it is checked
against the clock on every reaction and released when the window closes or
the message goes away.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from statsbot.core.scoring import TIER_LABELS
from statsbot.ingestion.github import ActivityItem

logger = logging.getLogger(__name__)

TIER_EMOJIS: tuple[str, ...] = ("1️⃣", "2️⃣", "3️⃣")
EMOJI_TIERS: dict[str, str] = dict(zip(TIER_EMOJIS, TIER_LABELS))


@dataclass
class ReactionSubscription:
    message_id: int
    channel: Any  # discord.abc.Messageable
    items: list[ActivityItem]
    started_at: float
    duration: float
    _disposer: asyncio.TimerHandle | None = field(default=None, repr=False)

    def expired(self, now: float) -> bool:
        return now - self.started_at >= self.duration

    @staticmethod
    def tier_for(emoji: str) -> str | None:
        return EMOJI_TIERS.get(emoji)

    def items_for(self, tier: str) -> list[ActivityItem]:
        return [item for item in self.items if item.has_label(tier)]


class SubscriptionRegistry:
    """Open reaction subscriptions, keyed by the id of the message they watch."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._subscriptions: dict[int, ReactionSubscription] = {}

    def open(
        self, message_id: int, channel: Any, items: list[ActivityItem], duration: float
    ) -> ReactionSubscription:
        self.dispose(message_id)
        sub = ReactionSubscription(
            message_id=message_id,
            channel=channel,
            items=list(items),
            started_at=self._clock(),
            duration=duration,
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            sub._disposer = loop.call_later(duration, self.dispose, message_id)
        self._subscriptions[message_id] = sub
        logger.debug("Opened reaction subscription on message %s for %.0fs", message_id, duration)
        return sub

    def get(self, message_id: int) -> ReactionSubscription | None:
        """Return the live subscription for a message, releasing it if its window has passed."""
        sub = self._subscriptions.get(message_id)
        if sub is None:
            return None
        if sub.expired(self._clock()):
            self.dispose(message_id)
            return None
        return sub

    def dispose(self, message_id: int) -> None:
        sub = self._subscriptions.pop(message_id, None)
        if sub is None:
            return
        if sub._disposer is not None:
            sub._disposer.cancel()
        logger.debug("Closed reaction subscription on message %s", message_id)

    def active(self) -> list[ReactionSubscription]:
        return list(self._subscriptions.values())

    def clear(self) -> None:
        for message_id in list(self._subscriptions):
            self.dispose(message_id)
