"""Chat command handlers: report, partner report and comparison."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import discord
import httpx

from statsbot.core.alerts import alert_command_failed, alert_profile_missing
from statsbot.core.config import Settings, settings
from statsbot.core.errors import ArgumentError, ProfileNotFound
from statsbot.core.scoring import TIER_LABELS, partner_breakdown
from statsbot.ingestion.formatter import (
    build_compare_embed,
    build_level_embed,
    build_partner_embed,
    build_score_embed,
)
from statsbot.ingestion.github import (
    ActivityBundle,
    fetch_profiles,
    fetch_user_profile,
    gather_all,
    github_client,
    load_activity,
    utc_today,
)
from statsbot.reactions import TIER_EMOJIS, SubscriptionRegistry

logger = logging.getLogger(__name__)

# `!compare alice vs bob` -- "vs" is case-insensitive, both sides are single tokens
COMPARE_PATTERN = re.compile(r"(\S+)\s+vs\s+(\S+)", re.IGNORECASE)

MISSING_USERNAME = "Please provide a valid GitHub username!"
MISSING_PARTNER_USERNAME = "Please use the !github command first or provide a username."
COMPARE_USAGE = "Please use the correct format: `!compare <username1> vs <username2>`"

REPORT_FAILED = "An error occurred while fetching data. Please try again later."
PARTNER_FAILED = "An error occurred while fetching GSSoC data. Please try again later."
COMPARE_FAILED = (
    "An error occurred while fetching comparison data. Please ensure both usernames are correct."
)


@dataclass
class SessionState:
    """Per-dispatcher memory shared across commands."""

    last_queried: str | None = None

    def reset(self) -> None:
        self.last_queried = None


def parse_command(content: str) -> tuple[str, str]:
    """Split a message into its command token and the remaining argument text."""
    parts = (content or "").strip().split(maxsplit=1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def parse_report_args(args: str) -> str:
    tokens = args.split()
    if not tokens:
        raise ArgumentError(MISSING_USERNAME)
    return tokens[0]


def parse_partner_args(args: str, session: SessionState) -> str:
    tokens = args.split()
    username = tokens[0] if tokens else session.last_queried
    if not username:
        raise ArgumentError(MISSING_PARTNER_USERNAME)
    return username


def parse_compare_args(args: str) -> tuple[str, str]:
    match = COMPARE_PATTERN.search(args)
    if not match:
        raise ArgumentError(COMPARE_USAGE)
    return match.group(1), match.group(2)


class CommandDispatcher:
    """Routes chat messages to command handlers and owns their shared state.

    Each handler parses its arguments first (an ArgumentError is answered
    directly, before anything is fetched), then runs inside a placeholder
    boundary: a "Please wait!" message is posted, the result is rendered, and
    the placeholder is replaced either by the result or by a generic failure
    notice. Error details are logged, never sent to the channel.
    """

    def __init__(
        self,
        config: Settings | None = None,
        client_factory: Callable[[], httpx.AsyncClient] = github_client,
        session: SessionState | None = None,
        subscriptions: SubscriptionRegistry | None = None,
    ) -> None:
        self.config = config or settings
        self._client_factory = client_factory
        self.session = session or SessionState()
        self.subscriptions = subscriptions or SubscriptionRegistry()
        self._handlers: dict[str, Callable[[Any, str], Awaitable[None]]] = {
            self.config.report_command: self.report,
            self.config.partner_command: self.partner_report,
            self.config.compare_command: self.compare,
        }

    async def handle_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        command, args = parse_command(message.content)
        handler = self._handlers.get(command)
        if handler is None:
            return

        logger.info("Received %s %s", command, args)
        try:
            await handler(message.channel, args)
        except ArgumentError as e:
            await message.channel.send(str(e))

    async def handle_reaction(self, reaction: discord.Reaction, user: discord.abc.User) -> None:
        """Answer a tier reaction on a report message while its window is open."""
        if user.bot:
            return

        sub = self.subscriptions.get(reaction.message.id)
        if sub is None:
            return

        tier = sub.tier_for(str(reaction.emoji))
        if tier is None:
            return

        level = TIER_LABELS.index(tier) + 1
        embed = build_level_embed(sub.items_for(tier), f"Level {level} PRs", user.display_name)
        await sub.channel.send(embed=embed)

    def handle_message_deleted(self, message_id: int) -> None:
        self.subscriptions.dispose(message_id)

    # ── commands ─────────────────────────────────────────────────────

    async def report(self, channel: Any, args: str) -> None:
        username = parse_report_args(args)
        bundle: ActivityBundle | None = None

        async def render() -> discord.Embed:
            nonlocal bundle
            async with self._client_factory() as client:
                profile, bundle = await gather_all(
                    fetch_user_profile(client, username),
                    load_activity(client, username),
                )
            return build_score_embed(username, profile.get("avatar_url"), bundle)

        async def after_send(sent: discord.Message) -> None:
            self.session.last_queried = username
            self.subscriptions.open(
                sent.id, channel, bundle.merged_today, self.config.reaction_window_seconds
            )
            for emoji in TIER_EMOJIS:
                await sent.add_reaction(emoji)

        await self._run_command(
            channel,
            command=self.config.report_command,
            accounts=[username],
            placeholder="Fetching data... Please wait!",
            failure=REPORT_FAILED,
            render=render,
            after_send=after_send,
        )

    async def partner_report(self, channel: Any, args: str) -> None:
        username = parse_partner_args(args, self.session)
        label = self.config.partner_label

        async def render() -> discord.Embed:
            async with self._client_factory() as client:
                bundle = await load_activity(client, username)
            return build_partner_embed(username, partner_breakdown(bundle, label))

        await self._run_command(
            channel,
            command=self.config.partner_command,
            accounts=[username],
            placeholder=f"Fetching GSSoC data for {username}... Please wait!",
            failure=PARTNER_FAILED,
            render=render,
        )

    async def compare(self, channel: Any, args: str) -> None:
        first, second = parse_compare_args(args)

        async def render() -> discord.Embed:
            today = utc_today()
            async with self._client_factory() as client:
                _, first_bundle, second_bundle = await gather_all(
                    fetch_profiles(client, [first, second]),
                    load_activity(client, first, today),
                    load_activity(client, second, today),
                )
            return build_compare_embed(first_bundle, second_bundle)

        await self._run_command(
            channel,
            command=self.config.compare_command,
            accounts=[first, second],
            placeholder=f"Fetching comparison data for {first} vs {second}... Please wait!",
            failure=COMPARE_FAILED,
            render=render,
        )

    async def _run_command(
        self,
        channel: Any,
        *,
        command: str,
        accounts: list[str],
        placeholder: str,
        failure: str,
        render: Callable[[], Awaitable[discord.Embed]],
        after_send: Callable[[discord.Message], Awaitable[None]] | None = None,
    ) -> discord.Message | None:
        loading = await channel.send(placeholder)
        try:
            embed = await render()
            await loading.delete()
            loading = None
            sent = await channel.send(embed=embed)
        except Exception as e:
            logger.exception("Error running %s for %s", command, " vs ".join(accounts))
            if isinstance(e, ProfileNotFound):
                alert_profile_missing(e.usernames, e.status_code)
            alert_command_failed(command, accounts, getattr(e, "status_code", None))
            if loading is not None:
                await loading.delete()
            await channel.send(failure)
            return None

        # The report is already visible; a follow-up failure must not post the error notice
        if after_send is not None:
            try:
                await after_send(sent)
            except Exception:
                logger.exception("Follow-up after %s for %s failed", command, " vs ".join(accounts))
        return sent
