"""statsbot Discord client: wires gateway events to the command dispatcher."""

from __future__ import annotations

import logging

import discord

from statsbot.core.config import Settings, settings
from statsbot.handlers import CommandDispatcher

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guild_messages = True
    intents.guild_reactions = True
    intents.message_content = True
    return intents


class StatsBot(discord.Client):
    def __init__(self, dispatcher: CommandDispatcher | None = None, **kwargs) -> None:
        kwargs.setdefault("intents", build_intents())
        super().__init__(**kwargs)
        self.dispatcher = dispatcher or CommandDispatcher()

    async def on_ready(self) -> None:
        logger.info("Bot is online as %s", self.user)

    async def on_message(self, message: discord.Message) -> None:
        await _safe_handle(self.dispatcher.handle_message, message)

    async def on_reaction_add(self, reaction: discord.Reaction, user: discord.abc.User) -> None:
        await _safe_handle(self.dispatcher.handle_reaction, reaction, user)

    async def on_raw_message_delete(self, payload: discord.RawMessageDeleteEvent) -> None:
        self.dispatcher.handle_message_deleted(payload.message_id)


async def _safe_handle(handler, *args) -> None:
    """Wrap handler in try/except so one bad event never takes the bot down."""
    try:
        await handler(*args)
    except Exception:
        logger.exception("Error handling Discord event")


def run(config: Settings | None = None) -> None:
    config = config or settings
    configure_logging(config.log_level)

    if not config.discord_token:
        logger.error("DISCORD_TOKEN is not set; refusing to start")
        raise RuntimeError("DISCORD_TOKEN must be set to start the bot")
    if not config.github_token:
        logger.warning("GITHUB_TOKEN is not set; GitHub search requests will be unauthenticated")

    bot = StatsBot(CommandDispatcher(config))
    # Logging is already configured above; keep discord.py from installing its own handler
    bot.run(config.discord_token, log_handler=None)
