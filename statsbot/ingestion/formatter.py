"""Render activity bundles as Discord embeds.

Nothing here computes anything; every number arrives precomputed.
"""

from __future__ import annotations

from datetime import datetime, timezone

import discord

from statsbot.core.config import settings
from statsbot.core.scoring import PartnerBreakdown
from statsbot.ingestion.github import ActivityBundle, ActivityItem

SCORE_COLOR = 0x0099FF
LEVEL_COLOR = 0x00FF00
PARTNER_COLOR = 0x6A0DAD
COMPARE_COLOR = 0x00FF00

# Discord rejects empty field values
_BLANK = "\u200b"

EMPTY_LISTING = "No PRs found."


def profile_url(username: str) -> str:
    return f"{settings.github_profile_url}/{username}"


def build_score_embed(username: str, avatar_url: str | None, bundle: ActivityBundle) -> discord.Embed:
    embed = discord.Embed(title=f"**Stats for {username}**", color=SCORE_COLOR)
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    embed.add_field(name="👤 **Profile**", value=f"[Click here]({profile_url(username)})", inline=False)
    embed.add_field(name="✨ **Overview** ✨", value=_BLANK, inline=False)
    embed.add_field(name="📑 Total Open PRs:", value=str(len(bundle.open_prs)))
    embed.add_field(name="📦 Merged PRs Today:", value=str(len(bundle.merged_today)))
    embed.add_field(name="✅ Total Merged PRs:", value=str(len(bundle.merged_prs)))
    embed.add_field(name="💰 Daily Score:", value=str(bundle.daily_score))
    embed.add_field(name="🏆 Total Score:", value=str(bundle.all_time_score))
    embed.add_field(name="📝 Assigned Issues:", value=str(len(bundle.assigned_issues)))
    return embed


def build_level_embed(items: list[ActivityItem], title: str, display_name: str) -> discord.Embed:
    """List PRs as markdown links, or a placeholder line when there are none."""
    listing = "\n".join(f"- [{item.title}]({item.url})" for item in items)
    return discord.Embed(
        title=f"{title} - {display_name}",
        color=LEVEL_COLOR,
        description=listing or EMPTY_LISTING,
    )


def build_partner_embed(username: str, breakdown: PartnerBreakdown) -> discord.Embed:
    embed = discord.Embed(title=f"🚀 **GSSoC Stats for {username}** 🚀", color=PARTNER_COLOR)
    embed.set_thumbnail(url=f"{profile_url(username)}.png")
    embed.add_field(name="👤 **Profile**", value=f"[Click here]({profile_url(username)})", inline=False)
    embed.add_field(name="✨ **GSSoC PRs Overview** ✨", value=_BLANK, inline=False)
    embed.add_field(name="📑 Total GSSoC PRs:", value=str(len(breakdown.merged)))
    embed.add_field(name="📦 Assigned GSSoC PRs:", value=str(len(breakdown.assigned)))
    embed.add_field(name="🔄 Open GSSoC PRs:", value=str(len(breakdown.open)))
    for level, tier in enumerate(breakdown.tier_counts, start=1):
        embed.add_field(name=f"⚙️ Level {level} GSSoC PRs:", value=str(breakdown.tier_counts[tier]))
    return embed


def _side_by_side(first: ActivityBundle, second: ActivityBundle, first_value, second_value) -> str:
    return f"{first.username}: {first_value}\n{second.username}: {second_value}"


def build_compare_embed(
    first: ActivityBundle, second: ActivityBundle, now: datetime | None = None
) -> discord.Embed:
    embed = discord.Embed(
        title=f"📊 **GitHub Stats: {first.username} vs {second.username}** 📊",
        color=COMPARE_COLOR,
        timestamp=now or datetime.now(timezone.utc),
    )
    embed.add_field(
        name="👤 **Profile**",
        value=(
            f"[{first.username}]({profile_url(first.username)}) vs "
            f"[{second.username}]({profile_url(second.username)})"
        ),
        inline=False,
    )
    rows = [
        ("📑 **Total Open PRs**", len(first.open_prs), len(second.open_prs)),
        ("✅ **Total Merged PRs**", len(first.merged_prs), len(second.merged_prs)),
        ("📅 **Merged PRs Today**", len(first.merged_today), len(second.merged_today)),
        ("💰 **Daily Score**", first.daily_score, second.daily_score),
        ("🏆 **Total Score**", first.all_time_score, second.all_time_score),
        ("📝 **Assigned Issues**", len(first.assigned_issues), len(second.assigned_issues)),
    ]
    for name, first_value, second_value in rows:
        embed.add_field(name=name, value=_side_by_side(first, second, first_value, second_value))
    return embed
