from __future__ import annotations

import discord


def parse_channel_ref(ref: str | int | None) -> tuple[int | None, str]:
    """Split a channel reference into (id, name). Accepts ids, <#id> mentions and names."""
    text = str(ref or "").strip()
    if text.startswith("<#") and text.endswith(">"):
        text = text[2:-1]
    if text.isdigit():
        return (int(text), "")
    return (None, text.lstrip("#").lower())


def find_text_channel_by_name(channels, name: str):
    wanted = (name or "").strip().lstrip("#").lower()
    if not wanted:
        return None
    for channel in channels:
        if isinstance(channel, discord.TextChannel) and channel.name.lower() == wanted:
            return channel
    return None


async def resolve_text_channel(bot, ref: str | int | None):
    channel_id, name = parse_channel_ref(ref)
    if channel_id is not None:
        channel = bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await bot.fetch_channel(channel_id)
            except discord.DiscordException as e:
                print(f"[Channels] Could not fetch channel {channel_id}: {e}")
                return None
        return channel
    return find_text_channel_by_name(bot.get_all_channels(), name)
