from __future__ import annotations

import discord

MESSAGE_PART_LIMIT = 1900  # Discord rejects messages over 2000 characters


def _split_long_line(line: str, limit: int) -> list[str]:
    pieces = []
    while len(line) > limit:
        cut = line.rfind(" ", 0, limit + 1)
        if cut <= 0:
            cut = limit
        pieces.append(line[:cut].rstrip())
        line = line[cut:].lstrip()
    pieces.append(line)
    return pieces


def chunk_text(text: str, limit: int = MESSAGE_PART_LIMIT) -> list[str]:
    """Split a reply into message-sized parts, breaking on lines and then words."""
    text = (text or "").strip()
    if len(text) <= limit:
        return [text]

    parts: list[str] = []
    current = ""
    for raw_line in text.split("\n"):
        for line in _split_long_line(raw_line, limit):
            joined = f"{current}\n{line}" if current else line
            if len(joined) <= limit:
                current = joined
                continue
            if current.strip():
                parts.append(current.strip())
            current = line
    if current.strip():
        parts.append(current.strip())
    return parts


async def send_chunked(channel: discord.abc.Messageable, text: str) -> int:
    sent = 0
    for part in chunk_text(text):
        if not part:
            continue
        await channel.send(part)
        sent += 1
    return sent
