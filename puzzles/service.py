from __future__ import annotations

import asyncio
import os
import re
import uuid

import discord

from community.scores import ScoreLedger
from misc.discord_channels import resolve_text_channel
from puzzles.fetcher import fetch_daily_puzzle
from puzzles.models import PuzzleRecord
from puzzles.models import PuzzleSlot
from puzzles.renderer import render_board

FETCH_FAILURE_NOTICE = "Sorry, I couldn't fetch today's chess puzzle. Please check back tomorrow!"
NO_PUZZLE_TEXT = "No puzzle is active right now."
DAILY_HEADING = "**Daily Chess Puzzle**"
TEST_HEADING = "**Test Puzzle** (not counted as today's puzzle)"
UCI_MOVE_RE = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")


def format_solution_reveal(record: PuzzleRecord) -> str:
    moves = " ".join(record.solution_moves)
    return f"**Solution to puzzle {record.id}** (posted {record.fetched_at:%Y-%m-%d}): {moves}\n{record.external_link}"


def format_puzzle_caption(record: PuzzleRecord, *, heading: str, include_fen: bool) -> str:
    lines = [heading, f"{record.side_to_move.value} to move. Find the best continuation!"]
    if include_fen:
        lines.append(f"FEN: `{record.position_notation}`")
    lines.append(record.external_link)
    return "\n".join(lines)


def normalize_uci_guess(guess: str) -> str | None:
    text = re.sub(r"[\s\-x]", "", (guess or "").strip().lower())
    return text if UCI_MOVE_RE.fullmatch(text) else None


class PuzzleService:
    def __init__(
        self,
        *,
        slot: PuzzleSlot,
        channel_ref: str,
        render_dir: str,
        score_ledger: ScoreLedger | None = None,
        fetch_func=fetch_daily_puzzle,
        render_func=render_board,
        channel_resolver=resolve_text_channel,
    ) -> None:
        self.slot = slot
        self.channel_ref = str(channel_ref or "").strip()
        self.render_dir = str(render_dir)
        self.score_ledger = score_ledger
        self.fetch_func = fetch_func
        self.render_func = render_func
        self.channel_resolver = channel_resolver

    async def run_daily_cycle(self, bot) -> None:
        channel = await self.channel_resolver(bot, self.channel_ref)
        if channel is None:
            print(f"[Puzzle] channel {self.channel_ref!r} not found; skipping daily cycle")
            return
        await self.run_cycle_in(channel)

    async def run_cycle_in(self, channel) -> None:
        """Reveal the outgoing previous answer, rotate the slot, then post the new puzzle."""
        outgoing = self.slot.previous
        if outgoing is not None:
            await channel.send(format_solution_reveal(outgoing))

        record = await self.fetch_func()
        self.slot.advance(record)
        print(
            f"[Puzzle] cycle rotated previous={getattr(self.slot.previous, 'id', None)} "
            f"current={getattr(record, 'id', None)}"
        )

        if record is None:
            await channel.send(FETCH_FAILURE_NOTICE)
            return
        await self._post_puzzle(channel, record, heading=DAILY_HEADING)

    async def post_test_puzzle(self, channel) -> None:
        """On-demand puzzle post. Leaves the slot untouched."""
        record = await self.fetch_func()
        if record is None:
            await channel.send(FETCH_FAILURE_NOTICE)
            return
        await self._post_puzzle(channel, record, heading=TEST_HEADING)

    async def _post_puzzle(self, channel, record: PuzzleRecord, *, heading: str) -> None:
        request_id = f"{record.id}-{uuid.uuid4().hex[:12]}"
        path = await asyncio.to_thread(
            self.render_func,
            record.position_notation,
            output_dir=self.render_dir,
            request_id=request_id,
        )
        if path is None:
            await channel.send(format_puzzle_caption(record, heading=heading, include_fen=True))
            return

        try:
            await channel.send(
                content=format_puzzle_caption(record, heading=heading, include_fen=False),
                file=discord.File(path, filename="puzzle.png"),
            )
        finally:
            try:
                os.remove(path)
            except OSError as e:
                print(f"[Render] could not remove {path}: {e}")

    def current_puzzle_text(self) -> str:
        record = self.slot.current
        if record is None:
            return NO_PUZZLE_TEXT
        return format_puzzle_caption(record, heading=DAILY_HEADING, include_fen=True)

    def check_answer(self, *, user_id: int, display_name: str, guess: str) -> str:
        record = self.slot.current
        if record is None:
            return NO_PUZZLE_TEXT
        move = normalize_uci_guess(guess)
        if move is None:
            return "Send your move in UCI notation, for example `/solve e2e4`."
        if move != record.solution_moves[0].lower():
            return "Not quite. Try again!"
        if self.score_ledger is None:
            return "Correct!"
        if not self.score_ledger.credit_puzzle(record.id, user_id, display_name):
            return "Correct! You've already been credited for this puzzle."
        points = self.score_ledger.points_for(user_id)
        noun = "point" if points == 1 else "points"
        return f"Correct! You now have {points} {noun}."
