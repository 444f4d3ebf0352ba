from __future__ import annotations

import unittest
from datetime import datetime, timezone
from types import SimpleNamespace

try:
    import discord
    from discord.ext import commands
except ModuleNotFoundError:
    discord = None
    commands = None

from assistant.persona import Persona
from community.notes import NoteStore
from community.scores import ScoreLedger
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from puzzles.models import PuzzleRecord
from puzzles.models import PuzzleSlot
from puzzles.models import Side

try:
    from challenges.service import ChallengeBoard
    from challenges.service import DisabledChallengeGenerator
    from misc.commands.commands_challenge import CHALLENGE_FAILURE_TEXT
    from misc.commands.commands_challenge import NO_CHALLENGE_TEXT
    from misc.commands.commands_challenge import register as register_challenge
    from misc.commands.commands_community import register as register_community
    from misc.commands.commands_puzzle import TEST_PUZZLE_ACK
    from misc.commands.commands_puzzle import register as register_puzzle
    from puzzles.service import PuzzleService
except ModuleNotFoundError:
    register_community = None


class _StaticGenerator:
    enabled = True

    def __init__(self, text: str | None):
        self.text = text
        self.calls = 0

    def disabled_reason(self):
        return None

    async def generate(self):
        self.calls += 1
        return self.text


class _FakeCtx:
    def __init__(self, *, user_id: int = 7, manage_guild: bool = False):
        self.author = SimpleNamespace(
            id=user_id,
            name=f"user{user_id}",
            display_name=f"User {user_id}",
            guild_permissions=SimpleNamespace(manage_guild=manage_guild),
        )
        self.channel = SimpleNamespace(id=123)
        self.sent: list[str] = []
        self.send_kwargs: list[dict] = []
        self.deferred = False

    async def send(self, text: str, **kwargs):
        self.sent.append(str(text))
        self.send_kwargs.append(kwargs)

    async def defer(self, **kwargs):
        self.deferred = True


def _record(puzzle_id: str = "p1") -> PuzzleRecord:
    return PuzzleRecord(
        id=puzzle_id,
        position_notation="8/8/8/8/8/8/8/K6k w - - 0 1",
        solution_moves=("a1a2",),
        external_link=f"https://lichess.org/training/{puzzle_id}",
        fetched_at=datetime(2026, 3, 2, tzinfo=timezone.utc),
        side_to_move=Side.WHITE,
    )


@unittest.skipIf(discord is None or commands is None or register_community is None, "discord.py not installed")
class CommandTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.sent_chunked: list[str] = []
        self.test_posts: list = []

        async def _send_chunked(_channel, text: str):
            self.sent_chunked.append(str(text))

        self.notes = NoteStore()
        self.ledger = ScoreLedger()
        self.slot = PuzzleSlot()
        self.puzzles = PuzzleService(
            slot=self.slot,
            channel_ref="chess-puzzles",
            render_dir="unused",
            score_ledger=self.ledger,
        )

        async def _post_test_puzzle(channel):
            self.test_posts.append(channel)

        self.puzzles.post_test_puzzle = _post_test_puzzle
        self.generator = _StaticGenerator("**Weekly Challenge:**\nBuild a clock.")
        self.board = ChallengeBoard(self.generator)

        self.deps = CommandDeps(
            send_chunked=_send_chunked,
            persona=Persona(help_text="HELP", guide_text="GUIDE"),
            note_store=self.notes,
            score_ledger=self.ledger,
            leaderboard_size=10,
            challenge_board=self.board,
            puzzle_service=self.puzzles,
        )
        self.bot = self._bot(CommandGates(user_is_moderator=lambda member: member.guild_permissions.manage_guild))

    def _bot(self, gates: CommandGates):
        bot = commands.Bot(command_prefix="!", intents=discord.Intents.none(), help_command=None)
        register_community(bot, deps=self.deps, gates=gates)
        register_challenge(bot, deps=self.deps, gates=gates)
        register_puzzle(bot, deps=self.deps, gates=gates)
        return bot

    async def asyncTearDown(self):
        await self.bot.close()

    async def test_help_and_guide_use_persona_texts(self):
        await self.bot.get_command("help").callback(_FakeCtx())
        await self.bot.get_command("guide").callback(_FakeCtx())
        self.assertEqual(self.sent_chunked, ["HELP", "GUIDE"])

    async def test_notes_flow(self):
        ctx = _FakeCtx()
        await self.bot.get_command("mynotes").callback(ctx)
        await self.bot.get_command("addnote").callback(ctx, text="learn forks")
        await self.bot.get_command("addnote").callback(ctx, text="  ")
        await self.bot.get_command("mynotes").callback(ctx)
        await self.bot.get_command("clearnotes").callback(ctx)

        self.assertIn("no notes yet", ctx.sent[0])
        self.assertEqual(ctx.sent[1], "Note added!")
        self.assertIn("Please provide a note", ctx.sent[2])
        self.assertEqual(self.sent_chunked, ["**Your Notes:**\n1. learn forks"])
        self.assertEqual(ctx.sent[-1], "All your notes have been cleared.")
        self.assertEqual(self.notes.list(7), [])

    async def test_challenge_generates_and_stores(self):
        ctx = _FakeCtx()
        await self.bot.get_command("currentchallenge").callback(ctx)
        await self.bot.get_command("challenge").callback(ctx)
        await self.bot.get_command("currentchallenge").callback(ctx)

        self.assertEqual(ctx.sent, [NO_CHALLENGE_TEXT])
        self.assertTrue(ctx.deferred)
        self.assertEqual(self.sent_chunked, ["**Weekly Challenge:**\nBuild a clock."] * 2)

    async def test_challenge_failure_text(self):
        self.generator.text = None
        ctx = _FakeCtx()
        await self.bot.get_command("challenge").callback(ctx)
        self.assertEqual(ctx.sent, [CHALLENGE_FAILURE_TEXT])

    async def test_disabled_challenge_does_not_generate(self):
        self.board.generator = DisabledChallengeGenerator("OPENAI_API_KEY is not configured")
        ctx = _FakeCtx()
        await self.bot.get_command("challenge").callback(ctx)
        self.assertIn("OPENAI_API_KEY", ctx.sent[0])
        self.assertFalse(ctx.deferred)

    async def test_puzzle_and_solve(self):
        ctx = _FakeCtx()
        await self.bot.get_command("puzzle").callback(ctx)
        self.assertEqual(ctx.sent, ["No puzzle is active right now."])

        self.slot.advance(_record())
        await self.bot.get_command("puzzle").callback(ctx)
        self.assertIn("White to move", ctx.sent[-1])

        await self.bot.get_command("solve").callback(ctx, move="a1b1")
        self.assertEqual(ctx.sent[-1], "Not quite. Try again!")
        await self.bot.get_command("solve").callback(ctx, move="a1a2")
        self.assertEqual(ctx.sent[-1], "Correct! You now have 1 point.")

        await self.bot.get_command("leaderboard").callback(ctx)
        self.assertEqual(self.sent_chunked[-1], "**Puzzle Leaderboard**\n1. User 7 - 1 point")

    async def test_testpuzzle_requires_manage_server(self):
        ctx = _FakeCtx(manage_guild=False)
        await self.bot.get_command("testpuzzle").callback(ctx)
        self.assertIn("Manage Server", ctx.sent[0])
        self.assertEqual(self.test_posts, [])

    async def test_testpuzzle_posts_in_invoking_channel(self):
        ctx = _FakeCtx(manage_guild=True)
        await self.bot.get_command("testpuzzle").callback(ctx)
        self.assertTrue(ctx.deferred)
        self.assertEqual(self.test_posts, [ctx.channel])
        self.assertIsNone(self.slot.current)
        # A deferred slash interaction needs a follow-up through the context.
        self.assertEqual(ctx.sent, [TEST_PUZZLE_ACK])
        self.assertEqual(ctx.send_kwargs, [{"ephemeral": True}])


if __name__ == "__main__":
    unittest.main()
