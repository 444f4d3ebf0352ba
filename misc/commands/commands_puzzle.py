from __future__ import annotations

from discord import app_commands
from discord.ext import commands

from community.scores import format_leaderboard
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates

TEST_PUZZLE_ACK = "Test puzzle posted."


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    puzzles = deps.puzzle_service

    @bot.hybrid_command(name="puzzle", description="Show today's chess puzzle")
    async def puzzle_command(ctx: commands.Context):
        await ctx.send(puzzles.current_puzzle_text())

    @bot.hybrid_command(name="solve", description="Submit the first move of today's puzzle")
    @app_commands.describe(move="Your move in UCI notation, e.g. e2e4")
    async def solve_command(ctx: commands.Context, *, move: str = ""):
        reply = puzzles.check_answer(
            user_id=int(ctx.author.id),
            display_name=str(getattr(ctx.author, "display_name", None) or ctx.author.name),
            guess=move,
        )
        await ctx.send(reply)

    @bot.hybrid_command(name="leaderboard", description="Show the puzzle leaderboard")
    async def leaderboard_command(ctx: commands.Context):
        entries = deps.score_ledger.top(deps.leaderboard_size)
        await deps.send_chunked(ctx, format_leaderboard(entries))

    @bot.hybrid_command(name="testpuzzle", description="Post a puzzle here without touching today's puzzle")
    @commands.guild_only()
    async def testpuzzle_command(ctx: commands.Context):
        if not gates.user_is_moderator(ctx.author):
            await ctx.send("You need the Manage Server permission to post a test puzzle.")
            return

        await ctx.defer(ephemeral=True)
        print(f"[Puzzle] test puzzle requested by user={ctx.author.id} channel={ctx.channel.id}")
        await puzzles.post_test_puzzle(ctx.channel)
        await ctx.send(TEST_PUZZLE_ACK, ephemeral=True)
