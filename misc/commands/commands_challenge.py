from __future__ import annotations

from discord.ext import commands

from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates

CHALLENGE_FAILURE_TEXT = "Sorry, I couldn't generate a challenge right now. Try again later."
NO_CHALLENGE_TEXT = "No current challenge has been set yet. Try `/challenge` to generate one!"


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    board = deps.challenge_board

    @bot.hybrid_command(name="challenge", description="Generate a new building challenge")
    async def challenge_command(ctx: commands.Context):
        reason = board.generator.disabled_reason()
        if reason:
            await ctx.send(f"Challenges are unavailable: {reason}.")
            return

        # Generation can take longer than the interaction window.
        await ctx.defer()
        challenge = await board.new_challenge()
        if not challenge:
            await ctx.send(CHALLENGE_FAILURE_TEXT)
            return
        await deps.send_chunked(ctx, challenge)

    @bot.hybrid_command(name="currentchallenge", description="Show the current challenge")
    async def currentchallenge_command(ctx: commands.Context):
        if not board.current:
            await ctx.send(NO_CHALLENGE_TEXT)
            return
        await deps.send_chunked(ctx, board.current)
