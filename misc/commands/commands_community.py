from __future__ import annotations

from discord import app_commands
from discord.ext import commands

from community.notes import format_notes
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    persona = deps.persona
    notes = deps.note_store

    @bot.hybrid_command(name="help", description="Displays Auggie's help menu")
    async def help_command(ctx: commands.Context):
        await deps.send_chunked(ctx, persona.help_text)

    @bot.hybrid_command(name="guide", description="Get a quick overview of what BuildToLearn.ai does")
    async def guide_command(ctx: commands.Context):
        await deps.send_chunked(ctx, persona.guide_text)

    @bot.hybrid_command(name="addnote", description="Add a personal note")
    @app_commands.describe(text="Your note text")
    async def addnote_command(ctx: commands.Context, *, text: str = ""):
        if not notes.add(int(ctx.author.id), text):
            await ctx.send("Please provide a note using /addnote text: your_note_here")
            return
        await ctx.send("Note added!")

    @bot.hybrid_command(name="mynotes", description="View all your notes")
    async def mynotes_command(ctx: commands.Context):
        user_notes = notes.list(int(ctx.author.id))
        if not user_notes:
            await ctx.send("You have no notes yet. Use `/addnote` to add some.")
            return
        await deps.send_chunked(ctx, format_notes(user_notes))

    @bot.hybrid_command(name="clearnotes", description="Clear all your notes")
    async def clearnotes_command(ctx: commands.Context):
        notes.clear(int(ctx.author.id))
        await ctx.send("All your notes have been cleared.")
