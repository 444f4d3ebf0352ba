from __future__ import annotations

import asyncio

import discord
from discord.ext import commands

from assistant.ask import answer_question
from assistant.ask import is_ask_message
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def _start_task(bot, attr: str, coro_func, label: str) -> None:
    if getattr(bot, attr, None):
        return
    setattr(bot, attr, asyncio.create_task(coro_func()))
    print(f"[Jobs] {label} loop started")


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    @bot.event
    async def on_ready():
        print(f"Auggie is online as {bot.user}")

        if boot.sync_app_commands and not getattr(bot, "_app_commands_synced", False):
            try:
                synced = await bot.tree.sync()
                bot._app_commands_synced = True
                print(f"[CFG] synced {len(synced)} slash command(s)")
            except discord.DiscordException as e:
                print(f"[CFG] slash command sync failed: {e}")

        if boot.gm_enabled:
            _start_task(bot, "_gm_task", boot.gm_loop_func, "gm")
        if boot.puzzle_enabled:
            _start_task(bot, "_puzzle_task", boot.puzzle_loop_func, "daily puzzle")
        if boot.challenge_auto_post:
            _start_task(bot, "_challenge_task", boot.challenge_loop_func, "weekly challenge")

    @bot.event
    async def on_member_join(member: discord.Member):
        channel = await deps.channel_resolver(bot, deps.welcome_channel)
        if channel is None:
            print(f"[Welcome] channel {deps.welcome_channel!r} not found; skipping welcome for {member.id}")
            return
        await channel.send(deps.persona.welcome_message(member.mention))

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return

        if is_ask_message(message.content):
            reply = await answer_question(
                message,
                bot_user_id=(bot.user.id if bot.user else None),
                client=deps.client,
                openai_model=deps.openai_model,
                system_prompt=deps.persona.ask_system_prompt,
            )
            print(f"[Ask] answered user={message.author.id} channel={message.channel.id}")
            await message.reply(reply)
            return

        await bot.process_commands(message)
