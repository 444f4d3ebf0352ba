from __future__ import annotations

from jobs.service import post_greeting
from jobs.service import scheduled_loop
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_challenge import register as register_challenge
from misc.commands.commands_community import register as register_community
from misc.commands.commands_puzzle import register as register_puzzle
from misc.events_runtime import register_runtime_events
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def user_is_moderator(member) -> bool:
    perms = getattr(member, "guild_permissions", None)
    return bool(getattr(perms, "manage_guild", False))


def wire_bot_runtime(
    bot,
    *,
    send_chunked,
    persona,
    note_store,
    score_ledger,
    challenge_board,
    puzzle_service,
    channel_resolver,
    client,
    openai_model: str,
    leaderboard_size: int,
    welcome_channel: str,
    sync_app_commands: bool,
    gm_enabled: bool,
    gm_channel: str,
    gm_time_utc: str,
    puzzle_enabled: bool,
    puzzle_time_local: str,
    puzzle_timezone: str,
    challenge_auto_post: bool,
    challenge_channel: str,
    challenge_time_local: str,
    challenge_weekday: int,
) -> None:
    command_deps = CommandDeps(
        send_chunked=send_chunked,
        persona=persona,
        note_store=note_store,
        score_ledger=score_ledger,
        leaderboard_size=leaderboard_size,
        challenge_board=challenge_board,
        puzzle_service=puzzle_service,
    )
    command_gates = CommandGates(
        user_is_moderator=user_is_moderator,
    )

    register_community(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_challenge(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_puzzle(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    async def gm_loop():
        async def run():
            await post_greeting(bot, channel_resolver=channel_resolver, channel_ref=gm_channel)

        await scheduled_loop(label="gm", run_func=run, time_local=gm_time_utc, timezone_name="UTC")

    async def puzzle_loop():
        async def run():
            await puzzle_service.run_daily_cycle(bot)

        await scheduled_loop(
            label="daily puzzle",
            run_func=run,
            time_local=puzzle_time_local,
            timezone_name=puzzle_timezone,
        )

    async def challenge_loop():
        async def run():
            await challenge_board.post_weekly(bot, channel_resolver=channel_resolver, channel_ref=challenge_channel)

        await scheduled_loop(
            label="weekly challenge",
            run_func=run,
            time_local=challenge_time_local,
            timezone_name=puzzle_timezone,
            weekday=challenge_weekday,
        )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            persona=persona,
            channel_resolver=channel_resolver,
            client=client,
            openai_model=openai_model,
            welcome_channel=welcome_channel,
        ),
        boot=RuntimeBootDeps(
            sync_app_commands=sync_app_commands,
            gm_enabled=gm_enabled,
            gm_loop_func=gm_loop,
            puzzle_enabled=puzzle_enabled,
            puzzle_loop_func=puzzle_loop,
            challenge_auto_post=challenge_auto_post and challenge_board.generator.enabled,
            challenge_loop_func=challenge_loop,
        ),
    )
