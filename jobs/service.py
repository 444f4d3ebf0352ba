from __future__ import annotations

import asyncio
import re
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

WEEKDAY_KEYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_hhmm(value: str) -> tuple[int, int]:
    v = (value or "").strip()
    m = re.fullmatch(r"([01]\d|2[0-3]):([0-5]\d)", v)
    if not m:
        raise ValueError(f"Invalid HH:MM time: {value}")
    return int(m.group(1)), int(m.group(2))


def parse_weekday(value: str | None) -> int | None:
    key = (value or "").strip().lower()
    if not key:
        return None
    if key not in WEEKDAY_KEYS:
        raise ValueError(f"Invalid weekday: {value}")
    return WEEKDAY_KEYS.index(key)


def resolve_tz(timezone_name: str) -> ZoneInfo:
    try:
        return ZoneInfo((timezone_name or "UTC").strip() or "UTC")
    except Exception:
        return ZoneInfo("UTC")


def next_run_at(now_local: datetime, *, hour: int, minute: int, weekday: int | None = None) -> datetime:
    """Next wall-clock occurrence strictly after now_local (same tzinfo)."""
    candidate = now_local.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if weekday is None:
        if candidate <= now_local:
            candidate += timedelta(days=1)
        return candidate
    candidate += timedelta(days=(weekday - candidate.weekday()) % 7)
    if candidate <= now_local:
        candidate += timedelta(days=7)
    return candidate


async def scheduled_loop(
    *,
    label: str,
    run_func,
    time_local: str,
    timezone_name: str = "UTC",
    weekday: int | None = None,
    sleep_func=asyncio.sleep,
    now_func=None,
    max_runs: int | None = None,
) -> None:
    hour, minute = parse_hhmm(time_local)
    tz = resolve_tz(timezone_name)
    last_run_date = None
    runs = 0
    while max_runs is None or runs < max_runs:
        now_utc = (now_func() if now_func else datetime.now(timezone.utc)).astimezone(timezone.utc)
        target = next_run_at(now_utc.astimezone(tz), hour=hour, minute=minute, weekday=weekday)
        # At most one run per local date, even if a DST shift wakes us early.
        if target.date() == last_run_date:
            target = next_run_at(target, hour=hour, minute=minute, weekday=weekday)

        # Same-tz aware datetimes subtract as wall-clock time; measure in UTC instead.
        wait_seconds = max(1.0, (target.astimezone(timezone.utc) - now_utc).total_seconds())
        print(f"[Jobs] {label} next run at {target.isoformat()} (in {int(wait_seconds)}s)")
        await sleep_func(wait_seconds)

        try:
            await run_func()
        except Exception as e:
            print(f"[Jobs] {label} run error: {e}")
        last_run_date = target.date()
        runs += 1


async def post_greeting(bot, *, channel_resolver, channel_ref: str, text: str = "gm") -> None:
    channel = await channel_resolver(bot, channel_ref)
    if channel is None:
        print(f"[Jobs] greeting channel {channel_ref!r} not found. Please create one named #{channel_ref}.")
        return
    await channel.send(text)
