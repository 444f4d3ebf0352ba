from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RuntimeDeps:
    # core
    persona: Any
    channel_resolver: Callable

    # llm
    client: Any
    openai_model: str

    # welcome
    welcome_channel: str


@dataclass(frozen=True)
class RuntimeBootDeps:
    sync_app_commands: bool
    gm_enabled: bool
    gm_loop_func: Callable
    puzzle_enabled: bool
    puzzle_loop_func: Callable
    challenge_auto_post: bool
    challenge_loop_func: Callable
