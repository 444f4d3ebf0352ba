from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Callable


def _default_false(*args, **kwargs) -> bool:
    return False


@dataclass(frozen=True)
class CommandDeps:
    # Core/shared
    send_chunked: Callable | None = None
    persona: Any = None

    # Community state
    note_store: Any = None
    score_ledger: Any = None
    leaderboard_size: int = 10

    # Ad-hoc modules
    challenge_board: Any = None
    puzzle_service: Any = None


@dataclass(frozen=True)
class CommandGates:
    user_is_moderator: Callable[[Any], bool] = _default_false
