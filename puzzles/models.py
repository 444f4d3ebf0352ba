from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Side(str, Enum):
    WHITE = "White"
    BLACK = "Black"


@dataclass(frozen=True, slots=True)
class PuzzleRecord:
    id: str
    position_notation: str
    solution_moves: tuple[str, ...]
    external_link: str
    fetched_at: datetime
    side_to_move: Side


@dataclass(slots=True)
class PuzzleSlot:
    """Two-slot puzzle history. Volatile; a new slot starts empty."""

    current: PuzzleRecord | None = None
    previous: PuzzleRecord | None = None

    def advance(self, new_record: PuzzleRecord | None) -> None:
        self.previous = self.current
        self.current = new_record
