from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ScoreEntry:
    user_id: int
    display_name: str
    points: int = 0


class ScoreLedger:
    def __init__(self) -> None:
        self._entries: dict[int, ScoreEntry] = {}
        self._credited: set[tuple[str, int]] = set()

    def has_credit(self, puzzle_id: str, user_id: int) -> bool:
        return (str(puzzle_id), int(user_id)) in self._credited

    def credit_puzzle(self, puzzle_id: str, user_id: int, display_name: str, points: int = 1) -> bool:
        """Credit a solved puzzle once per user. Returns False if already credited."""
        if self.has_credit(puzzle_id, user_id):
            return False
        self._credited.add((str(puzzle_id), int(user_id)))
        entry = self._entries.get(int(user_id))
        if entry is None:
            entry = ScoreEntry(user_id=int(user_id), display_name=display_name)
            self._entries[int(user_id)] = entry
        entry.display_name = display_name or entry.display_name
        entry.points += int(points)
        return True

    def points_for(self, user_id: int) -> int:
        entry = self._entries.get(int(user_id))
        return entry.points if entry else 0

    def top(self, limit: int = 10) -> list[ScoreEntry]:
        ordered = sorted(self._entries.values(), key=lambda e: (-e.points, e.display_name.lower(), e.user_id))
        return ordered[: max(0, int(limit))]


def format_leaderboard(entries: list[ScoreEntry]) -> str:
    if not entries:
        return "No puzzle points yet. Solve today's puzzle with `/solve` to get on the board!"
    lines = ["**Puzzle Leaderboard**"]
    for rank, entry in enumerate(entries, start=1):
        noun = "point" if entry.points == 1 else "points"
        lines.append(f"{rank}. {entry.display_name} - {entry.points} {noun}")
    return "\n".join(lines)
