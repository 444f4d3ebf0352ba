from __future__ import annotations


class NoteStore:
    """Per-user notes kept in memory only."""

    def __init__(self) -> None:
        self._notes: dict[int, list[str]] = {}

    def add(self, user_id: int, text: str) -> bool:
        note = (text or "").strip()
        if not note:
            return False
        self._notes.setdefault(int(user_id), []).append(note)
        return True

    def list(self, user_id: int) -> list[str]:
        return list(self._notes.get(int(user_id), []))

    def clear(self, user_id: int) -> int:
        removed = len(self._notes.get(int(user_id), []))
        self._notes[int(user_id)] = []
        return removed


def format_notes(notes: list[str]) -> str:
    lines = ["**Your Notes:**"]
    for i, note in enumerate(notes, start=1):
        lines.append(f"{i}. {note}")
    return "\n".join(lines)
