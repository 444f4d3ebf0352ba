from __future__ import annotations

import asyncio
import io
from datetime import datetime, timezone
from typing import Any

import aiohttp
import chess
import chess.pgn

from puzzles.models import PuzzleRecord
from puzzles.models import Side

DAILY_PUZZLE_URL = "https://lichess.org/api/puzzle/daily"
TRAINING_URL_TEMPLATE = "https://lichess.org/training/{game_id}"
REQUEST_TIMEOUT_SECONDS = 15


class PuzzleFetchError(RuntimeError):
    pass


class PuzzleReplayError(ValueError):
    pass


def replay_position(pgn_text: str, plies: int) -> chess.Board:
    """
    Replay the first `plies` mainline moves of a PGN game and return the board.

    Raises PuzzleReplayError when the game cannot be parsed, contains illegal
    moves, or is shorter than `plies`.
    """
    if plies < 0:
        raise PuzzleReplayError(f"cannot replay a negative number of plies ({plies})")

    text = (pgn_text or "").strip()
    if not text:
        raise PuzzleReplayError("game record is empty")

    try:
        game = chess.pgn.read_game(io.StringIO(text))
    except Exception as exc:
        raise PuzzleReplayError(f"unreadable game record: {exc}") from exc
    if game is None:
        raise PuzzleReplayError("game record contains no game")
    if game.errors:
        raise PuzzleReplayError(f"game record has errors: {game.errors[0]}")

    moves = list(game.mainline_moves())
    if plies > len(moves):
        raise PuzzleReplayError(f"game has {len(moves)} plies, puzzle needs {plies}")

    board = game.board()
    for move in moves[:plies]:
        board.push(move)
    return board


def build_puzzle_record(descriptor: dict[str, Any], fetched_at: datetime) -> PuzzleRecord:
    if not isinstance(descriptor, dict):
        raise PuzzleFetchError("descriptor is not a JSON object")
    puzzle = descriptor.get("puzzle")
    game = descriptor.get("game")
    if not isinstance(puzzle, dict) or not isinstance(game, dict):
        raise PuzzleFetchError("descriptor is missing 'puzzle' or 'game'")

    game_id = str(game.get("id") or "").strip()
    if not game_id:
        raise PuzzleFetchError("descriptor is missing game.id")

    try:
        initial_ply = int(puzzle.get("initialPly"))
    except (TypeError, ValueError) as exc:
        raise PuzzleReplayError(f"invalid initialPly: {puzzle.get('initialPly')!r}") from exc

    raw_solution = puzzle.get("solution")
    if not isinstance(raw_solution, list):
        raise PuzzleReplayError("solution is not a list")
    solution = tuple(str(m).strip() for m in raw_solution if str(m).strip())
    if not solution:
        raise PuzzleReplayError("solution is empty")

    # The position one ply before initialPly decides whose move is tested.
    board = replay_position(str(game.get("pgn") or ""), initial_ply - 1)

    return PuzzleRecord(
        id=str(puzzle.get("id") or game_id),
        position_notation=board.fen(),
        solution_moves=solution,
        external_link=TRAINING_URL_TEMPLATE.format(game_id=game_id),
        fetched_at=fetched_at,
        side_to_move=Side.WHITE if board.turn == chess.WHITE else Side.BLACK,
    )


async def _request_descriptor(session, url: str) -> dict[str, Any]:
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS)) as resp:
            if resp.status != 200:
                body = await resp.text()
                raise PuzzleFetchError(f"HTTP {resp.status}: {body[:200]}")
            return await resp.json()
    except PuzzleFetchError:
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
        raise PuzzleFetchError(f"request failed: {exc}") from exc


async def fetch_daily_puzzle(
    *,
    session=None,
    url: str = DAILY_PUZZLE_URL,
    now: datetime | None = None,
) -> PuzzleRecord | None:
    """Fetch today's puzzle. Returns None on any fetch or replay failure."""
    try:
        if session is None:
            async with aiohttp.ClientSession() as own_session:
                descriptor = await _request_descriptor(own_session, url)
        else:
            descriptor = await _request_descriptor(session, url)
        record = build_puzzle_record(descriptor, now or datetime.now(timezone.utc))
    except PuzzleFetchError as e:
        print(f"[Puzzle] fetch failed: {e}")
        return None
    except PuzzleReplayError as e:
        print(f"[Puzzle] replay failed: {e}")
        return None

    print(
        f"[Puzzle] fetched id={record.id} side={record.side_to_move.value} "
        f"solution_len={len(record.solution_moves)}"
    )
    return record
