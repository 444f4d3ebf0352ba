from __future__ import annotations

import asyncio
import unittest
from datetime import datetime, timezone

import aiohttp
import chess

from puzzles.fetcher import PuzzleReplayError
from puzzles.fetcher import build_puzzle_record
from puzzles.fetcher import fetch_daily_puzzle
from puzzles.fetcher import replay_position
from puzzles.models import Side

FIXED_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _descriptor(*, pgn: str = "1. d4 d5 2. c4", initial_ply=3, solution=None, puzzle_id="pz1", game_id="abc123"):
    return {
        "game": {"id": game_id, "pgn": pgn},
        "puzzle": {
            "id": puzzle_id,
            "initialPly": initial_ply,
            "solution": ["e2e4", "e7e5"] if solution is None else solution,
        },
    }


class _FakeResponse:
    def __init__(self, status: int, payload=None, body: str = ""):
        self.status = status
        self._payload = payload
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def text(self):
        return self._body

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse):
        self.response = response
        self.calls: list[dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        return self.response


class _RaisingSession:
    def __init__(self, exc: Exception):
        self.exc = exc

    def get(self, url, **kwargs):
        raise self.exc


class ReplayPositionTests(unittest.TestCase):
    def test_replays_exactly_the_requested_plies(self):
        board = replay_position("1. e4 e5 2. Nf3 Nc6", 3)
        expected = chess.Board()
        for san in ("e4", "e5", "Nf3"):
            expected.push_san(san)
        self.assertEqual(board.fen(), expected.fen())

    def test_zero_plies_is_starting_position(self):
        self.assertEqual(replay_position("1. e4 e5", 0).fen(), chess.STARTING_FEN)

    def test_more_plies_than_game_raises(self):
        with self.assertRaises(PuzzleReplayError):
            replay_position("1. e4 e5", 3)

    def test_negative_plies_raises(self):
        with self.assertRaises(PuzzleReplayError):
            replay_position("1. e4 e5", -1)

    def test_empty_record_raises(self):
        with self.assertRaises(PuzzleReplayError):
            replay_position("   ", 0)

    def test_illegal_move_raises(self):
        with self.assertRaises(PuzzleReplayError):
            replay_position("1. e4 e5 2. Ke3 Nc6", 3)


class BuildPuzzleRecordTests(unittest.TestCase):
    def test_daily_scenario_replays_one_ply_before_initial_ply(self):
        record = build_puzzle_record(_descriptor(), FIXED_NOW)

        expected = chess.Board()
        expected.push_san("d4")
        expected.push_san("d5")
        self.assertEqual(record.position_notation, expected.fen())
        self.assertEqual(record.side_to_move, Side.WHITE)
        self.assertEqual(record.external_link, "https://lichess.org/training/abc123")
        self.assertEqual(record.solution_moves, ("e2e4", "e7e5"))
        self.assertEqual(record.id, "pz1")
        self.assertEqual(record.fetched_at, FIXED_NOW)

    def test_side_to_move_follows_replayed_ply_parity(self):
        pgn = "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6"
        for initial_ply in range(1, 7):
            record = build_puzzle_record(_descriptor(pgn=pgn, initial_ply=initial_ply), FIXED_NOW)
            expected = Side.WHITE if (initial_ply - 1) % 2 == 0 else Side.BLACK
            self.assertEqual(record.side_to_move, expected, msg=f"initialPly={initial_ply}")

    def test_solution_is_never_empty(self):
        with self.assertRaises(PuzzleReplayError):
            build_puzzle_record(_descriptor(solution=[]), FIXED_NOW)
        with self.assertRaises(PuzzleReplayError):
            build_puzzle_record(_descriptor(solution=["", "  "]), FIXED_NOW)

    def test_initial_ply_zero_is_a_replay_failure(self):
        with self.assertRaises(PuzzleReplayError):
            build_puzzle_record(_descriptor(initial_ply=0), FIXED_NOW)

    def test_non_numeric_initial_ply_is_a_replay_failure(self):
        with self.assertRaises(PuzzleReplayError):
            build_puzzle_record(_descriptor(initial_ply="soon"), FIXED_NOW)

    def test_id_falls_back_to_game_id(self):
        record = build_puzzle_record(_descriptor(puzzle_id=None), FIXED_NOW)
        self.assertEqual(record.id, "abc123")


class FetchDailyPuzzleTests(unittest.IsolatedAsyncioTestCase):
    async def test_success_returns_record(self):
        session = _FakeSession(_FakeResponse(200, payload=_descriptor()))
        record = await fetch_daily_puzzle(session=session, now=FIXED_NOW)

        self.assertIsNotNone(record)
        self.assertEqual(record.side_to_move, Side.WHITE)
        self.assertEqual(session.calls[0]["url"], "https://lichess.org/api/puzzle/daily")
        self.assertIn("timeout", session.calls[0])

    async def test_http_503_returns_none(self):
        session = _FakeSession(_FakeResponse(503, body="unavailable"))
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))

    async def test_malformed_json_returns_none(self):
        session = _FakeSession(_FakeResponse(200, payload=ValueError("bad json")))
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))

    async def test_missing_game_returns_none(self):
        session = _FakeSession(_FakeResponse(200, payload={"puzzle": {"initialPly": 1, "solution": ["e2e4"]}}))
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))

    async def test_short_game_returns_none(self):
        session = _FakeSession(_FakeResponse(200, payload=_descriptor(pgn="1. e4", initial_ply=5)))
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))

    async def test_connection_error_returns_none(self):
        session = _RaisingSession(aiohttp.ClientConnectionError("connection refused"))
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))

    async def test_timeout_returns_none(self):
        session = _RaisingSession(asyncio.TimeoutError())
        self.assertIsNone(await fetch_daily_puzzle(session=session, now=FIXED_NOW))


if __name__ == "__main__":
    unittest.main()
