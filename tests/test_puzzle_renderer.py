from __future__ import annotations

import os
import tempfile
import unittest

import chess
from PIL import Image

from puzzles.renderer import render_board


class RenderBoardTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self._tmp.name, "boards")

    def tearDown(self):
        self._tmp.cleanup()

    def test_renders_png_for_valid_position(self):
        path = render_board(chess.STARTING_FEN, output_dir=self.output_dir, request_id="start")

        self.assertIsNotNone(path)
        self.assertTrue(path.endswith("board-start.png"))
        with Image.open(path) as image:
            self.assertEqual(image.format, "PNG")
            self.assertEqual(image.size[0], image.size[1])

    def test_black_to_move_renders(self):
        board = chess.Board()
        board.push_san("e4")
        self.assertIsNotNone(render_board(board.fen(), output_dir=self.output_dir))

    def test_empty_position_returns_none(self):
        self.assertIsNone(render_board("", output_dir=self.output_dir))
        self.assertIsNone(render_board("   ", output_dir=self.output_dir))

    def test_invalid_position_returns_none(self):
        self.assertIsNone(render_board("not a position", output_dir=self.output_dir))

    def test_each_render_gets_its_own_file(self):
        first = render_board(chess.STARTING_FEN, output_dir=self.output_dir)
        second = render_board(chess.STARTING_FEN, output_dir=self.output_dir)

        self.assertIsNotNone(first)
        self.assertIsNotNone(second)
        self.assertNotEqual(first, second)
        self.assertTrue(os.path.exists(first))
        self.assertTrue(os.path.exists(second))


if __name__ == "__main__":
    unittest.main()
