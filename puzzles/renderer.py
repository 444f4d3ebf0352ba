from __future__ import annotations

import os
import uuid

import chess
from PIL import Image, ImageDraw, ImageFont

SQUARE_SIZE = 64
MARGIN = 24
LIGHT_SQUARE = (240, 217, 181)
DARK_SQUARE = (181, 136, 99)
BACKGROUND = (49, 46, 43)
LABEL_COLOR = (220, 220, 220)
WHITE_PIECE = (255, 255, 255)
BLACK_PIECE = (20, 20, 20)

# Fonts known to carry the unicode chess glyphs.
GLYPH_FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "Arial Unicode.ttf",
)


def _load_piece_font():
    for candidate in GLYPH_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, int(SQUARE_SIZE * 0.8)), True
        except OSError:
            continue
    return ImageFont.load_default(), False


def _draw_centered(draw: ImageDraw.ImageDraw, center: tuple[int, int], text: str, *, font, fill, **kwargs) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font, stroke_width=kwargs.get("stroke_width", 0))
    x = center[0] - (right - left) // 2 - left
    y = center[1] - (bottom - top) // 2 - top
    draw.text((x, y), text, font=font, fill=fill, **kwargs)


def _draw_board(board: chess.Board, *, flipped: bool) -> Image.Image:
    size = SQUARE_SIZE * 8 + MARGIN * 2
    image = Image.new("RGB", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(image)
    piece_font, has_glyphs = _load_piece_font()
    label_font = ImageFont.load_default()

    for rank in range(8):
        for file in range(8):
            col = 7 - file if flipped else file
            row = rank if flipped else 7 - rank
            x0 = MARGIN + col * SQUARE_SIZE
            y0 = MARGIN + row * SQUARE_SIZE
            color = LIGHT_SQUARE if (rank + file) % 2 else DARK_SQUARE
            draw.rectangle([x0, y0, x0 + SQUARE_SIZE - 1, y0 + SQUARE_SIZE - 1], fill=color)

            piece = board.piece_at(chess.square(file, rank))
            if piece is None:
                continue
            cx = x0 + SQUARE_SIZE // 2
            cy = y0 + SQUARE_SIZE // 2
            fill = WHITE_PIECE if piece.color == chess.WHITE else BLACK_PIECE
            outline = BLACK_PIECE if piece.color == chess.WHITE else WHITE_PIECE
            if has_glyphs:
                # Filled glyphs for both sides; colour carries the side.
                glyph = chess.Piece(piece.piece_type, chess.BLACK).unicode_symbol()
                _draw_centered(draw, (cx, cy), glyph, font=piece_font, fill=fill, stroke_width=2, stroke_fill=outline)
            else:
                r = SQUARE_SIZE // 3
                draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=fill, outline=outline, width=2)
                _draw_centered(draw, (cx, cy), piece.symbol().upper(), font=label_font, fill=outline)

    for i in range(8):
        file_label = chess.FILE_NAMES[7 - i if flipped else i]
        rank_label = chess.RANK_NAMES[i if flipped else 7 - i]
        x = MARGIN + i * SQUARE_SIZE + SQUARE_SIZE // 2
        y = MARGIN + i * SQUARE_SIZE + SQUARE_SIZE // 2
        _draw_centered(draw, (x, size - MARGIN // 2), file_label, font=label_font, fill=LABEL_COLOR)
        _draw_centered(draw, (MARGIN // 2, y), rank_label, font=label_font, fill=LABEL_COLOR)

    return image


def render_board(
    position_notation: str,
    *,
    output_dir: str,
    request_id: str | None = None,
) -> str | None:
    """
    Render a FEN position to a PNG and return its path, or None on failure.

    Each call writes its own file (board-<request_id>.png), so overlapping
    renders never overwrite each other.
    """
    fen = (position_notation or "").strip()
    if not fen:
        print("[Render] empty position; nothing to render")
        return None

    rid = (request_id or "").strip() or uuid.uuid4().hex
    try:
        board = chess.Board(fen)
        image = _draw_board(board, flipped=board.turn == chess.BLACK)
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, f"board-{rid}.png")
        image.save(path, format="PNG")
    except Exception as e:
        print(f"[Render] failed for fen={fen!r}: {e}")
        return None
    return path
