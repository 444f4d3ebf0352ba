import os
import tempfile

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"

# Channels are referenced by name or numeric id.
DEFAULT_PUZZLE_CHANNEL = "chess-puzzles"
DEFAULT_GM_CHANNEL = "gm"
DEFAULT_WELCOME_CHANNEL = "arrivals"
DEFAULT_CHALLENGE_CHANNEL = "challenge"

DEFAULT_PUZZLE_TIME_LOCAL = "12:00"
DEFAULT_PUZZLE_TIMEZONE = "UTC"
DEFAULT_GM_TIME_UTC = "11:00"
DEFAULT_CHALLENGE_TIME_LOCAL = "15:00"
DEFAULT_CHALLENGE_WEEKDAY = "monday"

DEFAULT_RENDER_DIR = os.path.join(tempfile.gettempdir(), "auggie-boards")
DEFAULT_LEADERBOARD_SIZE = 10
