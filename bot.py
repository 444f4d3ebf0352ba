import os

import discord
from discord.ext import commands
from dotenv import load_dotenv
from openai import OpenAI

from assistant.persona import load_persona
from challenges.service import ChallengeBoard
from challenges.service import build_challenge_generator
from community.notes import NoteStore
from community.scores import ScoreLedger
from config.defaults import DEFAULT_CHALLENGE_CHANNEL
from config.defaults import DEFAULT_CHALLENGE_TIME_LOCAL
from config.defaults import DEFAULT_CHALLENGE_WEEKDAY
from config.defaults import DEFAULT_GM_CHANNEL
from config.defaults import DEFAULT_GM_TIME_UTC
from config.defaults import DEFAULT_LEADERBOARD_SIZE
from config.defaults import DEFAULT_OPENAI_MODEL
from config.defaults import DEFAULT_PUZZLE_CHANNEL
from config.defaults import DEFAULT_PUZZLE_TIME_LOCAL
from config.defaults import DEFAULT_PUZZLE_TIMEZONE
from config.defaults import DEFAULT_RENDER_DIR
from config.defaults import DEFAULT_WELCOME_CHANNEL
from jobs.service import parse_hhmm
from jobs.service import parse_weekday
from misc.discord_channels import resolve_text_channel
from misc.discord_text import send_chunked
from misc.runtime_wiring import wire_bot_runtime
from puzzles.models import PuzzleSlot
from puzzles.service import PuzzleService

load_dotenv()

# =========================
# ENV
# =========================
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

if not DISCORD_TOKEN:
    raise RuntimeError("Missing DISCORD_TOKEN env var")

OPENAI_MODEL = os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL).strip() or DEFAULT_OPENAI_MODEL


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip() == "1"


def _env_time(name: str, default: str) -> str:
    value = os.getenv(name, default).strip() or default
    try:
        parse_hhmm(value)
    except ValueError:
        print(f"[CFG] invalid {name}={value!r}; falling back to {default!r}")
        return default
    return value


client = OpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None
if client is None:
    print("[CFG] OPENAI_API_KEY not set; !ask and challenges will reply with fallback text")

# =========================
# PERSONA
# =========================
_RAW_PERSONA_PATH = os.getenv("AUGGIE_PERSONA_PATH")
PERSONA_PATH = os.getenv(
    "AUGGIE_PERSONA_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "config", "persona.yml"),
)
PERSONA, PERSONA_WARNING = load_persona(PERSONA_PATH)
PERSONA_SOURCE = "env_override" if _RAW_PERSONA_PATH is not None else "file"
if PERSONA_WARNING:
    PERSONA_SOURCE = "fallback"

print(f"[CFG] persona={PERSONA.version} source={PERSONA_SOURCE} path={PERSONA_PATH}")
if PERSONA_WARNING:
    print(f"[CFG] {PERSONA_WARNING}")

# =========================
# DAILY PUZZLE
# =========================
PUZZLE_ENABLED = _env_flag("AUGGIE_PUZZLE_ENABLED", "1")
PUZZLE_CHANNEL = os.getenv("AUGGIE_PUZZLE_CHANNEL", DEFAULT_PUZZLE_CHANNEL).strip() or DEFAULT_PUZZLE_CHANNEL
PUZZLE_TIME_LOCAL = _env_time("AUGGIE_PUZZLE_TIME_LOCAL", DEFAULT_PUZZLE_TIME_LOCAL)
PUZZLE_TIMEZONE = os.getenv("AUGGIE_PUZZLE_TIMEZONE", DEFAULT_PUZZLE_TIMEZONE).strip() or DEFAULT_PUZZLE_TIMEZONE
RENDER_DIR = os.getenv("AUGGIE_RENDER_DIR", DEFAULT_RENDER_DIR).strip() or DEFAULT_RENDER_DIR

print(
    f"[CFG] puzzle_enabled={PUZZLE_ENABLED} channel={PUZZLE_CHANNEL} "
    f"time={PUZZLE_TIME_LOCAL} tz={PUZZLE_TIMEZONE} render_dir={RENDER_DIR}"
)

# =========================
# COMMUNITY POSTS
# =========================
GM_ENABLED = _env_flag("AUGGIE_GM_ENABLED", "1")
GM_CHANNEL = os.getenv("AUGGIE_GM_CHANNEL", DEFAULT_GM_CHANNEL).strip() or DEFAULT_GM_CHANNEL
GM_TIME_UTC = _env_time("AUGGIE_GM_TIME_UTC", DEFAULT_GM_TIME_UTC)
WELCOME_CHANNEL = os.getenv("AUGGIE_WELCOME_CHANNEL", DEFAULT_WELCOME_CHANNEL).strip() or DEFAULT_WELCOME_CHANNEL

CHALLENGE_ENABLED = _env_flag("AUGGIE_CHALLENGE_ENABLED", "1")
CHALLENGE_AUTO_POST = _env_flag("AUGGIE_CHALLENGE_AUTO_POST", "0")
CHALLENGE_CHANNEL = os.getenv("AUGGIE_CHALLENGE_CHANNEL", DEFAULT_CHALLENGE_CHANNEL).strip() or DEFAULT_CHALLENGE_CHANNEL
CHALLENGE_TIME_LOCAL = _env_time("AUGGIE_CHALLENGE_TIME_LOCAL", DEFAULT_CHALLENGE_TIME_LOCAL)
CHALLENGE_WEEKDAY = parse_weekday(DEFAULT_CHALLENGE_WEEKDAY)

print(
    f"[CFG] gm_enabled={GM_ENABLED} gm_channel={GM_CHANNEL} gm_time_utc={GM_TIME_UTC} "
    f"welcome_channel={WELCOME_CHANNEL}"
)
print(
    f"[CFG] challenge_enabled={CHALLENGE_ENABLED} auto_post={CHALLENGE_AUTO_POST} "
    f"channel={CHALLENGE_CHANNEL} time={CHALLENGE_TIME_LOCAL} model={OPENAI_MODEL}"
)

# =========================
# STATE (volatile)
# =========================
note_store = NoteStore()
score_ledger = ScoreLedger()
puzzle_slot = PuzzleSlot()

puzzle_service = PuzzleService(
    slot=puzzle_slot,
    channel_ref=PUZZLE_CHANNEL,
    render_dir=RENDER_DIR,
    score_ledger=score_ledger,
)

challenge_generator = build_challenge_generator(
    enabled=CHALLENGE_ENABLED,
    client=client,
    openai_model=OPENAI_MODEL,
    system_prompt=PERSONA.challenge_system_prompt,
)
if not challenge_generator.enabled:
    print(f"[CFG] challenges disabled: {challenge_generator.disabled_reason()}")
challenge_board = ChallengeBoard(challenge_generator)

# =========================
# DISCORD BOT
# =========================
intents = discord.Intents.default()
intents.message_content = True
intents.members = True

bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

wire_bot_runtime(
    bot,
    send_chunked=send_chunked,
    persona=PERSONA,
    note_store=note_store,
    score_ledger=score_ledger,
    challenge_board=challenge_board,
    puzzle_service=puzzle_service,
    channel_resolver=resolve_text_channel,
    client=client,
    openai_model=OPENAI_MODEL,
    leaderboard_size=DEFAULT_LEADERBOARD_SIZE,
    welcome_channel=WELCOME_CHANNEL,
    sync_app_commands=True,
    gm_enabled=GM_ENABLED,
    gm_channel=GM_CHANNEL,
    gm_time_utc=GM_TIME_UTC,
    puzzle_enabled=PUZZLE_ENABLED,
    puzzle_time_local=PUZZLE_TIME_LOCAL,
    puzzle_timezone=PUZZLE_TIMEZONE,
    challenge_auto_post=CHALLENGE_AUTO_POST,
    challenge_channel=CHALLENGE_CHANNEL,
    challenge_time_local=CHALLENGE_TIME_LOCAL,
    challenge_weekday=CHALLENGE_WEEKDAY,
)

bot.run(DISCORD_TOKEN)
