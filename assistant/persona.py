from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_ASK_SYSTEM_PROMPT = (
    "You are Auggie the BuilderBot, a friendly AI who encourages learning through building small projects. "
    "Keep responses supportive, approachable, positive, and calm. Use the recent messages as context. "
    "Avoid overly enthusiastic language or repeated slogans."
)

DEFAULT_CHALLENGE_SYSTEM_PROMPT = (
    "You are Auggie the BuilderBot. Generate one fun, beginner-friendly building challenge. "
    "Focus on something people can easily do with AI tools or small coding tasks, and make it shareable. "
    "Give it a short, catchy title and then describe it in a few sentences. "
    "Encourage them to share their results."
)

DEFAULT_HELP_TEXT = (
    "**Auggie Help Menu**\n\n"
    "Use these **slash commands** to interact with Auggie:\n\n"
    "**/challenge** - Generate a weekly beginner-friendly building challenge.\n"
    "**/currentchallenge** - Show the last generated weekly challenge.\n"
    "**/addnote [text]** - Add a personal note.\n"
    "**/mynotes** - View all your notes.\n"
    "**/clearnotes** - Clear all your notes.\n"
    "**/puzzle** - Show today's chess puzzle.\n"
    "**/solve [move]** - Submit the first move of today's puzzle.\n"
    "**/leaderboard** - See who has solved the most puzzles.\n"
    "**/guide** - Get a quick overview of what we do here.\n\n"
    "And remember: **!ask [question]** - to ask Auggie something in a more conversational way!"
)

DEFAULT_GUIDE_TEXT = (
    "Welcome to BuildToLearn.ai! This is a space where you can learn by creating, "
    "experimenting, and sharing your progress. Whether you're just hanging out, following along, "
    "or ready to jump in and participate, we're glad to have you.\n\n"
    "**Channels Overview:**\n"
    "- **#start-here**: Intro and basics.\n"
    "- **#introductions**: Say hi if you like.\n"
    "- **#links-resources-learning**: Helpful materials.\n"
    "- **#wip**: Work-in-progress.\n"
    "- **#feedback**: Get input.\n"
    "- **#share**: Show finished projects.\n"
    "- **#build-history**: Track ongoing builds.\n"
    "- **#challenge**: Weekly building challenges.\n"
    "- **#chess-puzzles**: A fresh chess puzzle every day.\n"
    "- **#showcase**: Highlight notable projects.\n\n"
    "Feel free to explore and build at your own pace."
)

DEFAULT_WELCOME_TEMPLATE = (
    "**HELLO, {mention}!** Welcome to BuildToLearn.ai!\n"
    "Type **/guide** to get a quick overview of what we do here. We're excited to have you here!"
)


@dataclass(slots=True)
class Persona:
    version: str = "persona_v1"
    ask_system_prompt: str = DEFAULT_ASK_SYSTEM_PROMPT
    challenge_system_prompt: str = DEFAULT_CHALLENGE_SYSTEM_PROMPT
    help_text: str = DEFAULT_HELP_TEXT
    guide_text: str = DEFAULT_GUIDE_TEXT
    welcome_template: str = DEFAULT_WELCOME_TEMPLATE

    def welcome_message(self, mention: str) -> str:
        return self.welcome_template.replace("{mention}", mention)


def _as_text(value: Any, default: str) -> str:
    text = str(value or "").strip()
    return text or default


def load_persona(path: str | Path | None) -> tuple[Persona, str | None]:
    """
    Returns (persona, warning_message). warning_message is None on clean load.
    """
    defaults = Persona()
    if not path:
        return (defaults, "Persona path missing; using built-in defaults.")

    p = Path(path)
    if not p.exists():
        return (defaults, f"Persona file not found at {p}; using built-in defaults.")

    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as exc:
        return (defaults, f"Failed to read persona from {p}: {exc}; using built-in defaults.")

    if not isinstance(payload, dict):
        return (defaults, f"Invalid persona format in {p}; using built-in defaults.")

    persona = Persona(
        version=_as_text(payload.get("version"), defaults.version),
        ask_system_prompt=_as_text(payload.get("ask_system_prompt"), defaults.ask_system_prompt),
        challenge_system_prompt=_as_text(payload.get("challenge_system_prompt"), defaults.challenge_system_prompt),
        help_text=_as_text(payload.get("help_text"), defaults.help_text),
        guide_text=_as_text(payload.get("guide_text"), defaults.guide_text),
        welcome_template=_as_text(payload.get("welcome_template"), defaults.welcome_template),
    )
    return (persona, None)
