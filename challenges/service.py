from __future__ import annotations

from typing import Protocol

from assistant.llm import complete_chat

CHALLENGE_MAX_TOKENS = 300
CHALLENGE_TEMPERATURE = 0.8
CHALLENGE_HEADER = "**Weekly Challenge:**"


class ChallengeGenerator(Protocol):
    enabled: bool

    def disabled_reason(self) -> str | None: ...

    async def generate(self) -> str | None: ...


class OpenAIChallengeGenerator:
    enabled = True

    def __init__(self, *, client, openai_model: str, system_prompt: str) -> None:
        self.client = client
        self.openai_model = openai_model
        self.system_prompt = system_prompt

    def disabled_reason(self) -> str | None:
        return None

    async def generate(self) -> str | None:
        answer = await complete_chat(
            client=self.client,
            model=self.openai_model,
            messages=[{"role": "system", "content": self.system_prompt}],
            max_tokens=CHALLENGE_MAX_TOKENS,
            temperature=CHALLENGE_TEMPERATURE,
            label="Challenge",
        )
        if not answer:
            return None
        return f"{CHALLENGE_HEADER}\n{answer}"


class DisabledChallengeGenerator:
    enabled = False

    def __init__(self, reason: str = "challenge generation is turned off") -> None:
        self.reason = reason

    def disabled_reason(self) -> str | None:
        return self.reason

    async def generate(self) -> str | None:
        return None


def build_challenge_generator(
    *,
    enabled: bool,
    client,
    openai_model: str,
    system_prompt: str,
) -> ChallengeGenerator:
    if not enabled:
        return DisabledChallengeGenerator()
    if client is None:
        return DisabledChallengeGenerator("OPENAI_API_KEY is not configured")
    return OpenAIChallengeGenerator(client=client, openai_model=openai_model, system_prompt=system_prompt)


class ChallengeBoard:
    """Latest generated challenge. Volatile."""

    def __init__(self, generator: ChallengeGenerator) -> None:
        self.generator = generator
        self.current: str | None = None

    async def new_challenge(self) -> str | None:
        challenge = await self.generator.generate()
        if challenge:
            self.current = challenge
        return challenge

    async def post_weekly(self, bot, *, channel_resolver, channel_ref: str) -> None:
        if not self.generator.enabled:
            return
        channel = await channel_resolver(bot, channel_ref)
        if channel is None:
            print(f"[Challenge] channel {channel_ref!r} not found; skipping weekly post")
            return
        challenge = await self.new_challenge()
        if challenge is None:
            print("[Challenge] weekly generation failed; nothing posted")
            return
        await channel.send(challenge)
