from __future__ import annotations

import asyncio


async def complete_chat(
    *,
    client,
    model: str,
    messages: list[dict],
    max_tokens: int,
    temperature: float,
    label: str = "OpenAI",
) -> str | None:
    """Run one chat completion off the event loop. Returns None on API errors, "" on empty output."""
    try:
        resp = await asyncio.to_thread(
            client.chat.completions.create,
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
    except Exception as e:
        print(f"[{label}] completion error: {e}")
        return None

    choices = getattr(resp, "choices", None) or []
    if not choices:
        print(f"[{label}] completion returned no choices")
        return ""
    return (choices[0].message.content or "").strip()
