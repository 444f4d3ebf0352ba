from __future__ import annotations

from assistant.llm import complete_chat

ASK_PREFIX = "!ask"
ASK_HISTORY_LIMIT = 20
ASK_MAX_TOKENS = 200
ASK_TEMPERATURE = 0.7

EMPTY_QUESTION_REPLY = "Ask me something after `!ask`!"
API_FAILURE_REPLY = "Sorry, I'm having trouble connecting to the AI right now."
NO_ANSWER_REPLY = "Hmm, I didn't find an answer. Try again?"
ERROR_REPLY = "I ran into an error. Try again in a moment?"


def is_ask_message(content: str) -> bool:
    parts = (content or "").strip().lower().split(maxsplit=1)
    return bool(parts) and parts[0] == ASK_PREFIX


def extract_question(content: str) -> str:
    text = (content or "").strip()
    return text[len(ASK_PREFIX):].strip()


def build_ask_messages(
    *,
    system_prompt: str,
    history: list[tuple[bool, str]],
    question: str,
) -> list[dict]:
    """history is oldest-first (is_bot_author, content) pairs."""
    msgs = [{"role": "system", "content": system_prompt}]
    for from_bot, content in history:
        if not content:
            continue
        msgs.append({"role": "assistant" if from_bot else "user", "content": content})
    msgs.append({"role": "user", "content": question})
    return msgs


async def fetch_history(channel, *, bot_user_id: int | None, limit: int = ASK_HISTORY_LIMIT) -> list[tuple[bool, str]]:
    fetched = [m async for m in channel.history(limit=limit)]
    fetched.sort(key=lambda m: m.created_at)
    return [
        (bot_user_id is not None and int(m.author.id) == int(bot_user_id), m.content or "")
        for m in fetched
    ]


async def answer_question(
    message,
    *,
    bot_user_id: int | None,
    client,
    openai_model: str,
    system_prompt: str,
) -> str:
    """Build the reply text for an `!ask` message."""
    question = extract_question(message.content)
    if not question:
        return EMPTY_QUESTION_REPLY

    try:
        history = await fetch_history(message.channel, bot_user_id=bot_user_id)
        chat_messages = build_ask_messages(system_prompt=system_prompt, history=history, question=question)
    except Exception as e:
        print(f"[Ask] could not build context: {e}")
        return ERROR_REPLY

    if client is None:
        return API_FAILURE_REPLY

    answer = await complete_chat(
        client=client,
        model=openai_model,
        messages=chat_messages,
        max_tokens=ASK_MAX_TOKENS,
        temperature=ASK_TEMPERATURE,
        label="Ask",
    )
    if answer is None:
        return API_FAILURE_REPLY
    return answer or NO_ANSWER_REPLY
