"""
assistant.py - Assemble the chat request sent to the AI assistant.

The generation call itself belongs to the hosting service; this module only
builds the system prompt (instructions + financial context) and the trimmed
message list.
"""

from typing import Iterable, Optional

import pandas as pd

from finreport.config import Settings
from finreport.context import build_financial_context
from finreport.models import UserSession

ROLES = ("user", "assistant")


def build_system_prompt(
    context: str,
    session: Optional[UserSession] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Instruction preamble wrapped around the financial context string."""
    settings = settings or Settings()
    name = session.username if session and session.username else "the user"
    return (
        f"You are {settings.assistant_name} for a personal finance tracking application.\n"
        "You have access to the user's transaction data and should provide personalized "
        "financial advice based on their actual spending and income patterns.\n\n"
        "Here is the user's financial data:\n"
        f"{context}\n"
        "Guidelines:\n"
        "- Provide specific, actionable advice based on their actual financial data\n"
        "- Be encouraging and supportive\n"
        f"- When discussing amounts, use the currency symbol {settings.currency_symbol}\n"
        "- Keep responses concise but informative\n"
        "- If asked about specific transactions or categories, refer to the data provided\n"
        "- If they ask about something not in their data, say so and give general advice\n"
        "- Never make up numbers\n\n"
        f"Remember: The user's name is {name}."
    )


def trim_history(history: Optional[Iterable[dict]], limit: int = 10) -> list[dict]:
    """Last ``limit`` well-formed turns of chat history."""
    if limit <= 0:
        return []
    turns = [
        {"role": turn["role"], "content": str(turn["content"])}
        for turn in (history or [])
        if isinstance(turn, dict) and turn.get("role") in ROLES and turn.get("content") is not None
    ]
    return turns[-limit:]


def build_chat_messages(
    system_prompt: str,
    history: Optional[Iterable[dict]],
    message: str,
    limit: int = 10,
) -> list[dict]:
    """
    Messages for a chat-completion style call.

    Args:
        system_prompt: Output of build_system_prompt.
        history: Earlier turns as {"role", "content"} dicts, oldest first.
        message: The new user message.
        limit: How many earlier turns to keep.

    Returns:
        [system, *last ``limit`` turns, user message]
    """
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(trim_history(history, limit))
    messages.append({"role": "user", "content": message})
    return messages


def build_assistant_request(
    df: pd.DataFrame,
    session: Optional[UserSession],
    history: Optional[Iterable[dict]],
    message: str,
    settings: Optional[Settings] = None,
) -> list[dict]:
    """Everything the assistant needs for one reply, grounded in ``df``."""
    settings = settings or Settings()
    context = build_financial_context(df, settings)
    prompt = build_system_prompt(context, session, settings)
    return build_chat_messages(prompt, history, message, settings.chat_history_limit)
