"""Session title derivation from the first user message."""

import re

from gemini_chat.models.chat_session import DEFAULT_SESSION_TITLE

MAX_TITLE_LENGTH = 40
MIN_WORD_BREAK = 20
ELLIPSIS = "..."

_WHITESPACE = re.compile(r"\s+")


def derive_title(message: str) -> str:
    """Turn a message into a short session title.

    Whitespace runs collapse to single spaces. Messages of up to 40
    characters are used verbatim. Longer ones are cut at 40 characters,
    backed up to the last space when that space lies past character 20,
    and suffixed with an ellipsis.
    """
    text = _WHITESPACE.sub(" ", message).strip()
    if not text:
        return DEFAULT_SESSION_TITLE
    if len(text) <= MAX_TITLE_LENGTH:
        return text

    head = text[:MAX_TITLE_LENGTH]
    last_space = head.rfind(" ")
    if last_space > MIN_WORD_BREAK:
        head = head[:last_space]
    return head.rstrip() + ELLIPSIS
