"""Engagement decision and inbound message cleaning."""

import re

DEFAULT_FILLER_TEXT = "Hello!"


def should_engage(
    text: str,
    self_nick: str,
    directed: bool,
    trigger_pattern: re.Pattern[str] | None = None,
) -> bool:
    """Decide whether the bot should reply to a line.

    Args:
        text: Message text.
        self_nick: The bot's nick.
        directed: True if the line was a direct message to the bot.
        trigger_pattern: Optional pattern that also triggers a reply.

    Returns:
        True if the line is a direct message, mentions the nick
        (case-insensitive substring) or matches the trigger pattern.
    """
    if directed:
        return True

    if self_nick and self_nick.casefold() in text.casefold():
        return True

    if trigger_pattern is not None:
        return trigger_pattern.search(text) is not None

    return False


def _salutation_pattern(self_nick: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(self_nick)}[,:]\s*", re.IGNORECASE)


def clean_message(
    text: str,
    self_nick: str,
    filler_text: str = DEFAULT_FILLER_TEXT,
) -> str:
    """Remove salutations addressed to the bot.

    Every "<nick>:" or "<nick>," (plus following whitespace) is removed,
    case-insensitively, and the result is trimmed.

    Args:
        text: Raw message text.
        self_nick: The bot's nick.
        filler_text: Returned when nothing is left after cleaning.

    Returns:
        Cleaned text, never empty.
    """
    cleaned = text
    if self_nick:
        cleaned = _salutation_pattern(self_nick).sub("", cleaned)
    cleaned = cleaned.strip()
    return cleaned or filler_text
