"""Turn classification and reply scanning.

Everything here is a pure function of its arguments: which handling path a
visitor turn takes, which side effects an assistant reply asks for, and how
a multi-question reply is cut down to one question.
"""

from __future__ import annotations

import re
from enum import Enum

from leadbot.localization import GREETING_TOKENS, question_delimiters


class Phase(str, Enum):
    """Handling path for one visitor turn."""

    NAME_CAPTURE = "name_capture"
    GREETING_REPROMPT = "greeting_reprompt"
    LEAD_ANSWER = "lead_answer"
    FREE_CHAT = "free_chat"


class Trigger(str, Enum):
    """Side effects an assistant reply can request."""

    SHOW_PROPERTY = "show_property"
    START_LEAD = "start_lead"


# Phrases are lowercase; replies are lowercased before matching. Both
# languages are always scanned since the assistant may switch language.
TRIGGER_PHRASES: dict[Trigger, dict[str, tuple[str, ...]]] = {
    Trigger.SHOW_PROPERTY: {
        "en": ("show property details", "property information"),
        "hi": ("प्रॉपर्टी विवरण दिखाएं", "प्रॉपर्टी जानकारी"),
    },
    Trigger.START_LEAD: {
        "en": ("collect your contact", "need your details", "need your contact details"),
        "hi": ("आपका संपर्क एकत्र", "आपका विवरण चाहिए"),
    },
}


def is_greeting(text: str) -> bool:
    lowered = text.lower()
    return any(token in lowered for token in GREETING_TOKENS)


def classify_turn(
    text: str,
    *,
    awaiting_name: bool,
    collecting_lead: bool,
    name_reprompted: bool = False,
) -> Phase:
    """Decide how a visitor turn is handled.

    ``awaiting_name`` is true until a name has been captured. Greetings are
    checked before name capture, but only until one re-prompt has been sent:
    after that the next turn is the name, whatever it contains.
    """
    if awaiting_name:
        if not name_reprompted and is_greeting(text):
            return Phase.GREETING_REPROMPT
        return Phase.NAME_CAPTURE
    if collecting_lead:
        return Phase.LEAD_ANSWER
    return Phase.FREE_CHAT


def detect_triggers(reply: str) -> set[Trigger]:
    """Return every trigger whose phrase appears in ``reply``."""
    lowered = reply.lower()
    found: set[Trigger] = set()
    for trigger, by_language in TRIGGER_PHRASES.items():
        for phrases in by_language.values():
            if any(phrase in lowered for phrase in phrases):
                found.add(trigger)
                break
    return found


def truncate_to_single_question(reply: str, language: str) -> str:
    """Keep only the first question of a reply.

    The reply is split on the language's question delimiters; when that
    yields more than one segment, the first segment is returned with a
    trailing ``?``.
    """
    pattern = "|".join(re.escape(d) for d in question_delimiters(language))
    parts = re.split(pattern, reply)
    if len(parts) > 1:
        return parts[0] + "?"
    return reply
