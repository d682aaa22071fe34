"""Localized strings for the conversation, keyed by language tag.

Every user-visible sentence the controller produces on its own (as opposed
to assistant replies) lives in ``STRINGS``. Supporting a new language means
adding one entry per key here.
"""

from __future__ import annotations

DEFAULT_LANGUAGE = "en"

STRINGS: dict[str, dict[str, str]] = {
    "welcome": {
        "en": "Hi there! 👋 I am your property assistant. Please tell me your name so I can assist you better.",
        "hi": "नमस्ते! 👋 मैं आपका प्रॉपर्टी सहायक हूं। कृपया मुझे अपना नाम बताएं ताकि मैं आपकी बेहतर सहायता कर सकूं।",
    },
    "name_prompt": {
        "en": "Nice to meet you! What should I call you?",
        "hi": "आपसे मिलकर अच्छा लगा! मैं आपको क्या नाम से पुकारूं?",
    },
    "assistant_fallback": {
        "en": "I'm sorry, I'm having trouble connecting to our servers right now. Please try again in a moment.",
        "hi": "मुझे खेद है, मुझे अभी हमारे सर्वर से कनेक्ट करने में समस्या हो रही है। कृपया कुछ देर बाद फिर से प्रयास करें।",
    },
    "lead_thank_you": {
        "en": (
            "Thank you {name} for sharing your information with us! I've recorded all your "
            "preferences and requirements. Our property expert will contact you soon at {phone} "
            "to discuss the next steps, including arranging a property visit if you'd like. "
            "We're excited to help you find your perfect home!"
        ),
        "hi": (
            "{name}, हमारे साथ अपनी जानकारी साझा करने के लिए धन्यवाद! मैंने आपकी सभी प्राथमिकताओं और "
            "आवश्यकताओं को रिकॉर्ड कर लिया है। हमारा प्रॉपर्टी विशेषज्ञ जल्द ही आपसे {phone} पर संपर्क करेगा "
            "ताकि अगले चरणों पर चर्चा की जा सके, जिसमें यदि आप चाहें तो प्रॉपर्टी विजिट की व्यवस्था भी शामिल है। "
            "हम आपको आपका सही घर खोजने में मदद करने के लिए उत्साहित हैं!"
        ),
    },
    "lead_submit_error": {
        "en": "Sorry, there was an error submitting your information. Please try again later.",
        "hi": "क्षमा करें, आपकी जानकारी सबमिट करने में त्रुटि हुई। कृपया बाद में पुनः प्रयास करें।",
    },
}

# Sentence-ending marks that separate questions in an assistant reply
QUESTION_DELIMITERS: dict[str, tuple[str, ...]] = {
    "en": ("?",),
    "hi": ("?", "।", "॥"),
}

# Matched by containment, so visitors greeting in either language are caught
GREETING_TOKENS: tuple[str, ...] = (
    "hello", "hi", "hey", "namaste",
    "नमस्ते", "हेलो", "हाय", "नमस्कार", "प्रणाम",
)

INTEREST_MESSAGE = "I am interested in this property"


def resolve_language(language: str | None) -> str:
    """Return ``language`` if it has translations, else the default."""
    if language and language in STRINGS["welcome"]:
        return language
    return DEFAULT_LANGUAGE


def localize(key: str, language: str, **values: str) -> str:
    """Look up a localized string and fill in ``{placeholders}``."""
    table = STRINGS[key]
    text = table.get(language) or table[DEFAULT_LANGUAGE]
    return text.format(**values) if values else text


def question_delimiters(language: str) -> tuple[str, ...]:
    return QUESTION_DELIMITERS.get(language, QUESTION_DELIMITERS[DEFAULT_LANGUAGE])
