"""The fixed sequence of lead qualification questions.

Each question knows which LeadRecord field its answer fills, plus how to
render its card title, description and chat prompt in each language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class QuestionDescriptor:
    """One qualification question."""

    field_key: str
    icon: str
    titles: dict[str, str]
    descriptions: dict[str, str]
    # Prompts may contain {name}; only the first one does today
    prompts: dict[str, str] = field(default_factory=dict)

    def title(self, language: str) -> str:
        return self.titles.get(language) or self.titles["en"]

    def description(self, language: str) -> str:
        return self.descriptions.get(language) or self.descriptions["en"]

    def prompt(self, name: str = "", language: str = "en") -> str:
        template = self.prompts.get(language) or self.prompts["en"]
        return template.format(name=name)


LEAD_QUESTIONS: tuple[QuestionDescriptor, ...] = (
    QuestionDescriptor(
        field_key="phone",
        icon="📱",
        titles={"en": "Mobile Number", "hi": "मोबाइल नंबर"},
        descriptions={
            "en": "Our property expert will contact you on this number",
            "hi": "हमारा प्रॉपर्टी विशेषज्ञ आपसे इस नंबर पर संपर्क करेगा",
        },
        prompts={
            "en": "{name}, your contact number please?",
            "hi": "{name}, आपका संपर्क नंबर?",
        },
    ),
    QuestionDescriptor(
        field_key="family_background",
        icon="👨‍👩‍👧‍👦",
        titles={"en": "Family Structure", "hi": "परिवार संरचना"},
        descriptions={
            "en": "Helps us recommend the right property size for you",
            "hi": "हमें आपके लिए सही प्रॉपर्टी आकार की सिफारिश करने में मदद करता है",
        },
        prompts={
            "en": "How many family members will live here?",
            "hi": "यहां कितने परिवार के सदस्य रहेंगे?",
        },
    ),
    QuestionDescriptor(
        field_key="occupation",
        icon="💼",
        titles={"en": "Occupation", "hi": "व्यवसाय"},
        descriptions={
            "en": "Helps us understand your lifestyle needs",
            "hi": "हमें आपकी जीवनशैली की जरूरतों को समझने में मदद करता है",
        },
        prompts={
            "en": "What work do you do?",
            "hi": "आप क्या काम करते हैं?",
        },
    ),
    QuestionDescriptor(
        field_key="location",
        icon="📍",
        titles={"en": "Preferred Location", "hi": "पसंदीदा स्थान"},
        descriptions={
            "en": "Specific areas you prefer in Surat",
            "hi": "सूरत में आपके पसंदीदा विशिष्ट क्षेत्र",
        },
        prompts={
            "en": "Which area do you like most?",
            "hi": "आपको कौन सा इलाका सबसे ज्यादा पसंद है?",
        },
    ),
    QuestionDescriptor(
        field_key="budget",
        icon="💰",
        titles={"en": "Budget Range", "hi": "बजट सीमा"},
        descriptions={
            "en": "Your investment range for this property",
            "hi": "इस प्रॉपर्टी के लिए आपकी निवेश सीमा",
        },
        prompts={
            "en": "Your budget?",
            "hi": "आपका बजट?",
        },
    ),
    QuestionDescriptor(
        field_key="timeline",
        icon="🗓️",
        titles={"en": "Purchase Timeline", "hi": "खरीद समयसीमा"},
        descriptions={
            "en": "When you plan to make this purchase",
            "hi": "आप यह खरीद कब करने की योजना बनाते हैं",
        },
        prompts={
            "en": "When do you want to buy?",
            "hi": "आप कब खरीदना चाहते हैं?",
        },
    ),
)


def get_question_by_index(index: int) -> Optional[QuestionDescriptor]:
    """Get question by its index (0-based)."""
    if 0 <= index < len(LEAD_QUESTIONS):
        return LEAD_QUESTIONS[index]
    return None
