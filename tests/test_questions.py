"""Tests for the lead qualification question catalog and localization table."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from leadbot.localization import (
    STRINGS,
    localize,
    question_delimiters,
    resolve_language,
)
from leadbot.models.lead import LeadRecord
from leadbot.questions import LEAD_QUESTIONS, get_question_by_index


class TestQuestionCatalog:
    def test_six_questions_in_fixed_order(self):
        assert [q.field_key for q in LEAD_QUESTIONS] == [
            "phone", "family_background", "occupation",
            "location", "budget", "timeline",
        ]

    def test_fields_exist_on_lead_record(self):
        fields = set(LeadRecord.model_fields)
        for q in LEAD_QUESTIONS:
            assert q.field_key in fields

    def test_first_prompt_uses_name(self):
        assert LEAD_QUESTIONS[0].prompt("Rohan", "en") == "Rohan, your contact number please?"
        assert LEAD_QUESTIONS[0].prompt("Rohan", "hi") == "Rohan, आपका संपर्क नंबर?"

    def test_other_prompts_ignore_name(self):
        assert LEAD_QUESTIONS[4].prompt("Rohan", "en") == "Your budget?"

    def test_titles_and_descriptions_localized(self):
        for q in LEAD_QUESTIONS:
            assert q.title("en") and q.title("hi")
            assert q.description("en") and q.description("hi")
            assert q.title("en") != q.title("hi")
            assert q.icon

    def test_unknown_language_falls_back_to_english(self):
        assert LEAD_QUESTIONS[5].prompt(language="fr") == "When do you want to buy?"
        assert LEAD_QUESTIONS[0].title("fr") == "Mobile Number"

    def test_get_question_by_index(self):
        assert get_question_by_index(0).field_key == "phone"
        assert get_question_by_index(5).field_key == "timeline"
        assert get_question_by_index(6) is None
        assert get_question_by_index(-1) is None


class TestLocalization:
    def test_every_key_has_both_languages(self):
        for key, table in STRINGS.items():
            assert set(table) == {"en", "hi"}, key

    def test_thank_you_interpolates(self):
        text = localize("lead_thank_you", "en", name="Rohan", phone="9876543210")
        assert text.startswith("Thank you Rohan for sharing")
        assert "9876543210" in text

    def test_unknown_language_uses_english(self):
        assert localize("name_prompt", "fr") == "Nice to meet you! What should I call you?"

    def test_resolve_language(self):
        assert resolve_language("hi") == "hi"
        assert resolve_language("fr") == "en"
        assert resolve_language(None) == "en"

    def test_question_delimiters(self):
        assert question_delimiters("en") == ("?",)
        assert "।" in question_delimiters("hi")
