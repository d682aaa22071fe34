"""Tests for turn classification, trigger detection and question truncation."""

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from leadbot.classifier import (
    TRIGGER_PHRASES,
    Phase,
    Trigger,
    classify_turn,
    detect_triggers,
    is_greeting,
    truncate_to_single_question,
)


# ── classify_turn ───────────────────────────────────────────────


class TestClassifyTurn:
    def test_greeting_while_awaiting_name(self):
        assert classify_turn("Hello", awaiting_name=True, collecting_lead=False) is Phase.GREETING_REPROMPT

    def test_name_while_awaiting_name(self):
        assert classify_turn("Rohan", awaiting_name=True, collecting_lead=False) is Phase.NAME_CAPTURE

    def test_lead_answer_when_collecting(self):
        assert classify_turn("9876543210", awaiting_name=False, collecting_lead=True) is Phase.LEAD_ANSWER

    def test_free_chat_by_default(self):
        assert classify_turn("Is parking included?", awaiting_name=False, collecting_lead=False) is Phase.FREE_CHAT

    def test_greeting_after_name_is_free_chat(self):
        assert classify_turn("hi again", awaiting_name=False, collecting_lead=False) is Phase.FREE_CHAT

    def test_greeting_checked_before_name_capture(self):
        # A turn that could be a name but contains a greeting is a greeting
        assert classify_turn("Hey there", awaiting_name=True, collecting_lead=False) is Phase.GREETING_REPROMPT

    @pytest.mark.parametrize("text", ["Hello", "Nikhil", "Mohit"])
    def test_name_after_reprompt(self, text):
        phase = classify_turn(text, awaiting_name=True, collecting_lead=False, name_reprompted=True)
        assert phase is Phase.NAME_CAPTURE

    def test_deterministic(self):
        results = {
            classify_turn("namaste", awaiting_name=True, collecting_lead=False)
            for _ in range(5)
        }
        assert results == {Phase.GREETING_REPROMPT}


class TestIsGreeting:
    @pytest.mark.parametrize("text", ["hello", "HI", "Hey!", "Namaste ji", "नमस्ते", "प्रणाम"])
    def test_greetings(self, text):
        assert is_greeting(text)

    @pytest.mark.parametrize("text", ["Rohan", "Priya", "Amit Kumar"])
    def test_names(self, text):
        assert not is_greeting(text)


# ── detect_triggers ─────────────────────────────────────────────


class TestDetectTriggers:
    def test_show_property(self):
        assert detect_triggers("Let me show property details for you.") == {Trigger.SHOW_PROPERTY}

    def test_start_lead_contact_details(self):
        assert detect_triggers("We'll need your contact details to proceed") == {Trigger.START_LEAD}

    def test_start_lead_collect_contact(self):
        assert Trigger.START_LEAD in detect_triggers("May I collect your contact information?")

    def test_case_insensitive(self):
        assert detect_triggers("PROPERTY INFORMATION below") == {Trigger.SHOW_PROPERTY}

    def test_hindi_phrases(self):
        assert detect_triggers("प्रॉपर्टी जानकारी यहाँ है") == {Trigger.SHOW_PROPERTY}
        assert detect_triggers("हमें आपका विवरण चाहिए") == {Trigger.START_LEAD}

    def test_both(self):
        reply = "Here is the property information. We need your details next."
        assert detect_triggers(reply) == {Trigger.SHOW_PROPERTY, Trigger.START_LEAD}

    def test_none(self):
        assert detect_triggers("The flat faces east.") == set()

    def test_table_covers_both_languages(self):
        for by_language in TRIGGER_PHRASES.values():
            assert set(by_language) == {"en", "hi"}
            for phrases in by_language.values():
                assert all(p == p.lower() for p in phrases)


# ── truncate_to_single_question ─────────────────────────────────


class TestTruncate:
    def test_two_questions(self):
        reply = "What is your budget? When do you plan to buy?"
        assert truncate_to_single_question(reply, "en") == "What is your budget?"

    def test_single_question_unchanged(self):
        assert truncate_to_single_question("What is your budget?", "en") == "What is your budget?"

    def test_no_question(self):
        reply = "We'll need your contact details to proceed"
        assert truncate_to_single_question(reply, "en") == reply

    def test_hindi_danda(self):
        reply = "यह एक सुंदर फ्लैट है। आपका बजट क्या है?"
        assert truncate_to_single_question(reply, "hi") == "यह एक सुंदर फ्लैट है?"

    def test_danda_ignored_in_english(self):
        reply = "यह फ्लैट है। Anything else"
        assert truncate_to_single_question(reply, "en") == reply
