"""Tests for lead envelope construction and the SubmissionGateway."""

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import CATALOG_DATA, FakeIntake

from leadbot.models.lead import LeadRecord
from leadbot.models.message import Message
from leadbot.models.property import PropertySnapshot
from leadbot.submission import SubmissionGateway, build_envelope


@pytest.fixture
def lead():
    return LeadRecord(
        name="Rohan", phone="9876543210", family_background="4",
        occupation="Engineer", location="Vesu", budget="1 Cr", timeline="Soon",
    )


@pytest.fixture
def transcript():
    return [
        Message(role="assistant", content="Hi there!"),
        Message(role="user", content="Rohan"),
    ]


class TestBuildEnvelope:
    def test_contains_lead_fields(self, lead, transcript):
        env = build_envelope(lead, transcript, "en", None)
        for key, value in lead.model_dump().items():
            assert env[key] == value

    def test_transcript_and_language(self, lead, transcript):
        env = build_envelope(lead, transcript, "hi", None)
        assert env["chat_history"] == [
            {"role": "assistant", "content": "Hi there!"},
            {"role": "user", "content": "Rohan"},
        ]
        assert env["preferredLanguage"] == "hi"
        assert env["property"] is None

    def test_property_digest_only(self, lead, transcript):
        prop = PropertySnapshot.from_catalog(CATALOG_DATA)
        env = build_envelope(lead, transcript, "en", prop)
        assert env["property"] == {
            "title": "Shanti Heights",
            "location": "Vesu, Surat",
            "price": "₹1.2 Cr",
            "area": "1850 sq ft",
        }


class TestSubmissionGateway:
    @pytest.mark.asyncio
    async def test_success_thanks_by_name_and_phone(self, lead, transcript):
        intake = FakeIntake()
        outcome = await SubmissionGateway(intake).submit(lead, transcript, "en")
        assert outcome.succeeded is True
        assert "Thank you Rohan" in outcome.message
        assert "9876543210" in outcome.message
        assert len(intake.envelopes) == 1

    @pytest.mark.asyncio
    async def test_failure_returns_apology(self, lead, transcript):
        intake = FakeIntake(fail=True)
        outcome = await SubmissionGateway(intake).submit(lead, transcript, "en")
        assert outcome.succeeded is False
        assert outcome.message == (
            "Sorry, there was an error submitting your information. Please try again later."
        )

    @pytest.mark.asyncio
    async def test_hindi_messages(self, lead, transcript):
        ok = await SubmissionGateway(FakeIntake()).submit(lead, transcript, "hi")
        assert ok.message.startswith("Rohan, हमारे साथ")
        bad = await SubmissionGateway(FakeIntake(fail=True)).submit(lead, transcript, "hi")
        assert bad.message.startswith("क्षमा करें")
