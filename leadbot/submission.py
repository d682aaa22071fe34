"""Submission gateway: packages a finished lead and hands it to lead intake."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from leadbot.backends.base import LeadIntake, RemoteServiceError
from leadbot.localization import localize
from leadbot.models.lead import LeadRecord
from leadbot.models.message import Message
from leadbot.models.property import PropertySnapshot

log = logging.getLogger("leadbot.submission")


@dataclass(frozen=True)
class SubmissionOutcome:
    succeeded: bool
    message: str  # Localized text to show the visitor


def build_envelope(
    lead: LeadRecord,
    transcript: Sequence[Message],
    language: str,
    property_snapshot: Optional[PropertySnapshot],
) -> dict[str, Any]:
    """Lead fields plus the transcript, language and a property digest."""
    envelope: dict[str, Any] = lead.model_dump()
    envelope["chat_history"] = [m.model_dump() for m in transcript]
    envelope["preferredLanguage"] = language
    envelope["property"] = property_snapshot.digest() if property_snapshot else None
    return envelope


class SubmissionGateway:
    def __init__(self, intake: LeadIntake) -> None:
        self._intake = intake

    async def submit(
        self,
        lead: LeadRecord,
        transcript: Sequence[Message],
        language: str,
        property_snapshot: Optional[PropertySnapshot] = None,
    ) -> SubmissionOutcome:
        """Send the lead and map the result to a visitor-facing message.

        Never raises for intake failures; they come back as an outcome
        with ``succeeded=False``.
        """
        envelope = build_envelope(lead, transcript, language, property_snapshot)
        try:
            await self._intake.submit(envelope)
        except RemoteServiceError as e:
            log.error("Lead submission failed: %s", e)
            return SubmissionOutcome(False, localize("lead_submit_error", language))

        log.info("Lead submitted (%d transcript messages)", len(transcript))
        return SubmissionOutcome(
            True,
            localize("lead_thank_you", language, name=lead.name, phone=lead.phone),
        )
