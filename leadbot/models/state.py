"""Pydantic model tracking one visitor's conversation state."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .lead import LeadRecord
from .property import PropertySnapshot


class ConversationPhase(str, Enum):
    INIT = "init"
    AWAITING_NAME = "awaiting_name"
    CONVERSING = "conversing"
    COLLECTING_LEAD = "collecting_lead"
    COMPLETED = "completed"


class ConversationState(BaseModel):
    """Mutable session state for a single visitor.

    Only the owning ChatSession mutates this, directly or by passing it to
    the LeadCollector.
    """

    phase: ConversationPhase = ConversationPhase.INIT
    language: str = "en"
    user_name: str = ""
    # Set after the single greeting re-prompt
    name_reprompted: bool = False

    # Lead collection; the index is None unless collecting
    collecting_lead: bool = False
    current_question_index: Optional[int] = None
    lead_record: LeadRecord = Field(default_factory=LeadRecord)

    selected_property: Optional[PropertySnapshot] = None
    show_property_info: bool = False
    lead_submitted: bool = False
