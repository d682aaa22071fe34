"""Data models for the conversation layer."""

from .lead import LeadRecord
from .message import Message
from .property import PropertyDetails, PropertyLocation, PropertySnapshot
from .state import ConversationPhase, ConversationState

__all__ = [
    "ConversationPhase",
    "ConversationState",
    "LeadRecord",
    "Message",
    "PropertyDetails",
    "PropertyLocation",
    "PropertySnapshot",
]
