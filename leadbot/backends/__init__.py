"""Remote collaborator abstractions and implementations."""

from .base import (
    AssistantBackend,
    AssistantReply,
    AssistantRequest,
    LeadIntake,
    MalformedResponse,
    PropertyCatalog,
    RemoteServiceError,
)

__all__ = [
    "AssistantBackend",
    "AssistantReply",
    "AssistantRequest",
    "LeadIntake",
    "MalformedResponse",
    "PropertyCatalog",
    "RemoteServiceError",
]
