"""Abstract base classes for the remote services the conversation depends on.

Defines the interface for the property catalog, the conversational
assistant and the lead-intake service. Any backend (HTTP, in-memory for
tests, etc.) implements these ABCs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from leadbot.models.message import Message
from leadbot.models.property import PropertySnapshot


class RemoteServiceError(Exception):
    """A collaborator was unreachable or answered with an error."""


class MalformedResponse(RemoteServiceError):
    """A collaborator answered, but not in the expected shape."""


class AssistantRequest(BaseModel):
    """One free-chat turn forwarded to the assistant."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    language: str
    property: Optional[PropertySnapshot] = None
    user_name: str = ""
    previous_messages: list[Message] = []
    one_question_at_time: bool = True


class AssistantReply(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    chat_history: Optional[list[Message]] = None


class PropertyCatalog(ABC):
    """Source of the single listing the conversation is about."""

    @abstractmethod
    async def fetch(self) -> PropertySnapshot | None:
        """Return the listing, or None when the catalog has none.

        Raises:
            RemoteServiceError: the catalog could not be reached.
        """


class AssistantBackend(ABC):
    """The remote conversational assistant."""

    @abstractmethod
    async def chat(self, request: AssistantRequest) -> AssistantReply:
        """Send one turn and return the assistant's reply.

        Raises:
            RemoteServiceError: on transport, status or shape errors.
        """


class LeadIntake(ABC):
    """The service that stores qualified leads."""

    @abstractmethod
    async def submit(self, envelope: dict[str, Any]) -> None:
        """Deliver a lead envelope. Returns normally only on success.

        Raises:
            RemoteServiceError: the lead was not accepted.
        """
