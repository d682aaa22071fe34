"""Pydantic model for one conversational turn."""

from typing import Literal

from pydantic import BaseModel


class Message(BaseModel):
    """A single user or assistant turn. Frozen once appended."""

    role: Literal["user", "assistant"]
    content: str

    model_config = {"frozen": True}
