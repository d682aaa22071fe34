"""Pydantic model for the qualification data collected from a visitor."""

from pydantic import BaseModel


class LeadRecord(BaseModel):
    """Answers gathered during lead collection.

    Created empty (name pre-filled) when collection starts and filled one
    field per answered question.
    """

    name: str = ""
    phone: str = ""
    family_background: str = ""
    occupation: str = ""
    location: str = ""
    budget: str = ""
    timeline: str = ""
