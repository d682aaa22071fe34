"""Pydantic models for the listing shown alongside the conversation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # Serialized with camelCase keys for the assistant service
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PropertyLocation(_CamelModel):
    city: str = ""
    area: str = ""
    address: str = ""


class PropertyDetails(_CamelModel):
    configuration: str = ""
    area: str = ""
    price: str = ""
    availability: str = ""


class PropertySnapshot(_CamelModel):
    """Read-only listing data fetched once at session start."""

    title: str
    location: PropertyLocation = Field(default_factory=PropertyLocation)
    details: PropertyDetails = Field(default_factory=PropertyDetails)
    amenities: list[str] = []
    special_features: list[str] = []
    images: list[str] = []
    is_exclusive_to_jain: bool = False
    description: str = ""

    @classmethod
    def from_catalog(cls, data: dict[str, Any]) -> PropertySnapshot:
        """Build a snapshot from the catalog service's flat ``data`` object.

        The catalog reports a single location string, used for both the
        city and the address.
        """
        location = str(data.get("location") or "")
        return cls(
            title=str(data["title"]),
            location=PropertyLocation(city=location, address=location),
            details=PropertyDetails(
                area=str(data.get("area") or ""),
                price=str(data.get("price") or ""),
                availability=str(data.get("status") or ""),
            ),
            amenities=list(data.get("amenities") or []),
            images=list(data.get("images") or []),
            is_exclusive_to_jain=bool(data.get("isForJain", False)),
            description=str(data.get("description") or ""),
        )

    def digest(self) -> dict[str, str]:
        """The subset of listing fields attached to a lead submission."""
        return {
            "title": self.title,
            "location": self.location.city,
            "price": self.details.price,
            "area": self.details.area,
        }
