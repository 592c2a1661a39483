"""AI suggestion protocol.

A suggestion provider looks at an item photo and proposes a name,
description and size so the vendor does not have to type them. The protocol
keeps the rest of lookbook independent of the model vendor.
"""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass
class ItemSuggestion:
    """Fields proposed for an item from its photo.

    Attributes:
        name: Short, specific title (a few words).
        description: Two or three sentences describing the piece.
        suggested_size: Size for wearables, None for everything else.
    """

    name: str
    description: str
    suggested_size: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemSuggestion":
        """Build a suggestion from a model's JSON object.

        Raises:
            ValueError: If name or description is missing or not a string.
        """
        name = data.get("name")
        description = data.get("description")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Invalid suggestion: 'name' must be a non-empty string")
        if not isinstance(description, str):
            raise ValueError("Invalid suggestion: 'description' must be a string")

        size = data.get("suggested_size")
        if size is not None:
            size = str(size).strip()
            if size.lower() in ("", "null", "none"):
                size = None
        return cls(name=name.strip(), description=description.strip(), suggested_size=size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "suggested_size": self.suggested_size,
        }


class SuggestionProvider(Protocol):
    """Protocol for photo-to-listing suggestion services."""

    async def suggest(self, image_base64: str, media_type: str) -> ItemSuggestion:
        """Suggest listing fields for an item photo.

        Args:
            image_base64: Base64-encoded image bytes, without a data URL header.
            media_type: MIME type of the image, e.g. "image/jpeg".

        Returns:
            The suggested fields.
        """
        ...
