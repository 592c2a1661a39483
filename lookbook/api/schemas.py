"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, ConfigDict, Field


class SuggestRequest(BaseModel):
    """Photo to caption.

    Field names follow the web client's camelCase payload.
    """

    image_base64: str = Field(..., alias="imageBase64", min_length=1)
    media_type: str = Field(..., alias="mediaType", min_length=1)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"imageBase64": "/9j/4AAQSkZJRg...", "mediaType": "image/jpeg"}
        },
    )


class SuggestResponse(BaseModel):
    """Listing fields proposed for the photo."""

    name: str
    description: str
    suggested_size: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Faded Indigo Straight Leg",
                "description": "Soft mid-wash denim with honest fading at the knees.",
                "suggested_size": "32x30",
            }
        }
    )


class ErrorResponse(BaseModel):
    detail: str
