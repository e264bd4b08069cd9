# src/geoboard/schemas/message.py
"""Message-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageRequest(BaseModel):
    """Body of `POST /messages`: a new message, or a deletion when `delete` is set.

    Text and coordinates are optional at this layer so that missing values
    surface as domain validation errors rather than schema errors.
    """

    display_name: str | None = Field(None, alias="displayName")
    user_auth: str | None = Field(None, alias="userAuth")
    delete: bool = Field(False, description="Delete the message given by `id`")
    id: int | None = Field(None, description="Message to delete")
    text: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    """Schema for message information returned by the API."""

    id: int
    text: str
    latitude: float
    longitude: float
    up_votes: int = Field(..., alias="upVotes")
    down_votes: int = Field(..., alias="downVotes")
    user_id: int = Field(..., alias="UserId")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
