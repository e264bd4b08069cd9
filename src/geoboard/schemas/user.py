"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Schema for signing up a display name with its token."""

    display_name: str | None = Field(None, alias="displayName")
    user_auth: str | None = Field(None, alias="userAuth")

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    """Public profile with the tallies received on the user's messages."""

    display_name: str = Field(..., alias="displayName")
    up_votes: int = Field(..., alias="upVotes")
    down_votes: int = Field(..., alias="downVotes")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
