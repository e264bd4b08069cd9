# src/geoboard/schemas/vote.py
"""Vote-related Pydantic schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from geoboard.services.vote_ledger import VoteResult, VoteView


class VoteRequest(BaseModel):
    """Body of `POST /votes`: cast or change a vote, or remove it when `delete` is set."""

    display_name: str | None = Field(None, alias="displayName")
    user_auth: str | None = Field(None, alias="userAuth")
    message_id: int | None = Field(None, alias="messageId")
    vote: bool | None = Field(None, description="True for upvote, False for downvote")
    delete: bool = False

    model_config = ConfigDict(populate_by_name=True)


class VoteResponse(BaseModel):
    """A ledger entry labelled with the message and voter it joins."""

    vote: bool | None
    message_id: int = Field(..., alias="MessageId")
    user_id: int = Field(..., alias="UserId")
    display_name: str = Field(..., alias="UserDisplayName")
    transition: str | None = Field(None, description="Set on cast/remove responses")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_view(cls, view: VoteView) -> VoteResponse:
        """Build the response for a stored vote."""
        return cls(
            vote=view.value,
            message_id=view.message_id,
            user_id=view.user_id,
            display_name=view.display_name,
        )

    @classmethod
    def from_result(cls, result: VoteResult) -> VoteResponse:
        """Build the response for a ledger transition."""
        return cls(
            vote=result.value,
            message_id=result.message_id,
            user_id=result.user_id,
            display_name=result.display_name,
            transition=str(result.transition),
        )
