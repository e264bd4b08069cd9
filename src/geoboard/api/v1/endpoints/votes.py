# src/geoboard/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Geoboard API."""

from fastapi import APIRouter, Query, Response, status

from geoboard.api.v1.dependencies import VoteLedgerDep
from geoboard.schemas.vote import VoteRequest, VoteResponse
from geoboard.services.errors import ValidationError

router = APIRouter(prefix="/votes", tags=["votes"])


@router.get("/", response_model=VoteResponse | list[VoteResponse])
def get_votes(
    ledger: VoteLedgerDep,
    display_name: str | None = Query(None, alias="displayName"),
    message_id: int | None = Query(None, alias="messageId"),
) -> VoteResponse | list[VoteResponse]:
    """Look votes up by voter, by message, or both.

    With both selectors a single vote is returned; with one, a list.
    """
    found = ledger.query(display_name=display_name, message_id=message_id)
    if isinstance(found, list):
        return [VoteResponse.from_view(view) for view in found]
    return VoteResponse.from_view(found)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=VoteResponse)
def post_vote(payload: VoteRequest, ledger: VoteLedgerDep, response: Response) -> VoteResponse:
    """Cast or change a vote, or remove it when the body sets `delete: true`.

    Casting answers 201; removal answers 200.
    """
    if payload.message_id is None:
        raise ValidationError("messageId required")
    if payload.delete:
        result = ledger.remove_vote(payload.display_name, payload.user_auth, payload.message_id)
        response.status_code = status.HTTP_200_OK
        return VoteResponse.from_result(result)

    if payload.vote is None:
        raise ValidationError("vote required")
    result = ledger.cast_vote(
        payload.display_name,
        payload.user_auth,
        payload.message_id,
        payload.vote,
    )
    return VoteResponse.from_result(result)
