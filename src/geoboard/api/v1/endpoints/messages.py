# src/geoboard/api/v1/endpoints/messages.py
"""Message feed endpoints for the Geoboard API."""

from typing import Literal

from fastapi import APIRouter, Query, Response, status

from geoboard.api.v1.dependencies import MessageServiceDep
from geoboard.schemas.message import MessageRequest, MessageResponse

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/", response_model=list[MessageResponse])
def list_messages(
    service: MessageServiceDep,
    latitude: float | None = Query(None, description="Latitude of the reader"),
    longitude: float | None = Query(None, description="Longitude of the reader"),
    radius_km: float | None = Query(None, gt=0, description="Override the nearby radius"),
    order: Literal["created", "distance"] = Query(
        "created", description="Sort nearby results by creation or by distance"
    ),
) -> list[MessageResponse]:
    """List every message, or only those near the given coordinate.

    Both coordinates must be supplied together; without them the full feed is
    returned in creation order.
    """
    messages = service.list_messages(
        latitude,
        longitude,
        radius_km,
        order_by_distance=order == "distance",
    )
    return [MessageResponse.model_validate(message) for message in messages]


@router.get("/{message_id}", response_model=MessageResponse)
def get_message(message_id: int, service: MessageServiceDep) -> MessageResponse:
    """Get a single message with its current tallies."""
    return MessageResponse.model_validate(service.get_message(message_id))


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=MessageResponse | str)
def post_message(
    payload: MessageRequest,
    service: MessageServiceDep,
    response: Response,
) -> MessageResponse | str:
    """Create a message, or delete one when the body sets `delete: true`.

    Creation answers 201 with the new message; deletion answers 200.
    """
    if payload.delete:
        service.delete_message(
            display_name=payload.display_name,
            auth_token=payload.user_auth,
            message_id=payload.id,
        )
        response.status_code = status.HTTP_200_OK
        return "Message deleted"

    message = service.create_message(
        display_name=payload.display_name,
        auth_token=payload.user_auth,
        text=payload.text,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    return MessageResponse.model_validate(message)
