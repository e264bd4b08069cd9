"""User signup and lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from geoboard.api.v1.dependencies import UserServiceDep
from geoboard.schemas.user import UserCreate, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=UserResponse)
def get_user_by_auth(
    service: UserServiceDep,
    user_auth: str | None = Query(None, alias="userAuth"),
) -> UserResponse:
    """Return the display name and tallies of the user holding `userAuth`."""
    return UserResponse.model_validate(service.get_by_auth_token(user_auth))


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, service: UserServiceDep) -> str:
    """Sign up a new display name paired with its token."""
    service.create_user(payload.display_name, payload.user_auth)
    return "New user created"
