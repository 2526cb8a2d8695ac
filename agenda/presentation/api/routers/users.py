"""API router for user administration.

The static paths are registered before ``/{user_id}`` so they are not
captured by it.
"""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status

from ....application.services.avatar_service import AvatarService
from ....application.services.user_service import UserService
from ....core.dependencies import get_avatar_service, get_user_service
from ....domain.authorization import UserOperation, authorize
from ....domain.exceptions import ValidationFailed
from ....domain.models import User
from ...api.dependencies import get_current_principal
from ...api.schemas.user import (
    RandomAvatarResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("/index", response_model=List[UserResponse])
def list_users(
    principal: User = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    return [UserResponse.from_domain(user) for user in service.list_users(principal)]


@router.get("/random-avatar", response_model=RandomAvatarResponse)
async def random_avatar(
    principal: User = Depends(get_current_principal),
    avatar_service: AvatarService = Depends(get_avatar_service),
) -> RandomAvatarResponse:
    url = await avatar_service.fetch_random_avatar(principal)
    return RandomAvatarResponse(avatar=url)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UserCreateRequest.model_json_schema()}},
        }
    },
)
async def create_user(
    request: Request,
    principal: User = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    # Non-admins are refused before the body is looked at.
    authorize(principal, UserOperation.CREATE_USER)
    payload = UserCreateRequest.model_validate(await _read_json_object(request))
    user = service.create_user(principal, payload.model_dump(exclude_unset=True))
    return UserResponse.from_domain(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    principal: User = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.from_domain(service.get_user(principal, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    principal: User = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = service.update_user(principal, user_id, payload.model_dump(exclude_unset=True))
    return UserResponse.from_domain(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    principal: User = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> None:
    service.delete_user(principal, user_id)


async def _read_json_object(request: Request) -> Dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ValidationFailed("The request body must be valid JSON") from exc
    if not isinstance(data, dict):
        raise ValidationFailed("The request body must be a JSON object")
    return data
