from fastapi import APIRouter, Depends

from ....application.services.auth_service import AuthService
from ....application.services.user_service import UserService
from ....core.dependencies import get_auth_service, get_user_service
from ....domain.models import User
from ...api.dependencies import get_current_principal
from ...api.schemas.auth import LoginRequest, TokenResponse
from ...api.schemas.user import ProfileUpdateRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    token = auth_service.authenticate(payload.email, payload.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def me(principal: User = Depends(get_current_principal)) -> UserResponse:
    return UserResponse.from_domain(principal)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    principal: User = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = user_service.update_profile(principal, payload.model_dump(exclude_unset=True))
    return UserResponse.from_domain(user)
