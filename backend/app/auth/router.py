from fastapi import APIRouter, Depends, status

from ..models import ApiResponse
from ..users.models import User
from ..users.schema import UserPublic
from .dependencies import CurrentUser, get_auth_service
from .schema import LoginRequest, LoginResult, RegisterRequest
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=ApiResponse[LoginResult])
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    user, token = await auth_service.authenticate(credentials.email, credentials.password)
    return ApiResponse[LoginResult](
        message="Login successful",
        data=LoginResult(user=UserPublic.model_validate(user), token=token),
    )

@router.post("/register", response_model=ApiResponse[UserPublic], status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.register(payload.name, payload.email, payload.password)
    return ApiResponse[UserPublic](message="User created successfully", data=UserPublic.model_validate(user))

@router.get("/me", response_model=ApiResponse[UserPublic])
async def read_current_user(
    current_user: User = CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.current_user(current_user.id)
    return ApiResponse[UserPublic](message="Current user retrieved successfully", data=UserPublic.model_validate(user))
