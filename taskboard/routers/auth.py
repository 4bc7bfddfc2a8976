from fastapi import APIRouter, Depends, Response, status

from ..core.config import settings
from ..core.dependencies import get_auth_service
from ..core.jwt_handler import cookie_options, parse_expires_in
from ..schemas.auth import LoginRequest, LoginResult, RegisterRequest
from ..schemas.common import ApiResponse, MessageResponse
from ..schemas.user import UserMe
from ..services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserMe], status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """Register a new user"""
    user = auth.register(email=payload.email, password=payload.password, name=payload.name)
    return ApiResponse(message="User registered successfully", data=UserMe.model_validate(user))


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(payload: LoginRequest, response: Response, auth: AuthService = Depends(get_auth_service)):
    """Log in and set the auth token cookie"""
    user, token = auth.login(email=payload.email, password=payload.password)

    max_age = int(parse_expires_in(settings.jwt_expires_in).total_seconds())
    response.set_cookie(settings.cookie_name, token, max_age=max_age, **cookie_options())

    result = LoginResult(user=UserMe.model_validate(user), token=token)
    return ApiResponse(message="Login successful", data=result)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """Clear the auth token cookie"""
    response.delete_cookie(settings.cookie_name, **cookie_options())
    return MessageResponse(message="Logout successful")
