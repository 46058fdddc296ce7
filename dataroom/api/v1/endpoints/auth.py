"""Auth API: Google sign-in, password register/login, current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from dataroom.api.v1.dependencies import CurrentUser, get_auth_service
from dataroom.application.dtos.user import AuthResult
from dataroom.application.use_cases.auth import AuthService
from dataroom.core.limiter import limit_auth
from dataroom.schemas.auth import (
    AuthResponse,
    GoogleSignInRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from dataroom.schemas.common import ApiResponse

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def _auth_response(result: AuthResult, message: str) -> ApiResponse[AuthResponse]:
    return ApiResponse(
        data=AuthResponse(
            access_token=result.access_token,
            token_type=result.token_type,
            expires_in=result.expires_in,
            user=UserResponse.model_validate(result.user),
        ),
        message=message,
    )


@router.post("/google", response_model=ApiResponse[AuthResponse])
@limit_auth
async def google_sign_in(
    request: Request,
    body: GoogleSignInRequest,
    auth_svc: AuthServiceDep,
):
    """Exchange a Google ID token for an access token (user created on first sign-in)."""
    result = await auth_svc.sign_in_with_google(body.credential)
    return _auth_response(result, "Signed in")


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=201)
@limit_auth
async def register(
    request: Request,
    body: RegisterRequest,
    auth_svc: AuthServiceDep,
):
    """Create an email/password account and return an access token."""
    result = await auth_svc.register(body.email, body.password, body.name)
    return _auth_response(result, "Account created")


@router.post("/login", response_model=ApiResponse[AuthResponse])
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_svc: AuthServiceDep,
):
    """Sign in with email and password."""
    result = await auth_svc.login(body.email, body.password)
    return _auth_response(result, "Signed in")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: CurrentUser):
    return ApiResponse(data=UserResponse.model_validate(current_user))
