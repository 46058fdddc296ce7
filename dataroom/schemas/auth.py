"""Auth API schemas."""

from pydantic import EmailStr, Field

from dataroom.schemas.common import CamelModel


class GoogleSignInRequest(CamelModel):
    """Request body for POST /auth/google: the ID token (credential) from Google Sign-In."""

    credential: str = Field(..., min_length=1, description="Google ID token")


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256, description="Password (min 8 characters)")
    name: str | None = Field(default=None, max_length=200)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str | None = None
    provider: str


class AuthResponse(CamelModel):
    """Access token plus the signed-in user."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
