"""
Authentication API routes.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tokenauth.api.deps import Identity, get_auth_service, get_current_identity
from tokenauth.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

LOGIN_SUCCESS = "Login successful"
REFRESH_SUCCESS = "Token refreshed successfully"
PROFILE_SUCCESS = "Profile retrieved"
LOGOUT_SUCCESS = "Logged out successfully"


def _as_text(value: Any) -> Any:
    # Scalars become strings so type mismatches reach the domain checks
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return None


class LoginRequest(BaseModel):
    identifier: str | None = None
    password: str | None = None

    @field_validator("identifier", "password", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str | None = Field(default=None, alias="refreshToken")

    @field_validator("refresh_token", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class TokenData(BaseModel):
    accessToken: str
    refreshToken: str


class IdentityData(BaseModel):
    userId: str


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: TokenData | IdentityData | None = None


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    request: LoginRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    """Login with identifier and password."""
    request = request or LoginRequest()
    tokens = await service.login(request.identifier, request.password)
    return {"success": True, "message": LOGIN_SUCCESS, "data": tokens.to_dict()}


@router.post("/refresh", response_model=AuthResponse, response_model_exclude_none=True)
async def refresh_tokens(
    request: RefreshRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    """Get a new access token using a refresh token."""
    request = request or RefreshRequest()
    tokens = await service.refresh(request.refresh_token)
    return {"success": True, "message": REFRESH_SUCCESS, "data": tokens.to_dict()}


@router.get("/me", response_model=AuthResponse, response_model_exclude_none=True)
async def get_current_user_info(identity: Identity = Depends(get_current_identity)):
    """Get the authenticated caller."""
    return {"success": True, "message": PROFILE_SUCCESS, "data": identity.to_dict()}


@router.post("/logout", response_model=AuthResponse, response_model_exclude_none=True)
async def logout(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
):
    """Revoke every refresh token of the caller."""
    await service.invalidate_user_tokens(identity.user_id)
    return {"success": True, "message": LOGOUT_SUCCESS}
