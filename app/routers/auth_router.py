import logging
from fastapi import APIRouter, Depends, Request

from ..auth import get_current_admin
from ..dependencies import get_auth_service
from ..application.services.auth_service import AuthService
from ..schemas import (
    LoginRequest, LoginResponse, RefreshTokenRequest, RefreshResponse,
    ProfileResponse, VerifyTokenResponse, AuthenticatedAdministrator,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, request: Request, auth_service: AuthService = Depends(get_auth_service)):
    client_ip = request.client.host if request.client else None
    result = auth_service.login(body.email, body.password, ip_address=client_ip)
    return {"status_code": 200, "message": "Login successful", "data": result}


@router.post("/refresh", response_model=RefreshResponse)
def refresh_token(body: RefreshTokenRequest, auth_service: AuthService = Depends(get_auth_service)):
    result = auth_service.refresh(body.refresh_token)
    return {"status_code": 200, "message": "Token refreshed successfully", "data": result}


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_admin: AuthenticatedAdministrator = Depends(get_current_admin)):
    return {"status_code": 200, "message": "Profile retrieved successfully", "data": current_admin}


@router.get("/verify", response_model=VerifyTokenResponse)
def verify_token(current_admin: AuthenticatedAdministrator = Depends(get_current_admin)):
    return {
        "status_code": 200,
        "message": "Token is valid",
        "data": {"user": current_admin.model_dump(), "is_valid": True},
    }
