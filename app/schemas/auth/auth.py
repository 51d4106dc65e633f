# app/schemas/auth/auth.py
from pydantic import BaseModel, Field, field_validator
from typing import Dict, Any

from ..admin.admin import validate_email_address


class LoginRequest(BaseModel):
    email: str = Field(..., description="Administrator e-mail address")
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return validate_email_address(v)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class AuthenticatedAdministrator(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str


class LoginData(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    administrator: AuthenticatedAdministrator


class LoginResponse(BaseModel):
    status_code: int
    message: str
    data: LoginData


class RefreshData(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RefreshResponse(BaseModel):
    status_code: int
    message: str
    data: RefreshData


class ProfileResponse(BaseModel):
    status_code: int
    message: str
    data: AuthenticatedAdministrator


class VerifyTokenResponse(BaseModel):
    status_code: int
    message: str
    data: Dict[str, Any]
