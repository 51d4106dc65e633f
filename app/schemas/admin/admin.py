# app/schemas/admin/admin.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
import re

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def validate_email_address(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if not EMAIL_RE.match(v):
        raise ValueError('Please provide a valid email address')
    return v


class CreateAdministratorRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(..., description="Login e-mail address")
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return validate_email_address(v)


class UpdateAdministratorRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return validate_email_address(v)


class AdministratorResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class AdministratorSingleResponse(BaseModel):
    status_code: int
    message: str
    data: AdministratorResponse


class AdministratorListResponse(BaseModel):
    status_code: int
    message: str
    data: List[AdministratorResponse]
    count: int
