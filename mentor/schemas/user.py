from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: str
    mobile: Optional[str] = None


class AdminSetupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    confirm_password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class PasswordUpdateRequest(BaseModel):
    current_password: str
    new_password: str


class UserResponse(BaseModel):
    id: str
    email: str
    created_at: datetime
    roles: list[str] = []

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    name: Optional[str]
    email: Optional[str]
    mobile: Optional[str]
    profession: Optional[str]
    experience_level: Optional[str]
    technology: Optional[str]
    preferred_difficulty: Optional[str]
    profile_picture_url: Optional[str]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    mobile: Optional[str] = None
    profession: Optional[str] = None
    experience_level: Optional[str] = None
    technology: Optional[str] = None
    preferred_difficulty: Optional[str] = None
