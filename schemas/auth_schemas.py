from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from schemas.validators import check_password_strength, normalize_phone, normalize_email, clean_username


class UserResponse(BaseModel):
    """Public view of a user. Credential fields are never part of it."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool
    is_verified: bool
    notifications_enabled: bool
    created_at: Optional[datetime] = None


class RegisterResponse(UserResponse):
    message: str
    email_sent: bool


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str
    full_name: Optional[str] = Field(default=None, max_length=150)
    phone: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool = False
    admin_code: Optional[str] = None

    normalize_email_field = field_validator('email', mode='before')(normalize_email)

    clean_username_field = field_validator('username')(clean_username)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value):
        if value is None:
            return value
        return normalize_phone(value)


class LoginRequest(BaseModel):
    username: str
    password: str


class VerifyEmailRequest(BaseModel):
    code: str

    @field_validator('code')
    @classmethod
    def validate_code(cls, value):
        value = value.strip()
        if len(value) != 6 or not value.isascii() or not value.isdigit():
            raise ValueError('must be a 6-digit code')
        return value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    normalize_email_field = field_validator('email', mode='before')(normalize_email)


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str

    @field_validator('token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('Reset token cannot be empty')
        return value.strip()

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class UpdateProfileRequest(BaseModel):
    """Fields a user may change on their own profile."""
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(default=None, min_length=3, max_length=100)
    full_name: Optional[str] = Field(default=None, max_length=150)
    phone: Optional[str] = None
    address: Optional[str] = None
    notifications_enabled: Optional[bool] = None

    clean_username_field = field_validator('username')(clean_username)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value):
        if value is None:
            return value
        return normalize_phone(value)


class AdminUpdateUserRequest(UpdateProfileRequest):
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None
    is_verified: Optional[bool] = None

    normalize_email_field = field_validator('email', mode='before')(normalize_email)


class MessageResponse(BaseModel):
    message: str


class VerifyEmailResponse(BaseModel):
    message: str
    user: UserResponse


class EmailDispatchResponse(BaseModel):
    message: str
    email_sent: bool
