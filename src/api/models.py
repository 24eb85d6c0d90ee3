"""Pydantic models for API request/response."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.model.user import User


class _CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the Python field names."""
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_CamelModel):
    """Request model for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field('', alias='firstName', max_length=100)
    last_name: str = Field('', alias='lastName', max_length=100)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(_CamelModel):
    reset_token: str = Field(..., alias='resetToken', min_length=1)
    new_password: str = Field(..., alias='newPassword', min_length=1)


class UserResponse(_CamelModel):
    """Public view of a user. Never carries the password hash or reset fields."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    first_name: str = Field('', alias='firstName', description="First name")
    last_name: str = Field('', alias='lastName', description="Last name")

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(**user.public_view())


class AuthResponse(BaseModel):
    """Response model for register and login."""
    token: str
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
