from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from paywall.config.plans import PlanType
from paywall.models.user import PublicUser

from .env_loader import EnvironmentName


class RegisterRequest(BaseModel):
    """Request model for creating an email/password account."""

    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Response model for a successful register or login."""

    success: Literal[True] = True
    user: PublicUser


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class CreatePixPaymentRequest(BaseModel):
    """Request model to start a subscription with a Pix payment."""

    plan_type: PlanType


class EnvironmentResponse(BaseModel):
    """Response model for the environment endpoint."""

    environment: EnvironmentName
