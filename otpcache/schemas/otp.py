"""Pydantic schemas for OTP request and confirmation flows."""

from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class VerificationPurpose(str, Enum):
    """Sensitive actions guarded by an emailed code; each has its own namespace."""

    REGISTRATION = "registration"
    PASSWORD_RESET = "password_reset"


class OTPVerify(BaseModel):
    """Payload used when submitting a received OTP code for validation."""

    email: EmailStr
    code: str = Field(..., pattern=r"^\d+$", max_length=32)


class OTPRequest(BaseModel):
    """Payload used to request a new OTP for a specific email."""

    email: EmailStr
