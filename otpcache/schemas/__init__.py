from otpcache.schemas.common import Message
from otpcache.schemas.otp import OTPRequest, OTPVerify, VerificationPurpose

__all__ = [
    "Message",
    "OTPRequest",
    "OTPVerify",
    "VerificationPurpose",
]
