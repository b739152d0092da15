"""HTTP route handlers for requesting and confirming emailed codes."""

from fastapi import APIRouter, Depends, status

from otpcache.api import deps
from otpcache.schemas.common import Message
from otpcache.schemas.otp import OTPRequest, OTPVerify, VerificationPurpose
from otpcache.services.requester import VerificationRequester

router = APIRouter(prefix="/verification", tags=["verification"])


@router.post("/{purpose}/request", response_model=Message, status_code=status.HTTP_202_ACCEPTED)
async def request_code(
    purpose: VerificationPurpose,
    payload: OTPRequest,
    requester: VerificationRequester = Depends(deps.get_verification_requester),
) -> Message:
    """Issue a fresh code for the given email address and dispatch it."""

    await requester.request_code(payload.email)
    return Message(message="A verification code has been sent.")


@router.post("/{purpose}/confirm", response_model=Message)
async def confirm_code(
    purpose: VerificationPurpose,
    payload: OTPVerify,
    requester: VerificationRequester = Depends(deps.get_verification_requester),
) -> Message:
    """Confirm control of an email address using the submitted code."""

    await requester.confirm_code(payload)
    return Message(message="Email address verified.")
