"""Dependency providers used by FastAPI endpoints.

The entry store, code generator and delivery hook are built once in the
application lifespan and kept on `app.state`; these helpers hand them to route
handlers and compose the per-purpose services so handlers remain thin.
"""

from fastapi import Depends, Request

from otpcache.schemas.otp import VerificationPurpose
from otpcache.services.codes import CodeGenerator
from otpcache.services.delivery import CodeDelivery
from otpcache.services.otp import VerificationCache
from otpcache.services.requester import VerificationRequester
from otpcache.services.store import EntryStore


def get_entry_store(request: Request) -> EntryStore:
    """Return the process-wide store owned by the running application."""
    return request.app.state.entry_store


def get_code_generator(request: Request) -> CodeGenerator:
    return request.app.state.code_generator


def get_code_delivery(request: Request) -> CodeDelivery:
    return request.app.state.code_delivery


def get_verification_cache(
    purpose: VerificationPurpose,
    request: Request,
    store: EntryStore = Depends(get_entry_store),
    generator: CodeGenerator = Depends(get_code_generator),
) -> VerificationCache:
    """Scope the shared store to the purpose named in the path."""
    return VerificationCache(
        store,
        generator,
        ttl_seconds=request.app.state.settings.OTP_EXPIRE_SECONDS,
        purpose=purpose.value,
    )


def get_verification_requester(
    cache: VerificationCache = Depends(get_verification_cache),
    deliver: CodeDelivery = Depends(get_code_delivery),
) -> VerificationRequester:
    """Assemble VerificationRequester with its purpose-scoped cache and delivery hook."""
    return VerificationRequester(cache=cache, deliver=deliver)
