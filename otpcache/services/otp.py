"""OTP issuance and validation on top of an injected entry store."""

from otpcache.core.config import settings
from otpcache.services.codes import CodeGenerator
from otpcache.services.store import EntryStore


class VerificationCache:
    """High-level API for issuing, validating, and invalidating OTP codes.

    A successful `verify` does not consume the code. Callers must `invalidate`
    right after acting on a successful check, otherwise the code stays valid
    until it expires or is replaced.
    """

    def __init__(
        self,
        store: EntryStore,
        generator: CodeGenerator,
        ttl_seconds: float = settings.OTP_EXPIRE_SECONDS,
        purpose: str = "",
    ):
        """Receive the shared store and generator (injected by the FastAPI dependency graph)."""
        if ttl_seconds <= 0:
            raise ValueError("Code lifetime must be positive.")
        self.store = store
        self.generator = generator
        self.ttl_seconds = ttl_seconds
        self.purpose = purpose

    async def issue(self, subject: str) -> str:
        """Mint a code for `subject`, replacing any pending one, and return it for delivery."""
        code = self.generator.generate()
        await self.store.put(self.purpose, subject, code, self.ttl_seconds)
        return code

    async def verify(self, subject: str, code: str) -> bool:
        """Return True only for the live code of `subject`; wrong guesses change nothing."""
        return await self.store.check(self.purpose, subject, code)

    async def invalidate(self, subject: str) -> None:
        """Remove the pending code, if any."""
        await self.store.clear(self.purpose, subject)
