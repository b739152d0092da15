"""Numeric one-time code generation."""

import random
import secrets

from otpcache.core.config import settings


class CodeGenerator:
    """Produce zero-padded numeric codes from an injected random source.

    Production code relies on the default `secrets.SystemRandom`; tests may pass
    a seeded `random.Random` to get reproducible codes.
    """

    def __init__(self, length: int = settings.OTP_LENGTH, rng: random.Random | None = None):
        if length < 1:
            raise ValueError("Code length must be at least one digit.")
        self.length = length
        self._rng = rng if rng is not None else secrets.SystemRandom()
        self._upper_bound = 10 ** length

    def generate(self) -> str:
        """Return a fresh code in the range 0 .. 10**length - 1, leading zeros kept."""
        return f"{self._rng.randrange(self._upper_bound):0{self.length}d}"
