"""Injectable randomness for the draw engine.

``random.Random`` and ``random.SystemRandom`` already satisfy ``RandomSource``,
so production code passes a ``SystemRandom`` and tests pass a seeded ``Random``
or a scripted stand-in.
"""

import random
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def randrange(self, stop: int) -> int:
        """Uniform integer in [0, stop)."""
        ...


def default_random_source() -> RandomSource:
    return random.SystemRandom()
