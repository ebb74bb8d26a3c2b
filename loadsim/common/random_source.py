import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    """Anything with a uniform ``random()`` in [0, 1): the ``random`` module, ``random.Random``."""

    def random(self) -> float: ...


def default_source() -> RandomSource:
    # module-level generator shared by the process
    return random


def seeded_source(seed: Optional[int]) -> RandomSource:
    if seed is None:
        return default_source()
    return random.Random(seed)
