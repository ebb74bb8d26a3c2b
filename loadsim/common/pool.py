from typing import Dict, List, Sequence
from .errors import InvalidInput
from .models import Worker

# capacities in registration order; registration order is also selection order
TIER_CAPACITIES: Dict[str, List[float]] = {
    "small":  [2, 3, 1],
    "medium": [6, 8, 4],
    "large":  [12, 16, 8],
}


def build_pool(tier: str = "medium") -> List[Worker]:
    if tier not in TIER_CAPACITIES:
        raise InvalidInput(f"unknown capacity tier {tier!r}, expected one of {sorted(TIER_CAPACITIES)}")
    return [
        Worker(id=str(i + 1), capacity=cap, label=tier)
        for i, cap in enumerate(TIER_CAPACITIES[tier])
    ]


def is_preset(workers: Sequence[Worker]) -> bool:
    """True when ``workers`` is exactly one of the tier presets, in order."""
    if not workers or workers[0].label not in TIER_CAPACITIES:
        return False
    return list(workers) == build_pool(workers[0].label)
