import random
from typing import Iterable, List, Optional

from dailydare.core.service.dare.models.dare import DareTemplate


def pick_personalized(
    candidates: List[DareTemplate],
    interests: Iterable[str],
    exclude_ids: Iterable[str],
    rng: random.Random,
) -> Optional[DareTemplate]:
    """
    Pick one template, preferring those whose tags overlap the interests.

    Falls back to the rest of the pool when no preferred template is left,
    and returns None when every candidate is excluded.
    """
    excluded = set(exclude_ids)
    interests = list(interests)
    available = [c for c in candidates if c.id not in excluded]

    preferred = [c for c in available if interests and c.matches_interests(interests)]
    if preferred:
        return rng.choice(preferred)

    if available:
        return rng.choice(available)

    return None
