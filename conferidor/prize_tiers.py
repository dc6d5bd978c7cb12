import re
from typing import Dict, Iterable, Optional

from loguru import logger

from conferidor.models import PrizeTier, TierInfo

# Checked in order; "sena" must come first so "Sena" wins over any numeric prefix.
TIER_KEYWORDS = (
    ("sena", 6),
    ("quina", 5),
    ("quadra", 4),
    ("terno", 3),
)

_LEADING_DIGITS = re.compile(r"^\d+")


def resolve_hit_count(description: str) -> Optional[int]:
    """
    Map a Caixa prize tier description to the number of hits it pays.

    Args:
        description: Tier label such as "6 acertos", "QUADRA" or "Sena"

    Returns:
        Required hit count, or None if the label is not recognised
    """
    lowered = description.lower()
    for keyword, hits in TIER_KEYWORDS:
        if keyword in lowered:
            return hits

    match = _LEADING_DIGITS.match(description)
    if match:
        return int(match.group(0))

    return None


def build_tier_map(prize_tiers: Iterable[PrizeTier]) -> Dict[int, TierInfo]:
    """
    Build the hit count -> payout table for one contest.

    The first tier resolving to a given hit count is kept; later tiers with the
    same count are dropped.
    """
    tier_map: Dict[int, TierInfo] = {}
    for tier in prize_tiers:
        hits = resolve_hit_count(tier.description)
        if hits is None or hits < 1:
            logger.debug(f"Ignoring unrecognised prize tier: {tier.description!r}")
            continue
        if hits in tier_map:
            logger.debug(f"Duplicate prize tier for {hits} hits ignored: {tier.description!r}")
            continue
        tier_map[hits] = TierInfo(payout=tier.payout, description=tier.description)
    return tier_map
