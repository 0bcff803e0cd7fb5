"""TTL policy table."""

from collections.abc import Mapping
from types import MappingProxyType

from justcook_cache.errors import UnknownTTLTierError
from justcook_cache.types import TTLTier

_TIERS: dict[TTLTier, int] = {
    # Short-lived: feeds change with every vote
    "trending": 60,
    "discover": 120,
    # Medium-lived: per-entity aggregates
    "chef_profile": 300,
    "recipe_stats": 300,
    # Long-lived: reference data
    "categories": 3600,
    "static_data": 86400,
}

CACHE_TTL: Mapping[TTLTier, int] = MappingProxyType(_TIERS)


def ttl_for(tier: TTLTier) -> int:
    """Resolve a tier name to its time-to-live in seconds."""
    try:
        return CACHE_TTL[tier]
    except KeyError:
        raise UnknownTTLTierError(f"Unknown TTL tier: {tier!r}") from None
