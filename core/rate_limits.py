from __future__ import annotations

from limits import RateLimitItem
from limits import parse as parse_rate

ANONYMOUS = "anonymous"
USER = "user"

DEFAULT_RATE_LIMITS = {
    ANONYMOUS: "20/minute",
    USER: "80/minute",
}


def parse_rate_limits_csv(raw: str | None) -> dict[str, str]:
    """Parse ``"anonymous:10/minute,user:60/minute"`` into a tier -> rule mapping."""
    parsed: dict[str, str] = {}
    if not raw:
        return parsed

    for entry in raw.split(","):
        value = entry.strip()
        if ":" not in value:
            continue
        tier, rule = value.split(":", 1)
        tier_key = tier.strip().lower()
        rule_value = rule.strip()
        if tier_key and rule_value:
            parsed[tier_key] = rule_value
    return parsed


def build_rate_limits(raw: str | None) -> dict[str, RateLimitItem]:
    selected = {**DEFAULT_RATE_LIMITS, **parse_rate_limits_csv(raw)}

    limits: dict[str, RateLimitItem] = {}
    for tier, rule in selected.items():
        try:
            limits[tier] = parse_rate(rule)
        except ValueError:
            # Invalid overrides fall back to the default rule for the tier.
            if tier in DEFAULT_RATE_LIMITS:
                limits[tier] = parse_rate(DEFAULT_RATE_LIMITS[tier])
    return limits
