"""Hall pass accounting: one single-use skip per ranked tier, per theme."""

import copy
from dataclasses import replace

from src.domain.errors import HallPassExhausted, InvalidTransition
from src.domain.model import HallPasses, Theme, Tier

HALL_PASS_TIERS = (Tier.SEMIFINALISTS, Tier.FINALISTS)


def hall_passes_available(theme: Theme) -> HallPasses:
    return replace(theme.hall_passes)


def is_available(theme: Theme, tier: Tier) -> bool:
    if tier == Tier.SEMIFINALISTS:
        return theme.hall_passes.semifinals
    if tier == Tier.FINALISTS:
        return theme.hall_passes.finals
    return False


def spend(passes: HallPasses, tier: Tier) -> HallPasses:
    """Return the passes with the one for ``tier`` used up."""
    if tier not in HALL_PASS_TIERS:
        raise InvalidTransition(f"No hall pass exists for {tier.value}")
    if tier == Tier.SEMIFINALISTS:
        if not passes.semifinals:
            raise HallPassExhausted("The semifinals hall pass has already been used for this theme")
        return replace(passes, semifinals=False)
    if not passes.finals:
        raise HallPassExhausted("The finals hall pass has already been used for this theme")
    return replace(passes, finals=False)


def consume(theme: Theme, tier: Tier) -> Theme:
    passes = spend(theme.hall_passes, tier)
    updated = copy.deepcopy(theme)
    updated.hall_passes = passes
    return updated
