"""Workflow phase derived from tier occupancy.

The phase is never stored: it is recomputed from the tiers on every read and
only frames the UI and the strategist prompt. It never blocks an operation.
"""

from dataclasses import dataclass
from typing import Optional

from src.domain.model import TIER_CAPACITY, Phase, Theme, Tier

REFINE_CANDIDATES_THRESHOLD = 8
REFINE_SEMIFINALISTS_THRESHOLD = TIER_CAPACITY[Tier.SEMIFINALISTS]
DECIDE_FINALISTS_THRESHOLD = 1


@dataclass(frozen=True)
class PhaseThresholds:
    refine_candidates: int = REFINE_CANDIDATES_THRESHOLD
    refine_semifinalists: int = REFINE_SEMIFINALISTS_THRESHOLD
    decide_finalists: int = DECIDE_FINALISTS_THRESHOLD


DEFAULT_THRESHOLDS = PhaseThresholds()


@dataclass(frozen=True)
class PhaseProgress:
    current: int
    target: int


def compute_phase(theme: Optional[Theme], thresholds: PhaseThresholds = DEFAULT_THRESHOLDS) -> Phase:
    if theme is None:
        return Phase.IDLE
    if theme.pick is not None:
        return Phase.COMPLETE
    if len(theme.finalists) >= thresholds.decide_finalists:
        return Phase.DECIDE
    if len(theme.semifinalists) >= thresholds.refine_semifinalists:
        return Phase.REFINE
    if len(theme.candidates) >= thresholds.refine_candidates:
        return Phase.REFINE
    return Phase.BRAINSTORM


def phase_progress(
    theme: Optional[Theme],
    thresholds: PhaseThresholds = DEFAULT_THRESHOLDS,
) -> Optional[PhaseProgress]:
    """Count toward the next phase, as shown on the progress bar."""
    phase = compute_phase(theme, thresholds)
    if phase == Phase.BRAINSTORM:
        return PhaseProgress(current=len(theme.candidates), target=thresholds.refine_candidates)
    if phase == Phase.REFINE:
        return PhaseProgress(current=len(theme.semifinalists), target=TIER_CAPACITY[Tier.SEMIFINALISTS])
    if phase == Phase.DECIDE:
        return PhaseProgress(current=len(theme.finalists), target=TIER_CAPACITY[Tier.FINALISTS])
    return None
