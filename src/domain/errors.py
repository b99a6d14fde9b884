"""Funnel rule violations.

All of these are recoverable: the operation that raised them produced no new
state, so callers can report the message and carry on.
"""


class FunnelError(Exception):
    """Base class for rejected funnel operations."""


class CapacityExceeded(FunnelError):
    pass


class InvalidTransition(FunnelError):
    pass


class InvalidOrdering(InvalidTransition):
    """A reorder id list that is not a permutation of the tier's songs."""


class NotFound(FunnelError):
    pass


class HallPassExhausted(FunnelError):
    pass
