"""Mail item status lifecycle.

    pending ──► notified ──► picked_up
       │  ▲        │
       │  │        ├──► returned_to_sender
       ▼  │        ├──► lost
      other ◄──────┘

``picked_up``, ``returned_to_sender`` and ``lost`` are terminal. ``other`` is a
parking state that can go anywhere except back to itself.
"""

from __future__ import annotations

from mailroom.core.exceptions import ConflictError, ValidationError
from mailroom.domain.enums import MailItemStatus as S

TRANSITIONS: dict[S, frozenset[S]] = {
    S.PENDING: frozenset({S.NOTIFIED, S.PICKED_UP, S.RETURNED_TO_SENDER, S.LOST, S.OTHER}),
    S.NOTIFIED: frozenset({S.PICKED_UP, S.RETURNED_TO_SENDER, S.LOST, S.OTHER}),
    S.OTHER: frozenset({S.PENDING, S.NOTIFIED, S.PICKED_UP, S.RETURNED_TO_SENDER, S.LOST}),
    S.PICKED_UP: frozenset(),
    S.RETURNED_TO_SENDER: frozenset(),
    S.LOST: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Targets a user may set directly; notified and picked_up have their own operations.
MANUAL_TARGETS = frozenset({S.PENDING, S.RETURNED_TO_SENDER, S.LOST, S.OTHER})


def can_transition(current: str | S, target: str | S) -> bool:
    return S(target) in TRANSITIONS[S(current)]


def is_terminal(status: str | S) -> bool:
    return S(status) in TERMINAL_STATUSES


def sources_for(target: str | S) -> list[str]:
    """Statuses from which *target* is reachable, as stored column values."""
    target = S(target)
    return sorted(s.value for s, targets in TRANSITIONS.items() if target in targets)


def ensure_transition(current: str | S, target: str | S) -> None:
    """Raise ConflictError unless ``current -> target`` is a legal move."""
    if not can_transition(current, target):
        raise ConflictError(
            f"Cannot change mail item status from '{S(current).value}' to '{S(target).value}'"
        )


def ensure_manual_target(target: str) -> S:
    try:
        status = S(target)
    except ValueError as exc:
        raise ValidationError(f"Unknown status '{target}'") from exc
    if status not in MANUAL_TARGETS:
        raise ValidationError(
            f"Status '{status.value}' can only be set by recording a "
            f"{'notification' if status is S.NOTIFIED else 'pickup'}"
        )
    return status
