"""Documented payment lifecycle graph.

The service writes any requested status by default; this check only runs when
`ENFORCE_STATUS_TRANSITIONS` is enabled.
"""

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "PENDING": {"PROCESSING"},
    "PROCESSING": {"COMPLETED", "FAILED"},
    "COMPLETED": {"CANCELLED"},
    "FAILED": {"CANCELLED"},
    "CANCELLED": set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not part of the lifecycle graph."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")
