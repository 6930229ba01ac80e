"""
Centralized, type-safe stage definitions for the job board.

``ApplicationStatus`` is the single source of truth for the pipeline stages.
It inherits from ``(str, Enum)`` so that members compare equal to plain
strings and serialize naturally to JSON at API boundaries.

Status transitions are unrestricted: any stage may move to any other stage.
"""

from enum import Enum
from typing import List

from jobboard.models.errors import create_invalid_target_error


class ApplicationStatus(str, Enum):
    """Pipeline stages, declared in board-column order."""

    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFERING = "offering"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


DEFAULT_STATUS = ApplicationStatus.APPLIED


def board_stages() -> List[ApplicationStatus]:
    """Return every stage in board-column order."""
    return list(ApplicationStatus)


def allowed_status_values() -> str:
    """Comma-separated list of accepted status values, for error messages."""
    return ", ".join(s.value for s in ApplicationStatus)


def parse_status(value) -> ApplicationStatus:
    """
    Resolve a raw status value to an ``ApplicationStatus`` member.

    Matching is case-sensitive against the enum values; enum members are
    returned unchanged.

    Args:
        value: An ``ApplicationStatus`` or its string value

    Returns:
        The matching ApplicationStatus

    Raises:
        InvalidTargetError: If the value is not a known stage
    """
    if isinstance(value, ApplicationStatus):
        return value

    if isinstance(value, str):
        try:
            return ApplicationStatus(value)
        except ValueError:
            pass

    raise create_invalid_target_error(
        f"Unknown status: {value!r}. Allowed values are: {allowed_status_values()}"
    )
