"""
Input validation utilities for the job board core.

Validates owner ids, entry ids, positions, move indexes and paging
parameters. Every validator raises a ValidationError (VALIDATION_ERROR)
naming the offending field.
"""

from datetime import datetime, timezone
from typing import Optional

from jobboard.models.errors import create_validation_error

# Paging
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
MIN_PAGE = 1

# Attribute limits
MAX_COMPANY_NAME_LENGTH = 255
MAX_TITLE_LENGTH = 255
MAX_JOB_URL_LENGTH = 255
MAX_NOTES_LENGTH = 500


def _is_int(value) -> bool:
    # bool is a subclass of int in Python, reject explicitly
    return isinstance(value, int) and not isinstance(value, bool)


def validate_owner_id(owner_id) -> str:
    """
    Validate the owner id supplied by the identity provider.

    The value itself is trusted; only its shape is checked.

    Args:
        owner_id: The owner identifier

    Returns:
        Validated owner id

    Raises:
        ValidationError: If owner_id is missing, not a string, or blank
    """
    if owner_id is None:
        raise create_validation_error("Invalid owner_id: cannot be null", field="owner_id")

    if not isinstance(owner_id, str):
        raise create_validation_error(
            f"Invalid owner_id type: expected string, got {type(owner_id).__name__}",
            field="owner_id",
        )

    if not owner_id.strip():
        raise create_validation_error("Invalid owner_id: cannot be empty", field="owner_id")

    return owner_id


def validate_entry_id(entry_id, field: str = "id") -> int:
    """
    Validate an entry id.

    Args:
        entry_id: The entry id value to validate
        field: Field name reported on failure

    Returns:
        Validated entry id as integer

    Raises:
        ValidationError: If entry_id is not a positive integer
    """
    if entry_id is None:
        raise create_validation_error(f"Invalid {field}: cannot be null", field=field)

    if not _is_int(entry_id):
        raise create_validation_error(
            f"Invalid {field} type: expected integer, got {type(entry_id).__name__}",
            field=field,
        )

    if entry_id < 1:
        raise create_validation_error(
            f"Invalid {field}: {entry_id} must be a positive integer (>= 1)", field=field
        )

    return entry_id


def validate_position(position) -> int:
    """
    Validate a stored position value.

    Args:
        position: The position to validate

    Returns:
        Validated position

    Raises:
        ValidationError: If position is not an integer >= 1
    """
    if not _is_int(position):
        raise create_validation_error(
            f"Invalid position type: expected integer, got {type(position).__name__}",
            field="position",
        )

    if position < 1:
        raise create_validation_error(
            f"Invalid position: {position} must be a positive integer (>= 1)", field="position"
        )

    return position


def validate_target_index(target_index) -> Optional[int]:
    """
    Validate a zero-based insertion index for a move.

    ``None`` means "end of stage". Negative values are accepted here and
    clamped by the ordering engine.

    Args:
        target_index: The requested insertion index

    Returns:
        The index, or None for end of stage

    Raises:
        ValidationError: If target_index is not an integer
    """
    if target_index is None:
        return None

    if not _is_int(target_index):
        raise create_validation_error(
            f"Invalid target_index type: expected integer, got {type(target_index).__name__}",
            field="target_index",
        )

    return target_index


def validate_page(page) -> int:
    """
    Validate the 1-based page number.

    Args:
        page: The requested page (None for the first page)

    Returns:
        Validated page number

    Raises:
        ValidationError: If page is not an integer >= 1
    """
    if page is None:
        return MIN_PAGE

    if not _is_int(page):
        raise create_validation_error(
            f"Invalid page type: expected integer, got {type(page).__name__}", field="page"
        )

    if page < MIN_PAGE:
        raise create_validation_error(
            f"Invalid page: {page} is below minimum of {MIN_PAGE}", field="page"
        )

    return page


def clamp_page_size(page_size, default: int = DEFAULT_PAGE_SIZE) -> int:
    """
    Validate the page size and clamp it to MAX_PAGE_SIZE.

    Oversized requests are not an error: they are served with the maximum
    page size, and the clamped value is what callers report back.

    Args:
        page_size: The requested page size (None for default)
        default: Page size used when none is requested

    Returns:
        Page size in [MIN_PAGE_SIZE, MAX_PAGE_SIZE]

    Raises:
        ValidationError: If page_size is not an integer or is below the minimum
    """
    if page_size is None:
        page_size = default

    if not _is_int(page_size):
        raise create_validation_error(
            f"Invalid page_size type: expected integer, got {type(page_size).__name__}",
            field="page_size",
        )

    if page_size < MIN_PAGE_SIZE:
        raise create_validation_error(
            f"Invalid page_size: {page_size} is below minimum of {MIN_PAGE_SIZE}",
            field="page_size",
        )

    return min(page_size, MAX_PAGE_SIZE)


def normalize_search_text(search_text) -> Optional[str]:
    """
    Normalize free-text search input.

    Args:
        search_text: Raw search text (None or blank disables the text filter)

    Returns:
        Trimmed search text, or None when there is nothing to search for

    Raises:
        ValidationError: If search_text is not a string
    """
    if search_text is None:
        return None

    if not isinstance(search_text, str):
        raise create_validation_error(
            f"Invalid search_text type: expected string, got {type(search_text).__name__}",
            field="search_text",
        )

    stripped = search_text.strip()
    return stripped or None


def validate_unique_entry_ids(updates: list) -> None:
    """
    Validate that all entry ids in a batch are unique.

    Args:
        updates: The list of update items to validate

    Raises:
        ValidationError: If duplicate entry ids are found
    """
    if not updates:
        return

    seen = set()
    duplicates = set()
    for update in updates:
        entry_id = update.id
        if entry_id in seen:
            duplicates.add(entry_id)
        else:
            seen.add(entry_id)

    if duplicates:
        duplicate_list = ", ".join(str(dup_id) for dup_id in sorted(duplicates))
        raise create_validation_error(
            f"Duplicate entry ids found in batch: {duplicate_list}", field="updates"
        )


def get_current_utc_timestamp() -> str:
    """
    Generate a UTC timestamp in ISO 8601 format with millisecond precision.

    Returns a timestamp string in the format: YYYY-MM-DDTHH:MM:SS.mmmZ
    Example: 2026-02-04T03:47:36.966Z

    All rows written by one batch share a single timestamp.

    Returns:
        ISO 8601 UTC timestamp string with millisecond precision and Z suffix
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
