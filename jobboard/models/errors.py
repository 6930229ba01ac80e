"""
Error model for the job board core and its MCP tools.

Provides structured error codes, one exception class per error kind, and
sanitized error messages.
"""

import os
import re
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TARGET = "INVALID_TARGET"
    DB_NOT_FOUND = "DB_NOT_FOUND"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


class ValidationError(ToolError):
    """A required attribute is missing or a supplied value is invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message, retryable=False)
        self.field = field

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.field:
            payload["error"]["field"] = self.field
        return payload


class NotFoundError(ToolError):
    """The entry does not exist or belongs to another owner."""

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.NOT_FOUND, message=message, retryable=False)


class InvalidTargetError(ToolError):
    """A move or filter references a stage that is not on the board."""

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.INVALID_TARGET, message=message, retryable=False)


class PersistenceError(ToolError):
    """The underlying storage operation failed."""


def sanitize_path(path: str) -> str:
    """
    Sanitize file paths to avoid exposing sensitive system details.

    Returns only the basename for absolute paths, keeps relative paths.

    Args:
        path: The file path to sanitize

    Returns:
        Sanitized path string
    """
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_sql_error(error_msg: str) -> str:
    """
    Sanitize SQL error messages to remove sensitive details.

    Removes SQL fragments and absolute paths, keeping only actionable information.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r'SQL:.*', '', error_msg, flags=re.IGNORECASE)
    sanitized = re.sub(r'"[^"]*SELECT[^"]*"', '[SQL query]', sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r"'[^']*SELECT[^']*'", '[SQL query]', sanitized, flags=re.IGNORECASE)

    # Unquoted statements
    sanitized = re.sub(r'\b(SELECT|INSERT|UPDATE|DELETE)\b.*', '[SQL query]', sanitized, flags=re.IGNORECASE)

    sanitized = re.sub(r'/[^\s]+/', '[path]/', sanitized)

    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str, field: Optional[str] = None) -> ValidationError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure
        field: Name of the offending field, when the failure is field-level

    Returns:
        ValidationError with VALIDATION_ERROR code
    """
    return ValidationError(message=message, field=field)


def create_not_found_error(entry_id) -> NotFoundError:
    """
    Create a not-found error for an entry id.

    The message is identical whether the entry is missing or owned by
    someone else, so ownership is never disclosed.

    Args:
        entry_id: The entry id that could not be resolved

    Returns:
        NotFoundError with NOT_FOUND code
    """
    return NotFoundError(message=f"Entry not found: {entry_id}")


def create_invalid_target_error(message: str) -> InvalidTargetError:
    """
    Create an invalid-target error.

    Args:
        message: Description of the rejected target

    Returns:
        InvalidTargetError with INVALID_TARGET code
    """
    return InvalidTargetError(message=message)


def create_db_not_found_error(db_path: str) -> PersistenceError:
    """
    Create a database not found error.

    Args:
        db_path: The database path that was not found

    Returns:
        PersistenceError with DB_NOT_FOUND code
    """
    sanitized_path = sanitize_path(db_path)
    return PersistenceError(
        code=ErrorCode.DB_NOT_FOUND,
        message=f"Database not found: {sanitized_path}",
        retryable=False
    )


def create_db_error(message: str, retryable: bool = False, original_error: Optional[Exception] = None) -> PersistenceError:
    """
    Create a database error.

    Args:
        message: Description of the database error
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        PersistenceError with DB_ERROR code
    """
    sanitized_message = sanitize_sql_error(message)
    sanitized_message = sanitize_stack_trace(sanitized_message)

    return PersistenceError(
        code=ErrorCode.DB_ERROR,
        message=f"Database error: {sanitized_message}",
        retryable=retryable,
        original_error=original_error
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
