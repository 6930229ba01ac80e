"""Pydantic schemas for application entries and position updates."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from jobboard.models.status import ApplicationStatus, DEFAULT_STATUS, allowed_status_values
from jobboard.schemas.common import StrictForbidRequest, StrictResponse
from jobboard.utils.validation import (
    MAX_COMPANY_NAME_LENGTH,
    MAX_JOB_URL_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_TITLE_LENGTH,
)


def _required_text(value: Optional[str], field_name: str, max_length: int) -> str:
    if value is None:
        raise ValueError(f"Invalid {field_name}: cannot be null")
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    if len(stripped) > max_length:
        raise ValueError(f"Invalid {field_name}: exceeds maximum length of {max_length}")
    return stripped


def _applied_date(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("Invalid applied_date: cannot be null")
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"Invalid applied_date: '{value}' is not an ISO date (YYYY-MM-DD)")
    # Stored in canonical form so that text ordering is chronological
    return parsed.isoformat()


def _job_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        return None
    if len(stripped) > MAX_JOB_URL_LENGTH:
        raise ValueError(f"Invalid job_url: exceeds maximum length of {MAX_JOB_URL_LENGTH}")
    return stripped


def _notes(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("Invalid notes: cannot be null")
    if len(value) > MAX_NOTES_LENGTH:
        raise ValueError(f"Invalid notes: exceeds maximum length of {MAX_NOTES_LENGTH}")
    return value


def _status(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("Invalid status: cannot be null")
    try:
        return ApplicationStatus(value).value
    except ValueError:
        raise ValueError(
            f"Invalid status value: '{value}'. Allowed values are: {allowed_status_values()}"
        )


class EntryCreate(StrictForbidRequest):
    """Attributes accepted when creating an entry."""

    company_name: str
    title: str
    applied_date: str
    job_url: Optional[str] = None
    notes: str = ""
    status: Optional[str] = None

    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, value: str) -> str:
        return _required_text(value, "company_name", MAX_COMPANY_NAME_LENGTH)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _required_text(value, "title", MAX_TITLE_LENGTH)

    @field_validator("applied_date")
    @classmethod
    def validate_applied_date(cls, value: str) -> str:
        return _applied_date(value)

    @field_validator("job_url")
    @classmethod
    def validate_job_url(cls, value: Optional[str]) -> Optional[str]:
        return _job_url(value)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: str) -> str:
        return _notes(value)

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _status(value)

    @property
    def resolved_status(self) -> ApplicationStatus:
        """Requested stage, or the default stage when none was given."""
        return ApplicationStatus(self.status) if self.status else DEFAULT_STATUS


class EntryUpdate(StrictForbidRequest):
    """Partial attribute update: only fields that were supplied are applied.

    Validators only run for supplied fields, so an explicit ``None`` for a
    required attribute is rejected while an omitted one is left unchanged.
    ``job_url`` is the one attribute that may be cleared with ``None``.
    """

    company_name: Optional[str] = None
    title: Optional[str] = None
    applied_date: Optional[str] = None
    job_url: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, value: Optional[str]) -> str:
        return _required_text(value, "company_name", MAX_COMPANY_NAME_LENGTH)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> str:
        return _required_text(value, "title", MAX_TITLE_LENGTH)

    @field_validator("applied_date")
    @classmethod
    def validate_applied_date(cls, value: Optional[str]) -> str:
        return _applied_date(value)

    @field_validator("job_url")
    @classmethod
    def validate_job_url(cls, value: Optional[str]) -> Optional[str]:
        return _job_url(value)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: Optional[str]) -> str:
        return _notes(value)

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[str]) -> str:
        return _status(value)

    def changes(self) -> Dict[str, Any]:
        """Return only the supplied fields with their validated values."""
        return self.model_dump(exclude_unset=True)


class EntryRecord(StrictResponse):
    """Entry schema returned by the store and the tools.

    Accepts raw database rows: extra columns are ignored and the stored
    integer flag is exposed as a boolean.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    owner_id: str
    company_name: str
    title: str
    status: str
    applied_date: str
    job_url: Optional[str] = None
    notes: str = ""
    position: int
    archived: bool = False
    created_at: str
    updated_at: str

    @model_validator(mode="before")
    @classmethod
    def normalize_row(cls, data: Any) -> Any:
        """Empty job_url becomes None; NULL notes become an empty string."""
        if isinstance(data, dict):
            data = dict(data)
            if data.get("job_url") == "":
                data["job_url"] = None
            if data.get("notes") is None:
                data["notes"] = ""
        return data


class PositionUpdate(BaseModel):
    """One ``(id, position, status?)`` assignment produced by a move."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    position: int
    status: Optional[ApplicationStatus] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, omitting status when the entry stays in its stage."""
        result: Dict[str, Any] = {"id": self.id, "position": self.position}
        if self.status is not None:
            result["status"] = self.status.value
        return result
