"""
Unit tests for input validation helpers.

Tests owner/entry id checks, paging bounds, search text normalization and
batch duplicate detection.
"""

import re

import pytest

from jobboard.models.errors import ErrorCode, ValidationError
from jobboard.schemas.entry import PositionUpdate
from jobboard.utils.validation import (
    MAX_PAGE_SIZE,
    clamp_page_size,
    get_current_utc_timestamp,
    normalize_search_text,
    validate_entry_id,
    validate_owner_id,
    validate_page,
    validate_position,
    validate_target_index,
    validate_unique_entry_ids,
)


class TestValidateOwnerId:
    def test_valid(self):
        assert validate_owner_id("user-1") == "user-1"

    @pytest.mark.parametrize("value", [None, "", "   ", 12])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_owner_id(value)
        assert exc_info.value.field == "owner_id"


class TestValidateEntryId:
    def test_valid(self):
        assert validate_entry_id(5) == 5

    @pytest.mark.parametrize("value", [None, 0, -1, "5", 1.0, True])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_entry_id(value)

    def test_custom_field_name(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_id(0, field="entry_id")
        assert exc_info.value.field == "entry_id"


class TestValidatePosition:
    def test_valid(self):
        assert validate_position(1) == 1

    @pytest.mark.parametrize("value", [0, -3, "1", None, False])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_position(value)


class TestValidateTargetIndex:
    def test_none_means_end(self):
        assert validate_target_index(None) is None

    def test_negative_passes_through(self):
        assert validate_target_index(-4) == -4

    def test_rejects_non_integer(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_target_index("first")
        assert exc_info.value.field == "target_index"


class TestPaging:
    def test_page_defaults_to_one(self):
        assert validate_page(None) == 1

    def test_page_below_minimum(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_page(0)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.field == "page"

    def test_page_size_default(self):
        assert clamp_page_size(None) == 20

    def test_page_size_custom_default(self):
        assert clamp_page_size(None, default=50) == 50

    def test_page_size_clamped(self):
        assert clamp_page_size(500) == MAX_PAGE_SIZE

    def test_page_size_at_maximum(self):
        assert clamp_page_size(100) == 100

    @pytest.mark.parametrize("value", [0, -1, "10", 2.5])
    def test_page_size_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            clamp_page_size(value)
        assert exc_info.value.field == "page_size"


class TestNormalizeSearchText:
    def test_none(self):
        assert normalize_search_text(None) is None

    def test_blank_disables_filter(self):
        assert normalize_search_text("   ") is None

    def test_trims(self):
        assert normalize_search_text("  Acme ") == "Acme"

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError):
            normalize_search_text(["Acme"])


class TestUniqueEntryIds:
    def test_unique_ids_pass(self):
        validate_unique_entry_ids(
            [PositionUpdate(id=1, position=1), PositionUpdate(id=2, position=2)]
        )

    def test_duplicates_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_unique_entry_ids(
                [
                    PositionUpdate(id=3, position=1),
                    PositionUpdate(id=3, position=2),
                    PositionUpdate(id=1, position=3),
                ]
            )
        assert "3" in exc_info.value.message
        assert exc_info.value.field == "updates"


class TestTimestamp:
    def test_format(self):
        timestamp = get_current_utc_timestamp()
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", timestamp)
