"""Unit tests for pagination helpers."""

from jobboard.utils.pagination import build_pagination, compute_offset, compute_total_pages


class TestComputeOffset:
    def test_first_page(self):
        assert compute_offset(1, 20) == 0

    def test_later_page(self):
        assert compute_offset(3, 20) == 40


class TestComputeTotalPages:
    def test_no_rows(self):
        assert compute_total_pages(0, 20) == 0

    def test_exact_multiple(self):
        assert compute_total_pages(40, 20) == 2

    def test_partial_last_page(self):
        assert compute_total_pages(41, 20) == 3

    def test_single_row(self):
        assert compute_total_pages(1, 100) == 1


class TestBuildPagination:
    def test_structure(self):
        assert build_pagination(2, 10, 25) == {
            "page": 2,
            "page_size": 10,
            "total_count": 25,
            "total_pages": 3,
        }

    def test_page_beyond_end_is_reported_as_requested(self):
        result = build_pagination(9, 10, 5)
        assert result["page"] == 9
        assert result["total_pages"] == 1
