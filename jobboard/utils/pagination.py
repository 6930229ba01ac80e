"""
Pagination helper functions for the search query.

Offset-based pages: page numbers start at 1 and total_pages is derived
from the filtered count.
"""

import math
from typing import Dict


def compute_offset(page: int, page_size: int) -> int:
    """
    Number of rows to skip to reach a page.

    Args:
        page: 1-based page number
        page_size: Rows per page

    Returns:
        Row offset for the query
    """
    return (page - 1) * page_size


def compute_total_pages(total_count: int, page_size: int) -> int:
    """
    Number of pages needed for total_count rows.

    Returns 0 when there are no rows at all.
    """
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def build_pagination(page: int, page_size: int, total_count: int) -> Dict[str, int]:
    """
    Build the pagination metadata block of a search response.

    Args:
        page: The requested page
        page_size: The effective (clamped) page size
        total_count: Size of the filtered set before paging

    Returns:
        Dictionary with page, page_size, total_count and total_pages
    """
    return {
        "page": page,
        "page_size": page_size,
        "total_count": total_count,
        "total_pages": compute_total_pages(total_count, page_size),
    }
