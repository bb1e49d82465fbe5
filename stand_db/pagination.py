"""
Pagination window arithmetic and result containers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import ValidationError


@dataclass(frozen=True)
class PaginationInfo:
    total: int
    per_page: int
    current_page: int
    last_page: int
    offset: int
    from_: int
    to: int
    has_more_pages: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "from": self.from_,
            "to": self.to,
            "has_more_pages": self.has_more_pages,
        }


@dataclass
class Page:
    data: List[Dict[str, Any]]
    pagination: PaginationInfo

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "pagination": self.pagination.to_dict()}


def clamp_page(page: int) -> int:
    return max(1, int(page))


def page_offset(page: int, per_page: int) -> int:
    """Offset of the first row on `page` (pages start at 1)."""
    return (clamp_page(page) - 1) * per_page


def paginate_window(page: int, per_page: int, total: int) -> PaginationInfo:
    """
    Compute the pagination summary for a page of `per_page` rows out of
    `total`.

    `from` / `to` are 1-based row positions, both 0 when the page lies
    past the last row.
    """
    if per_page < 1:
        raise ValidationError(f"per_page must be at least 1, got {per_page}")

    page = clamp_page(page)
    offset = page_offset(page, per_page)
    last_page = math.ceil(total / per_page)
    on_page = offset < total

    return PaginationInfo(
        total=total,
        per_page=per_page,
        current_page=page,
        last_page=last_page,
        offset=offset,
        from_=offset + 1 if on_page else 0,
        to=min(offset + per_page, total) if on_page else 0,
        has_more_pages=page < last_page,
    )


__all__ = [
    "PaginationInfo",
    "Page",
    "clamp_page",
    "page_offset",
    "paginate_window",
]
