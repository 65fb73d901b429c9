"""
Pagination helpers.

Pages are 1-based; row ranges are 0-based and inclusive at both ends.
"""
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from casino_crm.core.config import settings
from casino_crm.schemas.common import PageMeta

MAX_OFFSET = 2 ** 62


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @classmethod
    def from_params(
        cls, page: Any = None, limit: Any = None, max_limit: Optional[int] = None
    ) -> "PageRequest":
        """
        Build a page request from raw query values.

        Unparseable values fall back to the defaults, ``page`` is clamped to at
        least 1 (and capped so the offset fits a SQL integer) and ``limit`` to
        ``[1, max_limit]``.
        """
        max_limit = max_limit or settings.MAX_PAGE_LIMIT
        limit = _to_int(limit, settings.DEFAULT_PAGE_LIMIT)
        limit = min(max(limit, 1), max_limit)
        page = max(_to_int(page, 1), 1)
        # OFFSET is bound as a signed 64-bit integer
        page = min(page, MAX_OFFSET // limit + 1)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def row_range(self) -> Tuple[int, int]:
        start = self.offset
        return start, start + self.limit - 1

    def meta(self, total: int) -> PageMeta:
        return PageMeta(
            total=total,
            page=self.page,
            limit=self.limit,
            totalPages=total_pages(total, self.limit),
        )
