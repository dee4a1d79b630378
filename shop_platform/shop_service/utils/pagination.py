"""
Fixed-size windowing of list queries with first/last/prev/next links.
"""
import math
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Query

from ..config import settings


def page_count(total: int, per_page: int) -> int:
    """Number of pages for `total` rows; an empty listing still has page 1."""
    return max(1, math.ceil(total / per_page))


def page_links(request: Request, page: int, last_page: int) -> Dict[str, str]:
    prev_page = 1 if page <= 1 else page - 1
    next_page = page if page >= last_page else page + 1

    def url_for_page(number: int) -> str:
        return str(request.url.include_query_params(page=number))

    return {
        "first": url_for_page(1),
        "last": url_for_page(last_page),
        "prev": url_for_page(prev_page),
        "next": url_for_page(next_page),
    }


def paginate(query: Query, request: Request, page: int = 1, per_page: Optional[int] = None) -> Dict[str, Any]:
    """
    Slice a query into one page.

    Args:
        query: ordered SQLAlchemy query
        request: incoming request, used to build links that keep its filters
        page: 1-based page number
        per_page: page size, defaults to settings.PAGE_SIZE

    Returns:
        dict with `data` (rows of the page), `links` and `meta`
    """
    per_page = per_page or settings.PAGE_SIZE
    page = max(1, page)

    total = query.order_by(None).count()
    last_page = page_count(total, per_page)
    offset = (page - 1) * per_page

    rows = query.offset(offset).limit(per_page).all()

    return {
        "data": rows,
        "links": page_links(request, page, last_page),
        "meta": {"total": total, "page": page, "pages": last_page},
    }
