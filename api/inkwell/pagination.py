from __future__ import annotations

import math
from typing import Any

from sqlalchemy.orm import Query

from . import schemas
from .deps import PageParams


def build_pagination(total: int, params: PageParams) -> schemas.Pagination:
    """
    Pagination block for list responses.

    totalPages is 0 for an empty result set so clients can tell
    "nothing here" from "one empty page".
    """
    return schemas.Pagination(
        total=total,
        page=params.page,
        total_pages=math.ceil(total / params.limit) if total else 0,
    )


def paginate(query: Query, params: PageParams) -> tuple[list[Any], schemas.Pagination]:
    """
    Apply page/limit to a query.

    The count runs on the unordered query; ordering is applied by the caller
    before passing the query in.

    Returns:
        Tuple of (items on the requested page, pagination block)
    """
    total = query.order_by(None).count()
    items = query.offset(params.offset).limit(params.limit).all()
    return items, build_pagination(total, params)
