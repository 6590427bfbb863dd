from __future__ import annotations

from dataclasses import dataclass
from typing import Generator

from fastapi import Query
from sqlalchemy.orm import Session

from .db import get_session


def get_db() -> Generator[Session, None, None]:
    yield from get_session()


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)
