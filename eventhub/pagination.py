"""Shared list-endpoint pagination.

Query parameters come from fastapi-pagination's ``Params`` (``page`` is
1-indexed, ``size`` is bounded); the response block is EventHub's own
``Pagination`` envelope.
"""
from typing import Any

from fastapi import Query
from fastapi_pagination import Params
from fastapi_pagination.ext.sqlalchemy import paginate as paginate_query
from sqlalchemy.orm import Query as SAQuery

from eventhub.schemas.common import Pagination


class PageParams(Params):
    size: int = Query(10, ge=1, le=100, description="Page size")


class CommentPageParams(Params):
    size: int = Query(20, ge=1, le=100, description="Page size")


class RosterPageParams(Params):
    size: int = Query(50, ge=1, le=100, description="Page size")


def build_pagination(page: int, size: int, total: int, pages: int) -> Pagination:
    return Pagination(
        current_page=page,
        total_pages=pages,
        total_items=total,
        has_next=page * size < total,
        has_prev=page > 1,
    )


def paginate(query: SAQuery, params: Params) -> tuple[list[Any], Pagination]:
    """Page an ORM query and map the result onto the pagination block."""
    page = paginate_query(query.session, query, params=params)
    total = page.total or 0
    return list(page.items), build_pagination(page.page, page.size, total, page.pages or 0)


class AdminPageParams(Params):
    size: int = Query(20, ge=1, le=100, description="Page size")
