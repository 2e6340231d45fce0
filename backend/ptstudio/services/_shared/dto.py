# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ptstudio.core.ids import encode_cursor
from ptstudio.repositories.base import KeysetPage

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageIn:
    """
    Forward keyset pagination input.

    :param first: Page size (``None`` uses the configured default).
    :type first: int | None
    :param after: Opaque cursor of the last row already seen.
    :type after: str | None
    :param search_term: Case-insensitive substring filter on the name.
    :type search_term: str | None
    """

    first: int | None = None
    after: str | None = None
    search_term: str | None = None


@dataclass(frozen=True, slots=True)
class PageInfo:
    """
    Relay-style page metadata.

    ``has_previous_page`` is always ``False``: only forward paging exists.
    Cursors are ``None`` when the page is empty.
    """

    has_next_page: bool
    has_previous_page: bool = False
    start_cursor: str | None = None
    end_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class Edge(Generic[T]):
    cursor: str
    node: T


@dataclass(frozen=True, slots=True)
class Connection(Generic[T]):
    """Page of nodes with their cursors."""

    edges: list[Edge[T]] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=lambda: PageInfo(has_next_page=False))

    @property
    def nodes(self) -> list[T]:
        return [edge.node for edge in self.edges]


@dataclass(frozen=True, slots=True)
class SuccessOut:
    """Result of operations without a meaningful payload."""

    success: bool = True


def build_connection(page: KeysetPage[Any], mapper: Callable[[Any], T]) -> Connection[T]:
    """
    Turn a repository keyset page into a :class:`Connection`.

    :param page: Rows (ascending by id) plus the ``has_next`` flag.
    :param mapper: Pure row → output DTO conversion.
    :returns: Connection whose cursors encode each row's numeric id.
    """
    edges = [Edge(cursor=encode_cursor(row.id), node=mapper(row)) for row in page.items]
    return Connection(
        edges=edges,
        page_info=PageInfo(
            has_next_page=page.has_next,
            has_previous_page=False,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        ),
    )
