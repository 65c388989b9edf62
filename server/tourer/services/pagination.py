"""Page-number pagination helper shared by list operations."""

from typing import Any, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.common import PageQuery, Pagination


async def paginate(
    db: AsyncSession,
    stmt: Select,
    conditions: Sequence[Any],
    query: PageQuery,
) -> Tuple[list, Pagination]:
    """
    Execute a filtered, ordered select for one page and count all matches.

    Args:
        db: Database session
        stmt: Select statement with options and ordering already applied
        conditions: Filter expressions applied to both the page and the count
        query: Page and limit requested by the caller

    Returns:
        Tuple of (items on the page, pagination metadata)
    """
    entity = stmt.column_descriptions[0]["entity"]
    count_stmt = select(func.count()).select_from(entity)
    if conditions:
        stmt = stmt.where(*conditions)
        count_stmt = count_stmt.where(*conditions)

    total = (await db.execute(count_stmt)).scalar_one()
    result = await db.execute(stmt.offset(query.offset).limit(query.limit))
    items = list(result.scalars().unique())

    return items, Pagination.build(query.page, query.limit, total)


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """
    Build a case-insensitive substring pattern for ``ilike``.

    ``%`` and ``_`` in the search text are matched literally; pass
    ``escape=LIKE_ESCAPE`` alongside the pattern.
    """
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
