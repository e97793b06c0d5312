import logging
from typing import Iterable

from sqlalchemy import select

from app.db.database import database
from app.db.transaction.church_members import church_members_table

logger = logging.getLogger(__name__)


def format_member_name(first_name, last_name) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


async def fetch_members_by_ids(member_ids: Iterable[int]) -> dict[int, str]:
    """
    Resolve church member ids to display names.
    Ids with no matching member are simply absent from the result.
    """
    unique_ids = set(member_ids)
    if not unique_ids:
        return {}

    query = select(
        church_members_table.c.member_id,
        church_members_table.c.first_name,
        church_members_table.c.last_name,
    ).where(church_members_table.c.member_id.in_(unique_ids))
    rows = await database.fetch_all(query)
    logger.debug(f"Resolved {len(rows)} of {len(unique_ids)} church member ids")
    return {row["member_id"]: format_member_name(row["first_name"], row["last_name"]) for row in rows}

