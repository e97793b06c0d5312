import logging
import sqlite3
from typing import Optional

from asyncpg.exceptions import UniqueViolationError
from sqlalchemy import select, func

from app.db.database import database
from app.db.master.risk_assessment_categories import risk_assessment_categories_table
from app.db.transaction.risk_assessments import risk_assessments_table
from app.exceptions import NotFoundException, ValidationException
from app.schemas.risk_assessment_category_schema import (
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
)
from app.utils.date_utils import utc_now
from app.utils.db_transaction import with_transaction

logger = logging.getLogger(__name__)


def _is_unique_violation(error: Exception) -> bool:
    if isinstance(error, UniqueViolationError):
        return True
    # sqlite reports every constraint as IntegrityError; only the unique index counts here
    return isinstance(error, sqlite3.IntegrityError) and str(error).startswith("UNIQUE constraint failed")


def _duplicate_name_error(name: str) -> ValidationException:
    return ValidationException(
        f"Category with name '{name}' already exists",
        errors=[f"name: {name}"],
    )


def _assessment_count_select():
    return (
        select(func.count(risk_assessments_table.c.risk_assessment_id))
        .where(risk_assessments_table.c.category_id == risk_assessment_categories_table.c.category_id)
        .scalar_subquery()
    )


def _to_category_response(row) -> CategoryResponse:
    return CategoryResponse(
        category_id=row["category_id"],
        name=row["name"],
        description=row["description"],
        assessment_count=row["assessment_count"] or 0,
        created_by=row["created_by"],
        created_date=row["created_date"],
        modified_by=row["modified_by"],
        modified_date=row["modified_date"],
    )


async def _fetch_category(category_id: int):
    query = select(
        risk_assessment_categories_table,
        _assessment_count_select().label("assessment_count"),
    ).where(risk_assessment_categories_table.c.category_id == category_id)
    return await database.fetch_one(query)


async def _name_taken(name: str, exclude_id: Optional[int] = None) -> bool:
    query = select(risk_assessment_categories_table.c.category_id).where(
        func.lower(risk_assessment_categories_table.c.name) == name.lower()
    )
    if exclude_id is not None:
        query = query.where(risk_assessment_categories_table.c.category_id != exclude_id)
    return await database.fetch_one(query) is not None


async def get_categories() -> list[CategoryResponse]:
    query = select(
        risk_assessment_categories_table,
        _assessment_count_select().label("assessment_count"),
    ).order_by(risk_assessment_categories_table.c.name.asc())
    rows = await database.fetch_all(query)
    logger.info(f"Fetched {len(rows)} risk assessment categories")
    return [_to_category_response(row) for row in rows]


async def get_category_by_id(category_id: int) -> CategoryResponse:
    row = await _fetch_category(category_id)
    if not row:
        raise NotFoundException("Risk Assessment Category", category_id)
    return _to_category_response(row)


@with_transaction
async def create_category(payload: CategoryCreateRequest, actor: str) -> CategoryResponse:
    if await _name_taken(payload.name):
        raise _duplicate_name_error(payload.name)

    try:
        new_id = await database.execute(
            risk_assessment_categories_table.insert().values(
                name=payload.name,
                description=payload.description,
                created_by=actor,
                created_date=utc_now(),
            )
        )
    except (sqlite3.IntegrityError, UniqueViolationError) as e:
        # A concurrent insert passed the pre-check; the unique index still refuses it
        if _is_unique_violation(e):
            raise _duplicate_name_error(payload.name) from e
        raise

    logger.info(f"Created risk assessment category {payload.name} by {actor}")
    return await get_category_by_id(new_id)


@with_transaction
async def update_category(category_id: int, payload: CategoryUpdateRequest, actor: str) -> CategoryResponse:
    if not await _fetch_category(category_id):
        raise NotFoundException("Risk Assessment Category", category_id)

    if await _name_taken(payload.name, exclude_id=category_id):
        raise _duplicate_name_error(payload.name)

    try:
        await database.execute(
            risk_assessment_categories_table.update()
            .where(risk_assessment_categories_table.c.category_id == category_id)
            .values(
                name=payload.name,
                description=payload.description,
                modified_by=actor,
                modified_date=utc_now(),
            )
        )
    except (sqlite3.IntegrityError, UniqueViolationError) as e:
        if _is_unique_violation(e):
            raise _duplicate_name_error(payload.name) from e
        raise

    logger.info(f"Updated risk assessment category {category_id} by {actor}")
    return await get_category_by_id(category_id)


@with_transaction
async def delete_category(category_id: int) -> None:
    row = await _fetch_category(category_id)
    if not row:
        raise NotFoundException("Risk Assessment Category", category_id)

    assessment_count = row["assessment_count"] or 0
    if assessment_count > 0:
        raise ValidationException(
            f"Cannot delete category '{row['name']}' because it has {assessment_count} associated "
            f"risk assessment(s). Please reassign or delete them first.",
            errors=[f"category_id: {category_id}"],
        )

    await database.execute(
        risk_assessment_categories_table.delete().where(
            risk_assessment_categories_table.c.category_id == category_id
        )
    )
    logger.info(f"Deleted risk assessment category {category_id} ({row['name']})")
