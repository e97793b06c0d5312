import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, func

from app.db.database import database
from app.db.master.risk_assessment_categories import risk_assessment_categories_table
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table
from app.db.transaction.risk_assessments import risk_assessments_table
from app.exceptions import NotFoundException
from app.schemas.risk_assessment_schema import (
    RiskAssessmentApprovalResponse,
    RiskAssessmentDetailResponse,
    RiskAssessmentResponse,
)
from app.services.risk_assessments.alert_status import (
    RiskAssessmentStatus,
    calculate_alert_status,
    is_overdue,
)
from app.utils.configures import get_risk_assessment_settings
from app.utils.date_utils import utc_today
from app.utils.member_utils import fetch_members_by_ids

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER_NAME = "Unknown Member"
LIKE_ESCAPE = "/"

_approval_counts = (
    select(
        risk_assessment_approvals_table.c.risk_assessment_id,
        func.count(risk_assessment_approvals_table.c.approval_id).label("approval_count"),
    )
    .group_by(risk_assessment_approvals_table.c.risk_assessment_id)
    .subquery()
)


def _assessment_select():
    j = risk_assessments_table.join(
        risk_assessment_categories_table,
        risk_assessments_table.c.category_id == risk_assessment_categories_table.c.category_id,
    ).outerjoin(
        _approval_counts,
        risk_assessments_table.c.risk_assessment_id == _approval_counts.c.risk_assessment_id,
    )
    return select(
        risk_assessments_table,
        risk_assessment_categories_table.c.name.label("category_name"),
        risk_assessment_categories_table.c.description.label("category_description"),
        func.coalesce(_approval_counts.c.approval_count, 0).label("approval_count"),
    ).select_from(j)


def _escape_like(text: str) -> str:
    for char in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(char, LIKE_ESCAPE + char)
    return text


async def fetch_assessment_row(risk_assessment_id: int):
    """Assessment row joined with its category and current approval count, or None."""
    query = _assessment_select().where(risk_assessments_table.c.risk_assessment_id == risk_assessment_id)
    return await database.fetch_one(query)


async def fetch_approval_rows(risk_assessment_id: int):
    query = (
        select(risk_assessment_approvals_table)
        .where(risk_assessment_approvals_table.c.risk_assessment_id == risk_assessment_id)
        .order_by(
            risk_assessment_approvals_table.c.approved_date.asc(),
            risk_assessment_approvals_table.c.approval_id.asc(),
        )
    )
    return await database.fetch_all(query)


async def count_approvals(risk_assessment_id: int) -> int:
    query = select(func.count(risk_assessment_approvals_table.c.approval_id)).where(
        risk_assessment_approvals_table.c.risk_assessment_id == risk_assessment_id
    )
    return await database.fetch_val(query) or 0


def to_assessment_response(row, minimum_approvals_required: int, today: date) -> RiskAssessmentResponse:
    return RiskAssessmentResponse(
        risk_assessment_id=row["risk_assessment_id"],
        category_id=row["category_id"],
        category_name=row["category_name"],
        category_description=row["category_description"],
        title=row["title"],
        description=row["description"],
        scope=row["scope"],
        notes=row["notes"],
        review_interval=row["review_interval"],
        last_review_date=row["last_review_date"],
        next_review_date=row["next_review_date"],
        status=row["status"],
        approval_count=row["approval_count"],
        minimum_approvals_required=minimum_approvals_required,
        is_overdue=is_overdue(row["status"], row["next_review_date"], today),
        alert_status=calculate_alert_status(row["status"], row["next_review_date"], today).value,
        created_by=row["created_by"],
        created_date=row["created_date"],
        modified_by=row["modified_by"],
        modified_date=row["modified_date"],
    )


async def to_approval_responses(approval_rows, unknown_label: str) -> list[RiskAssessmentApprovalResponse]:
    names = await fetch_members_by_ids(row["approved_by_member_id"] for row in approval_rows)
    return [
        RiskAssessmentApprovalResponse(
            approval_id=row["approval_id"],
            risk_assessment_id=row["risk_assessment_id"],
            approved_by_member_id=row["approved_by_member_id"],
            approved_by_member_name=names.get(row["approved_by_member_id"], unknown_label),
            approved_date=row["approved_date"],
            notes=row["notes"],
        )
        for row in approval_rows
    ]


async def get_risk_assessment_by_id(risk_assessment_id: int, today: Optional[date] = None) -> RiskAssessmentDetailResponse:
    today = today or utc_today()
    row = await fetch_assessment_row(risk_assessment_id)
    if not row:
        raise NotFoundException("Risk Assessment", risk_assessment_id)

    settings = await get_risk_assessment_settings()
    summary = to_assessment_response(row, settings.minimum_approvals_required, today)
    approvals = await to_approval_responses(await fetch_approval_rows(risk_assessment_id), UNKNOWN_MEMBER_NAME)

    return RiskAssessmentDetailResponse(**summary.model_dump(), approvals=approvals)


async def get_risk_assessments(
    category_id: Optional[int] = None,
    status: Optional[str] = None,
    overdue_only: Optional[bool] = None,
    title_contains: Optional[str] = None,
    today: Optional[date] = None,
) -> list[RiskAssessmentResponse]:
    today = today or utc_today()
    query = _assessment_select()

    if category_id is not None:
        query = query.where(risk_assessments_table.c.category_id == category_id)

    if status:
        query = query.where(risk_assessments_table.c.status == status)

    if overdue_only:
        query = query.where(
            risk_assessments_table.c.status == RiskAssessmentStatus.APPROVED.value,
            risk_assessments_table.c.next_review_date < today,
        )

    if title_contains:
        # Wildcards live in the bound value; a literal % or _ in the search text is escaped
        pattern = f"%{_escape_like(title_contains.lower())}%"
        query = query.where(func.lower(risk_assessments_table.c.title).like(pattern, escape=LIKE_ESCAPE))

    query = query.order_by(
        risk_assessments_table.c.next_review_date.asc(),
        risk_assessments_table.c.risk_assessment_id.asc(),
    )
    rows = await database.fetch_all(query)
    logger.info(f"Query returned {len(rows)} risk assessments")

    settings = await get_risk_assessment_settings()
    return [to_assessment_response(row, settings.minimum_approvals_required, today) for row in rows]
