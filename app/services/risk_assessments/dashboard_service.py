import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, func

from app.db.database import database
from app.db.transaction.risk_assessments import risk_assessments_table
from app.schemas.risk_assessment_schema import RiskAssessmentSummaryResponse
from app.services.risk_assessments.alert_status import RiskAssessmentStatus
from app.utils.configures import get_risk_assessment_settings
from app.utils.date_utils import add_days, utc_today

logger = logging.getLogger(__name__)


async def get_dashboard_summary(
    today: Optional[date] = None,
    lookahead_days: Optional[int] = None,
) -> RiskAssessmentSummaryResponse:
    """
    Overdue and due-soon counts over approved assessments, plus the total of all assessments.
    Assessments under review only count towards the total.
    """
    today = today or utc_today()
    if lookahead_days is None:
        lookahead_days = (await get_risk_assessment_settings()).review_lookahead_days
    lookahead_date = add_days(today, lookahead_days)

    approved = risk_assessments_table.c.status == RiskAssessmentStatus.APPROVED.value
    next_review = risk_assessments_table.c.next_review_date

    overdue_count = await database.fetch_val(
        select(func.count()).select_from(risk_assessments_table).where(approved, next_review < today)
    )
    due_soon_count = await database.fetch_val(
        select(func.count()).select_from(risk_assessments_table).where(
            approved, next_review >= today, next_review <= lookahead_date
        )
    )
    total_count = await database.fetch_val(select(func.count()).select_from(risk_assessments_table))

    logger.info(
        f"Risk assessment summary: {overdue_count} overdue, {due_soon_count} due within {lookahead_days} days, "
        f"{total_count} total"
    )
    return RiskAssessmentSummaryResponse(
        overdue_count=overdue_count or 0,
        due_soon_count=due_soon_count or 0,
        total_count=total_count or 0,
    )
