import logging

from app.exceptions import NotFoundException
from app.schemas.risk_assessment_schema import ReviewCycleResponse, RiskAssessmentHistoryResponse
from app.services.risk_assessments.assessment_query_service import (
    fetch_approval_rows,
    fetch_assessment_row,
    to_approval_responses,
)

logger = logging.getLogger(__name__)

UNKNOWN_APPROVER_NAME = "Unknown"


async def get_assessment_history(risk_assessment_id: int) -> RiskAssessmentHistoryResponse:
    """
    Review cycles of an assessment with their approvals.

    Starting a review deletes the previous cycle's approvals, so at most the
    current cycle can be rebuilt: no cycle when it has no approvals yet.
    """
    row = await fetch_assessment_row(risk_assessment_id)
    if not row:
        raise NotFoundException("Risk Assessment", risk_assessment_id)

    review_cycles = []
    approval_rows = await fetch_approval_rows(risk_assessment_id)
    if approval_rows:
        review_cycles.append(
            ReviewCycleResponse(
                review_date=row["last_review_date"],
                approvals=await to_approval_responses(approval_rows, UNKNOWN_APPROVER_NAME),
            )
        )

    logger.info(f"Built history for risk assessment {risk_assessment_id} with {len(approval_rows)} approvals")
    return RiskAssessmentHistoryResponse(
        risk_assessment_id=row["risk_assessment_id"],
        title=row["title"],
        category_name=row["category_name"],
        review_cycles=review_cycles,
    )
