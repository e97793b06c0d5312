import logging
from datetime import date
from typing import Optional

from app.db.database import database
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table
from app.exceptions import NotFoundException, ValidationException
from app.schemas.risk_assessment_schema import ApproveRiskAssessmentRequest, ApproveRiskAssessmentResponse
from app.services.risk_assessments.assessment_query_service import count_approvals, fetch_assessment_row
from app.services.risk_assessments.review_lifecycle_service import claim_assessment, promote_if_quorum_met
from app.utils.configures import get_risk_assessment_settings
from app.utils.date_utils import utc_now, utc_today
from app.utils.db_transaction import with_transaction
from app.utils.locks import assessment_lock
from app.utils.member_utils import fetch_members_by_ids
from app.utils.messages import messages

logger = logging.getLogger(__name__)


async def approve_risk_assessment(
    risk_assessment_id: int,
    payload: ApproveRiskAssessmentRequest,
    actor: str,
    today: Optional[date] = None,
) -> ApproveRiskAssessmentResponse:
    """
    Record one approval per approver for the current review cycle and approve the
    assessment once the cycle reaches the configured quorum.

    Approver ids are validated up front; if any is unknown nothing is recorded.
    The same approver may be listed more than once and every entry counts.
    """
    async with assessment_lock(risk_assessment_id):
        return await _approve_risk_assessment(risk_assessment_id, payload, actor, today or utc_today())


@with_transaction
async def _approve_risk_assessment(risk_assessment_id, payload, actor, today):
    logger.info(f"Start to approve risk assessment {risk_assessment_id} for members {payload.approver_member_ids}")

    row = await fetch_assessment_row(risk_assessment_id)
    if not row:
        raise NotFoundException("Risk Assessment", risk_assessment_id)

    if not payload.approver_member_ids:
        raise ValidationException(messages["approvers_required"], errors=["approver_member_ids: empty"])

    known_members = await fetch_members_by_ids(payload.approver_member_ids)
    invalid_ids = [member_id for member_id in payload.approver_member_ids if member_id not in known_members]
    if invalid_ids:
        raise ValidationException(
            f"The following church member IDs are not valid: {', '.join(str(i) for i in invalid_ids)}",
            errors=[f"approver_member_ids: {member_id}" for member_id in invalid_ids],
        )

    # Claim the assessment before counting so two instances cannot both see quorum - 1
    row_version = await claim_assessment(risk_assessment_id, row["row_version"], actor)

    approved_date = utc_now()
    await database.execute_many(
        risk_assessment_approvals_table.insert(),
        [
            {
                "risk_assessment_id": risk_assessment_id,
                "approved_by_member_id": member_id,
                "approved_date": approved_date,
                "notes": payload.notes,
            }
            for member_id in payload.approver_member_ids
        ],
    )

    settings = await get_risk_assessment_settings()
    approvals_received = await count_approvals(risk_assessment_id)
    next_review_date = await promote_if_quorum_met(
        risk_assessment_id,
        row["review_interval"],
        row_version,
        approvals_received,
        settings.minimum_approvals_required,
        actor,
        today,
    )

    if next_review_date:
        logger.info(
            f"Risk assessment {risk_assessment_id} approved with {approvals_received} approvals, "
            f"next review: {next_review_date}"
        )
    else:
        logger.info(
            f"Approval recorded for risk assessment {risk_assessment_id}, "
            f"{approvals_received} of {settings.minimum_approvals_required} approvals received"
        )

    return ApproveRiskAssessmentResponse(
        approval_recorded=True,
        approvals_received=approvals_received,
        minimum_approvals_required=settings.minimum_approvals_required,
        assessment_approved=next_review_date is not None,
        next_review_date=next_review_date,
    )
