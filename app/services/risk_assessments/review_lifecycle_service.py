"""
Review lifecycle of a risk assessment.

An assessment is created ``Under Review`` and only becomes ``Approved`` once the
approvals recorded for the current cycle reach the configured quorum. Starting a
review discards the current approvals and puts the assessment back under review;
the next review date is left alone until quorum is met again.

Every mutating operation holds the per-assessment lock and runs in a single
transaction, so concurrent approvals and review restarts on the same assessment
are applied one after the other.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import select

from app.db.database import database
from app.db.master.risk_assessment_categories import risk_assessment_categories_table
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table
from app.db.transaction.risk_assessments import risk_assessments_table
from app.exceptions import ConflictException, NotFoundException, ValidationException
from app.schemas.risk_assessment_schema import (
    ALLOWED_REVIEW_INTERVALS,
    RiskAssessmentCreateRequest,
    RiskAssessmentResponse,
    RiskAssessmentUpdateRequest,
)
from app.services.risk_assessments.alert_status import RiskAssessmentStatus
from app.services.risk_assessments.assessment_query_service import (
    fetch_assessment_row,
    to_assessment_response,
)
from app.utils.configures import get_risk_assessment_settings
from app.utils.date_utils import add_years, utc_now, utc_today
from app.utils.db_transaction import with_transaction
from app.utils.locks import assessment_lock
from app.utils.messages import messages

logger = logging.getLogger(__name__)


def validate_review_interval(review_interval: int):
    if review_interval not in ALLOWED_REVIEW_INTERVALS:
        raise ValidationException(
            messages["invalid_review_interval"],
            errors=[f"review_interval: {review_interval} is not one of {list(ALLOWED_REVIEW_INTERVALS)}"],
        )


async def _to_response(risk_assessment_id: int, today: date) -> RiskAssessmentResponse:
    row = await fetch_assessment_row(risk_assessment_id)
    settings = await get_risk_assessment_settings()
    return to_assessment_response(row, settings.minimum_approvals_required, today)


async def claim_assessment(risk_assessment_id: int, row_version: int, actor: str, **values) -> int:
    """
    Update an assessment only if it still carries ``row_version``, bumping the version.

    Returns the new version. Raises ConflictException when another writer got there first,
    which rolls back the surrounding transaction.
    """
    update_query = (
        risk_assessments_table.update()
        .where(
            risk_assessments_table.c.risk_assessment_id == risk_assessment_id,
            risk_assessments_table.c.row_version == row_version,
        )
        .values(
            **values,
            row_version=row_version + 1,
            modified_by=actor,
            modified_date=utc_now(),
        )
        .returning(risk_assessments_table.c.risk_assessment_id)
    )
    if not await database.fetch_one(update_query):
        logger.warning(f"Concurrent modification detected on risk assessment {risk_assessment_id}")
        raise ConflictException(messages["concurrent_update"])
    return row_version + 1


async def _get_existing_row(risk_assessment_id: int):
    row = await fetch_assessment_row(risk_assessment_id)
    if not row:
        raise NotFoundException("Risk Assessment", risk_assessment_id)
    return row


# POST
@with_transaction
async def create_risk_assessment(
    payload: RiskAssessmentCreateRequest,
    actor: str,
    today: Optional[date] = None,
) -> RiskAssessmentResponse:
    today = today or utc_today()
    logger.info(f"Start to create risk assessment '{payload.title}' in category {payload.category_id}")

    category_query = select(risk_assessment_categories_table.c.category_id).where(
        risk_assessment_categories_table.c.category_id == payload.category_id
    )
    if not await database.fetch_one(category_query):
        raise NotFoundException("Risk Assessment Category", payload.category_id)

    validate_review_interval(payload.review_interval)

    insert_query = risk_assessments_table.insert().values(
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
        scope=payload.scope,
        notes=payload.notes,
        review_interval=payload.review_interval,
        status=RiskAssessmentStatus.UNDER_REVIEW.value,
        last_review_date=None,
        next_review_date=add_years(today, payload.review_interval),
        row_version=1,
        created_by=actor,
        created_date=utc_now(),
    )
    new_id = await database.execute(insert_query)

    logger.info(f"Created risk assessment {new_id} ({payload.title}) by {actor}")
    return await _to_response(new_id, today)


# PUT
async def update_risk_assessment(
    risk_assessment_id: int,
    payload: RiskAssessmentUpdateRequest,
    actor: str,
    today: Optional[date] = None,
) -> RiskAssessmentResponse:
    async with assessment_lock(risk_assessment_id):
        return await _update_risk_assessment(risk_assessment_id, payload, actor, today or utc_today())


@with_transaction
async def _update_risk_assessment(risk_assessment_id, payload, actor, today):
    row = await _get_existing_row(risk_assessment_id)
    validate_review_interval(payload.review_interval)

    # Status, review dates and approvals belong to the review cycle and are not edited here
    await claim_assessment(
        risk_assessment_id,
        row["row_version"],
        actor,
        title=payload.title,
        description=payload.description,
        scope=payload.scope,
        notes=payload.notes,
        review_interval=payload.review_interval,
    )

    logger.info(f"Updated risk assessment {risk_assessment_id} by {actor}")
    return await _to_response(risk_assessment_id, today)


async def start_review(
    risk_assessment_id: int,
    actor: str,
    today: Optional[date] = None,
) -> RiskAssessmentResponse:
    async with assessment_lock(risk_assessment_id):
        return await _start_review(risk_assessment_id, actor, today or utc_today())


@with_transaction
async def _start_review(risk_assessment_id, actor, today):
    row = await _get_existing_row(risk_assessment_id)

    # Claim the row first so an approval racing from another instance cannot slip in between
    await claim_assessment(
        risk_assessment_id,
        row["row_version"],
        actor,
        status=RiskAssessmentStatus.UNDER_REVIEW.value,
    )
    await database.execute(
        risk_assessment_approvals_table.delete().where(
            risk_assessment_approvals_table.c.risk_assessment_id == risk_assessment_id
        )
    )

    logger.info(f"Started review for risk assessment {risk_assessment_id}, cleared {row['approval_count']} approvals")
    return await _to_response(risk_assessment_id, today)


async def promote_if_quorum_met(
    risk_assessment_id: int,
    review_interval: int,
    row_version: int,
    approvals_received: int,
    minimum_approvals_required: int,
    actor: str,
    today: date,
) -> Optional[date]:
    """
    Approve the assessment when the current cycle has reached quorum.

    Must run inside the approving transaction, with ``row_version`` being the version
    that transaction claimed. Returns the new next review date, or None when quorum
    is not met yet.
    """
    if approvals_received < minimum_approvals_required:
        return None

    next_review_date = add_years(today, review_interval)
    await claim_assessment(
        risk_assessment_id,
        row_version,
        actor,
        status=RiskAssessmentStatus.APPROVED.value,
        last_review_date=today,
        next_review_date=next_review_date,
    )
    return next_review_date
