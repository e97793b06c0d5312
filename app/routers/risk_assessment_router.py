from typing import Optional

from fastapi import APIRouter, Query, Request, status

from app.middleware.auth_middleware import get_actor
from app.schemas.risk_assessment_schema import (
    ApproveRiskAssessmentRequest,
    RiskAssessmentCreateRequest,
    RiskAssessmentUpdateRequest,
)
from app.services.risk_assessments.approval_service import approve_risk_assessment
from app.services.risk_assessments.assessment_query_service import (
    get_risk_assessment_by_id,
    get_risk_assessments,
)
from app.services.risk_assessments.history_service import get_assessment_history
from app.services.risk_assessments.review_lifecycle_service import (
    create_risk_assessment,
    start_review,
    update_risk_assessment,
)
from app.utils.messages import messages
from app.utils.responses import api_response

router = APIRouter(prefix="/risk-assessments", tags=["Risk Assessment APIs"])


@router.get("")
async def list_risk_assessments(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    assessment_status: Optional[str] = Query(None, alias="status"),
    overdue_only: Optional[bool] = Query(None, alias="overdueOnly"),
    title: Optional[str] = Query(None),
):
    result = await get_risk_assessments(
        category_id=category_id,
        status=assessment_status,
        overdue_only=overdue_only,
        title_contains=title,
    )
    return api_response(status.HTTP_200_OK, messages["assessments_fetched"], result)


@router.get("/{risk_assessment_id}")
async def get_risk_assessment(risk_assessment_id: int):
    result = await get_risk_assessment_by_id(risk_assessment_id)
    return api_response(status.HTTP_200_OK, messages["assessment_fetched"], result)


@router.post("")
async def create(payload: RiskAssessmentCreateRequest, request: Request):
    result = await create_risk_assessment(payload, get_actor(request))
    return api_response(status.HTTP_201_CREATED, messages["assessment_created"], result)


@router.put("/{risk_assessment_id}")
async def update(risk_assessment_id: int, payload: RiskAssessmentUpdateRequest, request: Request):
    result = await update_risk_assessment(risk_assessment_id, payload, get_actor(request))
    return api_response(status.HTTP_200_OK, messages["assessment_updated"], result)


@router.post("/{risk_assessment_id}/start-review")
async def start_review_cycle(risk_assessment_id: int, request: Request):
    result = await start_review(risk_assessment_id, get_actor(request))
    return api_response(status.HTTP_200_OK, messages["review_started"], result)


@router.post("/{risk_assessment_id}/approve")
async def approve(risk_assessment_id: int, payload: ApproveRiskAssessmentRequest, request: Request):
    result = await approve_risk_assessment(risk_assessment_id, payload, get_actor(request))
    message = messages["assessment_approved"] if result.assessment_approved else messages["approval_recorded"]
    return api_response(status.HTTP_200_OK, message, result)


@router.get("/{risk_assessment_id}/history")
async def get_history(risk_assessment_id: int):
    result = await get_assessment_history(risk_assessment_id)
    return api_response(status.HTTP_200_OK, messages["history_fetched"], result)
