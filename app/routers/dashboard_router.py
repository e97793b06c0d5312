from fastapi import APIRouter, status

from app.services.risk_assessments.dashboard_service import get_dashboard_summary
from app.utils.messages import messages
from app.utils.responses import api_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard APIs"])


@router.get("/risk-assessment-summary")
async def risk_assessment_summary():
    return api_response(status.HTTP_200_OK, messages["summary_fetched"], await get_dashboard_summary())
