from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.tests.helpers import insert_assessment
from app.utils.date_utils import utc_today


@pytest.mark.anyio
async def test_risk_assessment_summary(async_client: AsyncClient, category_id):
    today = utc_today()
    await insert_assessment(category_id, title="Overdue", next_review_date=today - timedelta(days=5))
    await insert_assessment(category_id, title="Due soon", next_review_date=today + timedelta(days=10))
    await insert_assessment(category_id, title="Later", next_review_date=today + timedelta(days=45))
    await insert_assessment(category_id, title="In review", status="Under Review", next_review_date=today)

    response = await async_client.get("/dashboard/risk-assessment-summary")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Risk assessment summary fetched successfully"
    assert body["data"] == {"overdue_count": 1, "due_soon_count": 1, "total_count": 4}


@pytest.mark.anyio
async def test_summary_when_database_fails(mocker, async_client: AsyncClient):
    mocker.patch(
        "app.services.risk_assessments.dashboard_service.database.fetch_val",
        side_effect=Exception("boom"),
    )

    response = await async_client.get("/dashboard/risk-assessment-summary")

    assert response.status_code == 500
    assert response.json() == {
        "status_code": 500,
        "message": "Internal server error",
        "data": None,
        "errors": [],
    }


@pytest.mark.anyio
async def test_summary_requires_token(async_client: AsyncClient):
    del async_client.headers["Authorization"]

    response = await async_client.get("/dashboard/risk-assessment-summary")

    assert response.status_code == 401
