import asyncio
from datetime import date

import pytest
from sqlalchemy import select

from app.db.database import database
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table
from app.db.transaction.risk_assessments import risk_assessments_table
from app.exceptions import NotFoundException, ValidationException
from app.schemas.risk_assessment_schema import ApproveRiskAssessmentRequest
from app.services.risk_assessments.approval_service import approve_risk_assessment
from app.services.risk_assessments.review_lifecycle_service import start_review
from app.tests.helpers import TODAY, insert_assessment, insert_member, set_config_value


async def fetch_assessment(risk_assessment_id):
    return await database.fetch_one(
        select(risk_assessments_table).where(risk_assessments_table.c.risk_assessment_id == risk_assessment_id)
    )


async def approval_rows(risk_assessment_id):
    return await database.fetch_all(
        select(risk_assessment_approvals_table).where(
            risk_assessment_approvals_table.c.risk_assessment_id == risk_assessment_id
        )
    )


@pytest.fixture
async def under_review_id(category_id):
    return await insert_assessment(
        category_id,
        status="Under Review",
        review_interval=2,
        next_review_date=date(2024, 3, 1),
    )


@pytest.mark.anyio
async def test_quorum_reached_on_second_approval(under_review_id, deacons):
    alice, bob, _ = deacons

    first = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice]), "Alice", today=TODAY
    )
    assert first.approvals_received == 1
    assert first.minimum_approvals_required == 2
    assert first.assessment_approved is False
    assert first.next_review_date is None
    assert (await fetch_assessment(under_review_id))["status"] == "Under Review"

    second = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[bob]), "Bob", today=TODAY
    )
    assert second.approvals_received == 2
    assert second.assessment_approved is True
    assert second.next_review_date == date(2026, 1, 1)

    row = await fetch_assessment(under_review_id)
    assert row["status"] == "Approved"
    assert row["last_review_date"] == TODAY
    assert row["next_review_date"] == date(2026, 1, 1)
    assert row["modified_by"] == "Bob"


@pytest.mark.anyio
async def test_several_approvers_in_one_call_share_date_and_notes(under_review_id, deacons):
    result = await approve_risk_assessment(
        under_review_id,
        ApproveRiskAssessmentRequest(approver_member_ids=deacons, notes="Reviewed at deacons' meeting"),
        "Secretary",
        today=TODAY,
    )

    assert result.approvals_received == 3
    assert result.assessment_approved is True

    rows = await approval_rows(under_review_id)
    assert sorted(r["approved_by_member_id"] for r in rows) == sorted(deacons)
    assert {r["approved_date"] for r in rows} == {rows[0]["approved_date"]}
    assert {r["notes"] for r in rows} == {"Reviewed at deacons' meeting"}


@pytest.mark.anyio
async def test_unknown_approver_records_nothing(under_review_id, deacons):
    with pytest.raises(ValidationException) as exc_info:
        await approve_risk_assessment(
            under_review_id,
            ApproveRiskAssessmentRequest(approver_member_ids=[deacons[0], 9001, 9002]),
            "Secretary",
            today=TODAY,
        )

    assert "9001" in exc_info.value.message
    assert "9002" in exc_info.value.message
    assert exc_info.value.errors == ["approver_member_ids: 9001", "approver_member_ids: 9002"]
    assert await approval_rows(under_review_id) == []
    assert (await fetch_assessment(under_review_id))["row_version"] == 1


@pytest.mark.anyio
async def test_empty_approver_list_is_rejected(under_review_id):
    with pytest.raises(ValidationException):
        await approve_risk_assessment(
            under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[]), "Secretary", today=TODAY
        )


@pytest.mark.anyio
async def test_unknown_assessment_is_not_found(deacons):
    with pytest.raises(NotFoundException):
        await approve_risk_assessment(
            5555, ApproveRiskAssessmentRequest(approver_member_ids=[deacons[0]]), "Secretary", today=TODAY
        )


@pytest.mark.anyio
async def test_duplicate_approver_counts_twice(under_review_id, deacons):
    # Approvers are not de-duplicated: the same member listed twice reaches a quorum of two
    alice = deacons[0]
    result = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice, alice]), "Alice", today=TODAY
    )

    assert result.approvals_received == 2
    assert result.assessment_approved is True


@pytest.mark.anyio
async def test_repeat_approval_by_same_member_across_calls_counts(under_review_id, deacons):
    alice = deacons[0]
    await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice]), "Alice", today=TODAY
    )
    result = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice]), "Alice", today=TODAY
    )

    assert result.approvals_received == 2
    assert result.assessment_approved is True


@pytest.mark.anyio
async def test_minimum_approvals_read_from_configuration_table(under_review_id, deacons):
    await set_config_value("minimum_approvals_required", "3")

    result = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=deacons[:2]), "Secretary", today=TODAY
    )

    assert result.minimum_approvals_required == 3
    assert result.assessment_approved is False


@pytest.mark.anyio
async def test_start_review_then_approval_begins_fresh_cycle(under_review_id, deacons):
    alice, bob, carol = deacons
    await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice, bob]), "Secretary", today=TODAY
    )
    await start_review(under_review_id, "Secretary", today=TODAY)

    row = await fetch_assessment(under_review_id)
    assert row["status"] == "Under Review"
    assert row["next_review_date"] == date(2026, 1, 1)

    result = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[carol]), "Carol", today=TODAY
    )
    assert result.approvals_received == 1
    assert result.assessment_approved is False


@pytest.mark.anyio
async def test_concurrent_approvals_are_serialized(under_review_id, deacons):
    alice, bob, _ = deacons

    results = await asyncio.gather(
        approve_risk_assessment(
            under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[alice]), "Alice", today=TODAY
        ),
        approve_risk_assessment(
            under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[bob]), "Bob", today=TODAY
        ),
    )

    assert sorted(r.approvals_received for r in results) == [1, 2]
    assert [r.assessment_approved for r in results].count(True) == 1
    assert len(await approval_rows(under_review_id)) == 2
    assert (await fetch_assessment(under_review_id))["status"] == "Approved"


@pytest.mark.anyio
async def test_cancellation_before_commit_leaves_no_approvals(mocker, under_review_id, deacons):
    mocker.patch(
        "app.services.risk_assessments.approval_service.count_approvals",
        side_effect=asyncio.CancelledError(),
    )

    with pytest.raises(asyncio.CancelledError):
        await approve_risk_assessment(
            under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=deacons), "Secretary", today=TODAY
        )

    assert await approval_rows(under_review_id) == []
    row = await fetch_assessment(under_review_id)
    assert row["status"] == "Under Review"
    assert row["row_version"] == 1


@pytest.mark.anyio
async def test_inactive_member_can_still_approve(under_review_id):
    retired = await insert_member("Old", "Deacon", is_active=False)

    result = await approve_risk_assessment(
        under_review_id, ApproveRiskAssessmentRequest(approver_member_ids=[retired]), "Secretary", today=TODAY
    )

    assert result.approval_recorded is True
    assert result.approvals_received == 1
