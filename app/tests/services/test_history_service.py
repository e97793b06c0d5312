from datetime import date, datetime

import pytest

from app.exceptions import NotFoundException
from app.services.risk_assessments.history_service import get_assessment_history
from app.tests.helpers import insert_approval, insert_assessment, insert_member


@pytest.mark.anyio
async def test_history_is_empty_without_approvals(category_id):
    ra_id = await insert_assessment(category_id, title="Boiler Room", status="Under Review")

    history = await get_assessment_history(ra_id)

    assert history.risk_assessment_id == ra_id
    assert history.title == "Boiler Room"
    assert history.category_name == "Fire Safety"
    assert history.review_cycles == []


@pytest.mark.anyio
async def test_history_has_single_current_cycle_ordered_by_date(category_id):
    ra_id = await insert_assessment(category_id, last_review_date=date(2023, 12, 20))
    alice = await insert_member("Alice", "Smith")
    bob = await insert_member("Bob", "Jones")
    await insert_approval(ra_id, bob, approved_date=datetime(2023, 12, 20, 10, 0), notes="second")
    await insert_approval(ra_id, alice, approved_date=datetime(2023, 12, 18, 9, 30), notes="first")

    history = await get_assessment_history(ra_id)

    assert len(history.review_cycles) == 1
    cycle = history.review_cycles[0]
    assert cycle.review_date == date(2023, 12, 20)
    assert [a.approved_by_member_name for a in cycle.approvals] == ["Alice Smith", "Bob Jones"]
    assert [a.notes for a in cycle.approvals] == ["first", "second"]


@pytest.mark.anyio
async def test_history_marks_unresolvable_approver_as_unknown(category_id):
    ra_id = await insert_assessment(category_id)
    await insert_approval(ra_id, member_id=31337)

    history = await get_assessment_history(ra_id)

    assert history.review_cycles[0].approvals[0].approved_by_member_name == "Unknown"
    assert history.review_cycles[0].review_date is None


@pytest.mark.anyio
async def test_history_unknown_assessment_is_not_found():
    with pytest.raises(NotFoundException):
        await get_assessment_history(8080)
