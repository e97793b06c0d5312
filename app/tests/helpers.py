from datetime import date, datetime, timezone

from app.db.database import database
from app.db.configuration.configurations import configurations as configurations_table
from app.db.master.risk_assessment_categories import risk_assessment_categories_table
from app.db.transaction.church_members import church_members_table
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table
from app.db.transaction.risk_assessments import risk_assessments_table

TODAY = date(2024, 1, 1)


# --- Data helpers ---
def utc_now_naive():
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def insert_category(name="Fire Safety", description=None):
    query = risk_assessment_categories_table.insert().values(
        name=name,
        description=description,
        created_by="test",
        created_date=utc_now_naive(),
    )
    return await database.execute(query)


async def insert_member(first_name="John", last_name="Deacon", is_active=True):
    query = church_members_table.insert().values(
        first_name=first_name,
        last_name=last_name,
        is_active=is_active,
    )
    return await database.execute(query)


async def insert_assessment(
    category_id: int,
    title="Kitchen Fire Risk",
    status="Approved",
    review_interval=1,
    next_review_date=TODAY,
    last_review_date=None,
):
    query = risk_assessments_table.insert().values(
        category_id=category_id,
        title=title,
        review_interval=review_interval,
        status=status,
        next_review_date=next_review_date,
        last_review_date=last_review_date,
        row_version=1,
        created_by="test",
        created_date=utc_now_naive(),
    )
    return await database.execute(query)


async def insert_approval(risk_assessment_id: int, member_id: int, approved_date=None, notes=None):
    query = risk_assessment_approvals_table.insert().values(
        risk_assessment_id=risk_assessment_id,
        approved_by_member_id=member_id,
        approved_date=approved_date or utc_now_naive(),
        notes=notes,
    )
    return await database.execute(query)


async def set_config_value(key: str, value: str, is_active=True):
    query = configurations_table.insert().values(config_key=key, config_value=value, is_active=is_active)
    return await database.execute(query)

