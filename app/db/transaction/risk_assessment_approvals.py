from sqlalchemy import Table, Column, Integer, DateTime, ForeignKey, Text
from app.db.metadata import metadata
from app.db.database import transaction_schema, transaction_schema_fk

risk_assessment_approvals_table = Table(
    "risk_assessment_approvals",
    metadata,
    Column("approval_id", Integer, primary_key=True, autoincrement=True),
    Column("risk_assessment_id", Integer, ForeignKey(transaction_schema_fk("risk_assessments.risk_assessment_id")), nullable=False, index=True),
    # Weak reference: the member is looked up for display only
    Column("approved_by_member_id", Integer, nullable=False),
    Column("approved_date", DateTime(timezone=True), nullable=False),
    Column("notes", Text),
    schema=transaction_schema,
)
