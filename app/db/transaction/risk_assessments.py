from sqlalchemy import Table, Column, Integer, String, Date, DateTime, ForeignKey, Text
from app.db.metadata import metadata
from app.db.database import transaction_schema, master_schema_fk

risk_assessments_table = Table(
    "risk_assessments",
    metadata,
    Column("risk_assessment_id", Integer, primary_key=True, autoincrement=True),
    Column("category_id", Integer, ForeignKey(master_schema_fk("risk_assessment_categories.category_id")), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("scope", Text),
    Column("notes", Text),
    Column("review_interval", Integer, nullable=False),
    Column("last_review_date", Date, nullable=True),
    Column("next_review_date", Date, nullable=False),
    Column("status", String(20), nullable=False),
    Column("row_version", Integer, nullable=False, default=1),
    Column("created_by", String(256), nullable=False),
    Column("created_date", DateTime(timezone=True), nullable=False),
    Column("modified_by", String(256)),
    Column("modified_date", DateTime(timezone=True)),
    schema=transaction_schema,
)
