from sqlalchemy import Table, Column, Integer, String, DateTime, Text, Index, func
from app.db.metadata import metadata
from app.db.database import master_schema

risk_assessment_categories_table = Table(
    "risk_assessment_categories",
    metadata,
    Column("category_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("description", String(500)),
    Column("created_by", String(256), nullable=False),
    Column("created_date", DateTime(timezone=True), nullable=False),
    Column("modified_by", String(256)),
    Column("modified_date", DateTime(timezone=True)),
    schema=master_schema
)

# Case-insensitive uniqueness is enforced by the database, not only by the service pre-check
Index(
    "ux_risk_assessment_categories_name_lower",
    func.lower(risk_assessment_categories_table.c.name),
    unique=True,
)
