from sqlalchemy import Table, Column, Integer, String, Boolean
from app.db.metadata import metadata
from app.db.database import transaction_schema

# Owned by the members module; read-only from here
church_members_table = Table(
    "church_members",
    metadata,
    Column("member_id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("email", String),
    Column("is_active", Boolean, default=True),
    schema=transaction_schema,
)
