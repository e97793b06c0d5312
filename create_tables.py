import sys

from sqlalchemy import text

from app.db.database import (
    IS_SQLITE,
    configuration_schema,
    engine,
    master_schema,
    transaction_schema,
)
from app.db.metadata import metadata

# Registers every table on the shared metadata
import app.db


def create_schemas():
    if IS_SQLITE:
        return
    with engine.begin() as conn:
        for schema in (master_schema, transaction_schema, configuration_schema):
            conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))


def create_all_tables(drop_first: bool = False):
    create_schemas()
    if drop_first:
        print("Dropping risk assessment tables...")
        metadata.drop_all(engine)
    print("Creating risk assessment tables...")
    metadata.create_all(engine)
    print(f"Created {len(metadata.tables)} tables.")


if __name__ == "__main__":
    create_all_tables(drop_first="--drop" in sys.argv[1:])
