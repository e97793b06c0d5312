import databases
import sqlalchemy
from app.db.metadata import metadata
from app.config import config

# Detect if using SQLite (no schema support)
IS_SQLITE = "sqlite" in config.DATABASE_URL


master_schema = "church_register_master" if not IS_SQLITE else None
transaction_schema = "church_register_transaction" if not IS_SQLITE else None
configuration_schema = "church_register_configuration" if not IS_SQLITE else None


def master_schema_fk(ref: str) -> str:
    return f"{master_schema + '.' if master_schema else ''}{ref}"

def transaction_schema_fk(ref: str) -> str:
    return f"{transaction_schema + '.' if transaction_schema else ''}{ref}"


# Create engine
connect_args = {"check_same_thread": False} if IS_SQLITE else {}
engine = sqlalchemy.create_engine(config.DATABASE_URL, connect_args=connect_args)

# Set up the database object
database = databases.Database(
    config.DATABASE_URL, force_rollback=config.DB_FORCE_ROLL_BACK
)
