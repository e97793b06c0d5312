import logging
from functools import wraps
from app.db.database import database

logger = logging.getLogger(__name__)


def with_transaction(func):
    """Run the wrapped coroutine as one database transaction; any error or cancellation rolls it back."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            async with database.transaction():
                return await func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"Transaction rolled back in {func.__name__}: {e}")
            raise
    return wrapper
