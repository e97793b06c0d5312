import asyncio
import weakref
from contextlib import asynccontextmanager

# One lock per risk assessment id, dropped once nobody holds or waits on it
_assessment_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _get_lock(risk_assessment_id: int) -> asyncio.Lock:
    lock = _assessment_locks.get(risk_assessment_id)
    if lock is None:
        lock = asyncio.Lock()
        _assessment_locks[risk_assessment_id] = lock
    return lock


@asynccontextmanager
async def assessment_lock(risk_assessment_id: int):
    """
    Serialize read-modify-write sequences (approve, start review, update) on one assessment
    within this process. Cross-process races are caught by the row_version check instead.
    """
    lock = _get_lock(risk_assessment_id)
    async with lock:
        yield
