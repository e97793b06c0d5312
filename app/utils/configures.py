import logging
from dataclasses import dataclass

from app.config import config
from app.db.database import database
from app.db.configuration.configurations import configurations as configurations_table

logger = logging.getLogger(__name__)

MINIMUM_APPROVALS_KEY = "minimum_approvals_required"
REVIEW_LOOKAHEAD_KEY = "review_lookahead_days"


@dataclass(frozen=True)
class RiskAssessmentSettings:
    minimum_approvals_required: int
    review_lookahead_days: int


async def get_config_value(key: str, default=None, value_type=int):
    """
    Fetch a configuration value from the database.
    Converts it to `value_type` if possible, otherwise returns default.
    """
    query = configurations_table.select().where(
        configurations_table.c.config_key == key,
        configurations_table.c.is_active == True
    )
    result = await database.fetch_one(query)
    if result:
        try:
            return value_type(result["config_value"])
        except (ValueError, TypeError):
            logger.warning(f"Configuration '{key}' has an invalid value, using default {default}")
            return default
    return default


async def get_risk_assessment_settings() -> RiskAssessmentSettings:
    minimum = await get_config_value(MINIMUM_APPROVALS_KEY, default=config.MINIMUM_APPROVALS_REQUIRED)
    lookahead = await get_config_value(REVIEW_LOOKAHEAD_KEY, default=config.REVIEW_LOOKAHEAD_DAYS)
    return RiskAssessmentSettings(
        minimum_approvals_required=minimum,
        review_lookahead_days=lookahead,
    )
