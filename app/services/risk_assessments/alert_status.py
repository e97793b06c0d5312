"""
Derived review urgency for a risk assessment.

Alert colours are computed on every read and never stored:

* an assessment under review is always ``amber``;
* an approved assessment past its next review date is ``red``;
* an approved assessment due within ``ALERT_WINDOW_DAYS`` is ``amber``;
* anything else is ``green``.
"""
from datetime import date
from enum import Enum

from app.utils.date_utils import days_between

ALERT_WINDOW_DAYS = 30


class RiskAssessmentStatus(str, Enum):
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"


class AlertStatus(str, Enum):
    RED = "red"
    AMBER = "amber"
    GREEN = "green"


def calculate_alert_status(status: str, next_review_date: date, today: date) -> AlertStatus:
    if status != RiskAssessmentStatus.APPROVED.value:
        return AlertStatus.AMBER

    days_until_due = days_between(today, next_review_date)
    if days_until_due < 0:
        return AlertStatus.RED
    if days_until_due <= ALERT_WINDOW_DAYS:
        return AlertStatus.AMBER
    return AlertStatus.GREEN


def is_overdue(status: str, next_review_date: date, today: date) -> bool:
    # An assessment under review is never overdue, even though its alert is amber
    return status == RiskAssessmentStatus.APPROVED.value and next_review_date < today
