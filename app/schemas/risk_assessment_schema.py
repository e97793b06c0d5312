from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

ALLOWED_REVIEW_INTERVALS = (1, 2, 3, 5)


class RiskAssessmentBaseRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    review_interval: int
    description: Optional[str] = None
    scope: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value.strip()


class RiskAssessmentCreateRequest(RiskAssessmentBaseRequest):
    category_id: int


class RiskAssessmentUpdateRequest(RiskAssessmentBaseRequest):
    pass


class ApproveRiskAssessmentRequest(BaseModel):
    approver_member_ids: List[int]
    notes: Optional[str] = None


class RiskAssessmentApprovalResponse(BaseModel):
    approval_id: int
    risk_assessment_id: int
    approved_by_member_id: int
    approved_by_member_name: str
    approved_date: datetime
    notes: Optional[str] = None


class RiskAssessmentResponse(BaseModel):
    risk_assessment_id: int
    category_id: int
    category_name: str
    category_description: Optional[str] = None
    title: str
    description: Optional[str] = None
    scope: Optional[str] = None
    notes: Optional[str] = None
    review_interval: int
    last_review_date: Optional[date] = None
    next_review_date: date
    status: str
    approval_count: int
    minimum_approvals_required: int
    is_overdue: bool
    alert_status: str
    created_by: str
    created_date: datetime
    modified_by: Optional[str] = None
    modified_date: Optional[datetime] = None


class RiskAssessmentDetailResponse(RiskAssessmentResponse):
    approvals: List[RiskAssessmentApprovalResponse] = []


class ApproveRiskAssessmentResponse(BaseModel):
    approval_recorded: bool
    approvals_received: int
    minimum_approvals_required: int
    assessment_approved: bool
    next_review_date: Optional[date] = None


class ReviewCycleResponse(BaseModel):
    review_date: Optional[date] = None
    approvals: List[RiskAssessmentApprovalResponse]


class RiskAssessmentHistoryResponse(BaseModel):
    risk_assessment_id: int
    title: str
    category_name: str
    review_cycles: List[ReviewCycleResponse]


class RiskAssessmentSummaryResponse(BaseModel):
    overdue_count: int
    due_soon_count: int
    total_count: int
