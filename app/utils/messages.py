# app/utils/messages.py

messages = {
    "assessments_fetched": "Risk assessments fetched successfully",
    "assessment_fetched": "Risk assessment fetched successfully",
    "assessment_created": "Risk assessment created successfully",
    "assessment_updated": "Risk assessment updated successfully",
    "review_started": "Review started successfully",
    "approval_recorded": "Approval recorded successfully",
    "assessment_approved": "Risk assessment approved",
    "history_fetched": "Risk assessment history fetched successfully",
    "summary_fetched": "Risk assessment summary fetched successfully",
    "categories_fetched": "Risk assessment categories fetched successfully",
    "category_fetched": "Risk assessment category fetched successfully",
    "category_created": "Risk assessment category created successfully",
    "category_updated": "Risk assessment category updated successfully",
    "category_deleted": "Risk assessment category deleted successfully",
    "invalid_review_interval": "Review interval must be 1, 2, 3, or 5 years.",
    "approvers_required": "At least one approver must be selected.",
    "concurrent_update": "The risk assessment was modified by another request. Please retry.",
    "internal_error": "Internal server error",
}
