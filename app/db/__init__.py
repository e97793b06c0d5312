# master tables
from app.db.metadata import metadata
from app.db.master.risk_assessment_categories import risk_assessment_categories_table

# transaction tables
from app.db.transaction.church_members import church_members_table
from app.db.transaction.risk_assessments import risk_assessments_table
from app.db.transaction.risk_assessment_approvals import risk_assessment_approvals_table

# configuration tables
from app.db.configuration.configurations import configurations
