"""
Imports every model module so that Base.metadata knows about all tables
(used by Alembic autogenerate and create_db_and_tables).
"""
from wewinbid.modules.companies.db.schema import Company  # noqa: F401
from wewinbid.modules.auth.db.schema import User  # noqa: F401
from wewinbid.modules.team.db.schema import TeamInvitation  # noqa: F401
from wewinbid.modules.tenders.db.schema import Tender, TenderHistory, TenderComment, TenderFavorite  # noqa: F401
from wewinbid.modules.documents.db.schema import Document  # noqa: F401
from wewinbid.modules.search.db.schema import SavedSearch, SearchHistory  # noqa: F401
from wewinbid.modules.alerts.db.schema import SearchAlert  # noqa: F401
from wewinbid.modules.notifications.db.schema import Notification, NotificationPreference, NotificationSent  # noqa: F401
from wewinbid.modules.calendar.db.schema import CalendarEvent, EventReminder  # noqa: F401
from wewinbid.modules.approvals.db.schema import (  # noqa: F401
    ApprovalWorkflow, ApprovalWorkflowStep, ApprovalStepApprover,
    ApprovalRequest, ApprovalDecision, ApprovalComment, ApprovalAuditLog,
)
from wewinbid.modules.signatures.db.schema import SignatureRequest, SignatureSigner, SignatureAuditLog  # noqa: F401
from wewinbid.modules.snippets.db.schema import Snippet, SnippetCategory  # noqa: F401
