from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from ..errors import AssignmentClosedError
from .base import CamelModel


# Numbered sign-off workflow. Kept apart from the generic lifecycle below;
# both are live on the wire and must round-trip verbatim.
WORKFLOW_STATUSES = (
    "0_Created",
    "1_Assigned_to_FAB",
    "2_Ready_for_Supervisor_Review",
    "3_Ready_for_Admin_Review",
    "4_Ready_for_Client_Signoff",
)
LIFECYCLE_STATUSES = (
    "planning",
    "in-progress",
    "review",
    "completed",
    "on-hold",
    "pending-assignment",
)
PROJECT_STATUSES = WORKFLOW_STATUSES + LIFECYCLE_STATUSES

PRIORITIES = ("low", "medium", "high", "urgent")

AssignmentStatus = Literal["pending", "accepted", "declined"]


class ProjectAttachment(CamelModel):
    id: str
    name: str
    size: int
    type: str
    uploaded_by: str
    uploaded_at: str
    url: str


class FabricatorBudget(CamelModel):
    fabricator_id: str
    allocated_amount: float
    spent_amount: float
    allocated_revenue: float
    description: str = ""


class ProjectAssignment(CamelModel):
    # Only respond() moves an assignment forward, by returning a new copy
    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    fabricator_id: str
    assigned_by: str  # supervisor id
    assigned_at: str
    status: AssignmentStatus = "pending"
    message: Optional[str] = None
    response: Optional[str] = None
    responded_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != "pending"

    def respond(
        self,
        status: Literal["accepted", "declined"],
        response: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> "ProjectAssignment":
        """Return the accepted/declined copy of a pending assignment."""
        if self.is_terminal:
            raise AssignmentClosedError(self.id, self.status)
        if status not in ("accepted", "declined"):
            raise ValueError(f"Invalid assignment response: {status}")
        responded_at = (at or datetime.now(timezone.utc)).isoformat()
        return self.model_copy(
            update={"status": status, "response": response, "responded_at": responded_at}
        )


class Project(CamelModel):
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    status: str = "planning"  # one of PROJECT_STATUSES
    priority: str = "medium"  # one of PRIORITIES
    start_date: str
    end_date: str
    progress: float = Field(default=0, ge=0, le=100)
    supervisor_id: str = ""
    fabricator_ids: List[str] = []
    budget: float = 0
    spent: float = 0
    revenue: float = 0
    client_name: str = ""
    documentation_url: Optional[str] = None  # Google Drive folder
    attachments: Optional[List[ProjectAttachment]] = None
    fabricator_budgets: Optional[List[FabricatorBudget]] = None
    created_by: str = ""
    created_at: str
    pending_assignments: Optional[List[ProjectAssignment]] = None
    pending_supervisors: Optional[List[str]] = None  # broadcast to supervisors


class CompanyRevenue(CamelModel):
    id: str
    year: int
    quarter: int
    total_revenue: float
    total_expenses: float
    net_profit: float
    projects_completed: int
