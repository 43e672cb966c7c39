from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel


NotificationType = Literal["assignment", "project_update", "task_assignment", "general"]
ProjectUpdateType = Literal["status_change", "progress_update", "completion"]


class EmailNotification(CamelModel):
    id: str
    to: str
    sender: str = Field(alias="from")
    subject: str
    content: str  # HTML
    type: NotificationType
    sent_at: datetime
    project_id: Optional[str] = None
    task_id: Optional[str] = None
