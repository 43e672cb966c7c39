"""
Notification service for assignment and project-update emails.
Builds the HTML message and keeps it in a process-local list; there is no
SMTP transport, so "sending" is construction plus append.
"""
import uuid
from datetime import datetime, timezone
from html import escape
from typing import Callable, Iterable, List, Optional

import structlog

from ..config import settings
from ..schemas.notifications import EmailNotification, ProjectUpdateType
from ..schemas.projects import Project, ProjectAssignment
from ..schemas.tasks import Task
from ..schemas.users import User

logger = structlog.get_logger(__name__)

UPDATE_TYPE_LABELS = {
    "status_change": "Status change",
    "progress_update": "Progress update",
    "completion": "Project completed",
}

_DETAILS_STYLE = "background: #f5f5f5; padding: 15px; border-radius: 8px; margin: 15px 0;"
_QUOTE_STYLE = "border-left: 4px solid #0066cc; padding-left: 15px; margin: 15px 0; font-style: italic;"


def _e(value) -> str:
    return escape("" if value is None else str(value))


def _display_date(value: Optional[str]) -> str:
    """YYYY-MM-DD (or ISO datetime) as MM/DD/YYYY; unknown formats shown as-is."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%m/%d/%Y")
    except ValueError:
        return value


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class EmailService:
    """Append-only, in-memory store of simulated email notifications."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        mail_from: Optional[str] = None,
    ):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.mail_from = mail_from or settings.mail_from
        self._notifications: List[EmailNotification] = []

    def _record(self, notification: EmailNotification) -> None:
        self._notifications.append(notification)
        logger.info(
            "email_recorded",
            to=notification.to,
            subject=notification.subject,
            type=notification.type,
        )

    def _new_id(self) -> str:
        return f"email-{uuid.uuid4().hex}"

    async def send_project_assignment(
        self,
        assignment: ProjectAssignment,
        project: Project,
        fabricator: User,
        supervisor: User,
    ) -> bool:
        """Notify a fabricator that a supervisor assigned them to a project."""
        message_html = ""
        if assignment.message:
            message_html = (
                "<p><strong>Message from supervisor:</strong></p>\n"
                f'<blockquote style="{_QUOTE_STYLE}">{_e(assignment.message)}</blockquote>\n'
            )
        content = (
            "<h2>New Project Assignment</h2>\n"
            f"<p>Hello {_e(fabricator.name)},</p>\n"
            f"<p>You have been assigned to a new project by {_e(supervisor.name)}:</p>\n"
            f'<div style="{_DETAILS_STYLE}">\n'
            f"<h3>{_e(project.name)}</h3>\n"
            f"<p><strong>Description:</strong> {_e(project.description)}</p>\n"
            f"<p><strong>Client:</strong> {_e(project.client_name)}</p>\n"
            f"<p><strong>Start Date:</strong> {_e(_display_date(project.start_date))}</p>\n"
            f"<p><strong>End Date:</strong> {_e(_display_date(project.end_date))}</p>\n"
            f"<p><strong>Priority:</strong> {_e(project.priority)}</p>\n"
            "</div>\n"
            f"{message_html}"
            f"<p>Please log into the {_e(settings.app_name)} system to accept or decline this assignment.</p>\n"
            f"<p>Best regards,<br/>\n{_e(supervisor.name)}<br/>\n{_e(settings.app_name)} Team</p>\n"
        )
        self._record(
            EmailNotification(
                id=self._new_id(),
                to=fabricator.email,
                sender=supervisor.email,
                subject=f"New Project Assignment: {project.name}",
                content=content,
                type="assignment",
                sent_at=self._clock(),
                project_id=project.id,
            )
        )
        return True

    async def send_task_assignment(
        self,
        task: Task,
        project: Project,
        assignee: User,
        assigner: User,
    ) -> bool:
        """Notify a user of a task assigned to them."""
        materials_html = ""
        if task.materials:
            materials_html = f"<p><strong>Materials:</strong> {_e(', '.join(task.materials))}</p>\n"
        estimated = _format_number(task.estimated_hours) if task.estimated_hours is not None else ""
        content = (
            "<h2>New Task Assignment</h2>\n"
            f"<p>Hello {_e(assignee.name)},</p>\n"
            f"<p>You have been assigned a new task by {_e(assigner.name)}:</p>\n"
            f'<div style="{_DETAILS_STYLE}">\n'
            f"<h3>{_e(task.title)}</h3>\n"
            f"<p><strong>Description:</strong> {_e(task.description)}</p>\n"
            f"<p><strong>Project:</strong> {_e(project.name)}</p>\n"
            f"<p><strong>Due Date:</strong> {_e(_display_date(task.due_date))}</p>\n"
            f"<p><strong>Priority:</strong> {_e(task.priority)}</p>\n"
            f"<p><strong>Estimated Hours:</strong> {_e(estimated)}</p>\n"
            f"{materials_html}"
            "</div>\n"
            f"<p>Please log into the {_e(settings.app_name)} system to view task details and update progress.</p>\n"
            f"<p>Best regards,<br/>\n{_e(assigner.name)}<br/>\n{_e(settings.app_name)} Team</p>\n"
        )
        self._record(
            EmailNotification(
                id=self._new_id(),
                to=assignee.email,
                sender=assigner.email,
                subject=f"New Task Assignment: {task.title}",
                content=content,
                type="task_assignment",
                sent_at=self._clock(),
                project_id=project.id,
                task_id=task.id,
            )
        )
        return True

    def project_update_recipients(self, project: Project, users: Iterable[User]) -> List[User]:
        """Supervisor, assigned fabricators and every admin; one entry per user id."""
        fabricator_ids = set(project.fabricator_ids)
        recipients: List[User] = []
        seen = set()
        for user in users:
            if user.id in seen:
                continue
            if user.id == project.supervisor_id or user.id in fabricator_ids or user.role == "admin":
                seen.add(user.id)
                recipients.append(user)
        return recipients

    async def send_project_update(
        self,
        project: Project,
        users: Iterable[User],
        update_type: ProjectUpdateType,
        updated_by: User,
    ) -> bool:
        """Fan a project update out to everyone involved in the project."""
        label = UPDATE_TYPE_LABELS.get(update_type, update_type)
        sent_at = self._clock()
        for recipient in self.project_update_recipients(project, users):
            content = (
                "<h2>Project Update</h2>\n"
                f"<p>Hello {_e(recipient.name)},</p>\n"
                f'<p>There has been an update to project "{_e(project.name)}" by {_e(updated_by.name)}:</p>\n'
                f'<div style="{_DETAILS_STYLE}">\n'
                f"<h3>{_e(project.name)}</h3>\n"
                f"<p><strong>Update:</strong> {_e(label)}</p>\n"
                f"<p><strong>Status:</strong> {_e(project.status)}</p>\n"
                f"<p><strong>Progress:</strong> {_e(_format_number(project.progress))}%</p>\n"
                f"<p><strong>Client:</strong> {_e(project.client_name)}</p>\n"
                f"<p><strong>Updated by:</strong> {_e(updated_by.name)}</p>\n"
                "</div>\n"
                f"<p>Log into the {_e(settings.app_name)} system to view full project details.</p>\n"
                f"<p>Best regards,<br/>\n{_e(settings.app_name)} Team</p>\n"
            )
            self._record(
                EmailNotification(
                    id=self._new_id(),
                    to=recipient.email,
                    sender=self.mail_from,
                    subject=f"Project Update: {project.name}",
                    content=content,
                    type="project_update",
                    sent_at=sent_at,
                    project_id=project.id,
                )
            )
        return True

    async def send_general(
        self,
        to: str,
        subject: str,
        content: str,
        sender: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> bool:
        """Record a free-form notification; content is trusted HTML."""
        self._record(
            EmailNotification(
                id=self._new_id(),
                to=to,
                sender=sender or self.mail_from,
                subject=subject,
                content=content,
                type="general",
                sent_at=self._clock(),
                project_id=project_id,
            )
        )
        return True

    def get_notifications_for_user(self, email: str) -> List[EmailNotification]:
        """Notifications addressed to email, newest first."""
        matches = [n for n in self._notifications if n.to == email]
        return sorted(matches, key=lambda n: n.sent_at, reverse=True)

    def get_all_notifications(self) -> List[EmailNotification]:
        return sorted(self._notifications, key=lambda n: n.sent_at, reverse=True)

    def clear_notifications(self) -> None:
        self._notifications = []
