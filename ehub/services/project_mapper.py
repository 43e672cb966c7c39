"""
Project row normalization.

Backend project rows drift between snake_case, camelCase and a few legacy
names (title, due_date). Every field is resolved from its candidate keys in
priority order and coerced to the client type. Nothing here raises: malformed
values fall back to a safe default (0, [], today's date) and a warning is
logged so bad upstream data stays visible.
"""
import json
import math
import re
from datetime import date, datetime
from typing import Any, List, Optional, Type

import pytz
import structlog
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..schemas.api import RawRecord
from ..schemas.projects import (
    PRIORITIES,
    PROJECT_STATUSES,
    FabricatorBudget,
    Project,
    ProjectAssignment,
    ProjectAttachment,
)

logger = structlog.get_logger(__name__)

# Leading numeric prefix, same leniency as a browser parseFloat ("12.5kg" -> 12.5)
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _first(raw: RawRecord, *keys: str) -> Any:
    """First truthy value among the candidate keys, else None."""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def _text(raw: RawRecord, *keys: str, default: str = "") -> str:
    value = _first(raw, *keys)
    return str(value) if value is not None else default


def _today(today: Optional[date] = None) -> date:
    if today is not None:
        return today
    return datetime.now(pytz.timezone(settings.tz_default)).date()


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a backend date value.

    Accepts date/datetime objects, ISO 8601 strings (with or without time and
    offset) and epoch milliseconds. Aware datetimes are reduced to their UTC
    calendar date.

    Returns:
        The date, or None when the value cannot be interpreted
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=pytz.UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(pytz.UTC)
    return dt.date()


def normalize_date(value: Any, field: str = "date", today: Optional[date] = None) -> str:
    """YYYY-MM-DD for the value; absent or unparsable values become today."""
    if not value:
        return _today(today).isoformat()
    parsed = parse_date(value)
    if parsed is None:
        logger.warning("project_field_defaulted", field=field, value=str(value), default="today")
        return _today(today).isoformat()
    return parsed.isoformat()


def to_number_or_zero(value: Any, field: str = "number") -> float:
    """Finite float from a number or numeric string, else 0."""
    number = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = None
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if match:
            try:
                number = float(match.group(0))
            except OverflowError:
                number = None

    if number is None or not math.isfinite(number):
        if value not in (None, ""):
            logger.warning("project_field_defaulted", field=field, value=str(value), default=0)
        return 0.0
    return number


def safe_parse_json_list(value: str, field: str = "list") -> List[Any]:
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.warning("project_field_defaulted", field=field, value=value, default=[])
        return []
    if not isinstance(parsed, list):
        logger.warning("project_field_defaulted", field=field, value=value, default=[])
        return []
    return parsed


def _id_list(raw: RawRecord, snake_key: str, camel_key: str) -> Optional[List[str]]:
    """
    Id list from a JSON array, a JSON-encoded string, or the camelCase key.

    Returns None when neither key carries a list. Ids are stringified and
    de-duplicated keeping the first occurrence.
    """
    value = raw.get(snake_key)
    if isinstance(value, list):
        items = value
    elif isinstance(value, str):
        items = safe_parse_json_list(value, snake_key)
    elif isinstance(raw.get(camel_key), list):
        items = raw[camel_key]
    else:
        return None

    ids: List[str] = []
    for item in items:
        if item is None or isinstance(item, (dict, list)):
            continue
        item_id = str(item)
        if item_id not in ids:
            ids.append(item_id)
    return ids


def _model_list(raw: RawRecord, model: Type[BaseModel], *keys: str) -> Optional[list]:
    """Validate each element of the first list found; invalid elements are dropped."""
    value = None
    for key in keys:
        if isinstance(raw.get(key), list):
            value = raw[key]
            break
    if value is None:
        return None

    items = []
    for item in value:
        try:
            items.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "project_item_dropped",
                field=keys[0],
                model=model.__name__,
                errors=e.error_count(),
            )
    return items


def map_project_from_backend(raw: RawRecord, today: Optional[date] = None) -> Project:
    """
    Build a Project from a backend row.

    Args:
        raw: Backend row (snake_case, camelCase or legacy keys)
        today: Date used for missing or malformed dates (defaults to now in TZ_DEFAULT)
    """
    raw = raw if isinstance(raw, dict) else {}
    today = _today(today)

    status = _text(raw, "status", default="planning")
    if status not in PROJECT_STATUSES:
        logger.warning("project_status_unknown", status=status, project_id=raw.get("id"))
    priority = _text(raw, "priority", default="medium")
    if priority not in PRIORITIES:
        logger.warning("project_priority_unknown", priority=priority, project_id=raw.get("id"))

    progress = to_number_or_zero(raw.get("progress"), "progress")
    progress = min(max(progress, 0.0), 100.0)

    documentation_url = _first(raw, "documentation_url", "documentationUrl")

    return Project(
        id=str(raw["id"]) if raw.get("id") is not None else None,
        name=_text(raw, "name", "title"),
        description=_text(raw, "description"),
        status=status,
        priority=priority,
        start_date=normalize_date(_first(raw, "start_date", "startDate"), "start_date", today),
        end_date=normalize_date(_first(raw, "end_date", "due_date", "endDate"), "end_date", today),
        progress=progress,
        supervisor_id=_text(raw, "supervisor_id", "supervisorId"),
        fabricator_ids=_id_list(raw, "fabricator_ids", "fabricatorIds") or [],
        budget=to_number_or_zero(raw.get("budget"), "budget"),
        spent=to_number_or_zero(raw.get("spent"), "spent"),
        revenue=to_number_or_zero(raw.get("revenue"), "revenue"),
        client_name=_text(raw, "client_name", "clientName"),
        documentation_url=str(documentation_url) if documentation_url else None,
        attachments=_model_list(raw, ProjectAttachment, "attachments"),
        fabricator_budgets=_model_list(raw, FabricatorBudget, "fabricator_budgets", "fabricatorBudgets"),
        created_by=_text(raw, "created_by", "createdBy"),
        created_at=normalize_date(_first(raw, "created_at", "createdAt"), "created_at", today),
        pending_assignments=_model_list(raw, ProjectAssignment, "pending_assignments", "pendingAssignments"),
        pending_supervisors=_id_list(raw, "pending_supervisors", "pendingSupervisors"),
    )


def map_projects_from_backend(rows: Any, today: Optional[date] = None) -> List[Project]:
    """Map a list of backend rows; anything that is not a list maps to []."""
    if not isinstance(rows, list):
        return []
    today = _today(today)
    return [map_project_from_backend(row, today) for row in rows]
