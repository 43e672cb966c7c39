from typing import List, Literal, Optional

from .base import CamelModel


TaskStatus = Literal["pending", "in-progress", "completed", "blocked"]
MaterialStatus = Literal["ordered", "delivered", "in-use", "depleted"]


class Task(CamelModel):
    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = "pending"
    priority: str = "medium"
    assigned_to: Optional[str] = None
    due_date: Optional[str] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    materials: Optional[List[str]] = None
    created_by: str
    created_at: str
    updated_at: str


class WorkLogEntry(CamelModel):
    id: str
    project_id: str
    fabricator_id: str
    date: str
    hours_worked: float
    description: str
    progress_percentage: float  # share of the project this session covers
    materials: Optional[List[str]] = None
    photos: Optional[List[str]] = None  # photo urls
    created_at: str


class Material(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    quantity: float
    unit: str
    cost: float
    supplier: Optional[str] = None
    status: MaterialStatus = "ordered"
    project_id: Optional[str] = None
    added_by: str
    added_at: str
    category: Optional[str] = None
