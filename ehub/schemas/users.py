from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel


UserRole = Literal["admin", "supervisor", "fabricator", "client"]
USER_ROLES = ("admin", "supervisor", "fabricator", "client")


class User(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    school: Optional[str] = None
    # Issued once by the backend, never reassigned on the client
    secure_id: Optional[str] = Field(default=None, frozen=True)
    employee_number: Optional[str] = None  # clients have none
    phone: Optional[str] = None
    gcash_number: Optional[str] = None
    password: Optional[str] = None
    client_project_id: Optional[str] = None  # client users only
