"""
Backend user rows use snake_case; the client model is camelCase on the wire.
"""
from typing import Any, List

from ..schemas.api import RawRecord
from ..schemas.users import User


# backend key -> User attribute
USER_FIELD_MAP = {
    "id": "id",
    "name": "name",
    "email": "email",
    "role": "role",
    "school": "school",
    "secure_id": "secure_id",
    "employee_number": "employee_number",
    "phone": "phone",
    "gcash_number": "gcash_number",
    "client_project_id": "client_project_id",
}


def map_user_from_backend(raw: RawRecord) -> User:
    """
    Rename backend user fields onto the User model.

    No coercion and no defaults: missing optional fields stay None. The model is
    built without validation so a partial row never raises.
    """
    raw = raw if isinstance(raw, dict) else {}
    values = {attr: raw.get(key) for key, attr in USER_FIELD_MAP.items()}
    return User.model_construct(**values)


def map_users_from_backend(rows: Any) -> List[User]:
    if not isinstance(rows, list):
        return []
    return [map_user_from_backend(row) for row in rows]
