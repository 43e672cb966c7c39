from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from .base import CamelModel


# Loosely-typed backend row, as decoded from JSON
RawRecord = Dict[str, Any]


class ApiResponse(BaseModel):
    data: Optional[Any] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _data_or_error(self):
        if self.error is not None and self.data is not None:
            raise ValueError("ApiResponse carries either data or error, not both")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


class LoginRequest(BaseModel):
    identifier: str  # email or secure id
    password: str


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str
    school: Optional[str] = None
    phone: Optional[str] = None
    gcash_number: Optional[str] = None


class BroadcastRequest(CamelModel):
    project_id: str
    message: Optional[str] = None


class AssignmentResponseRequest(CamelModel):
    project_id: str
    response: Literal["accepted", "declined"]
    assignment_id: Optional[str] = None
