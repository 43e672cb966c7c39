class EhubError(Exception):
    """Base error for caller mistakes in the client layer."""


class UnknownRoleError(EhubError, ValueError):
    def __init__(self, role: str):
        super().__init__(f"No secure id prefix for role: {role}")
        self.role = role


class AssignmentClosedError(EhubError):
    def __init__(self, assignment_id: str, status: str):
        super().__init__(f"Assignment {assignment_id} is already {status}")
        self.assignment_id = assignment_id
        self.status = status
