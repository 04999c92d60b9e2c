# file: reunitems/core/errors.py
"""
Error taxonomy shared by repositories, the membership workflow and the API.

Every class carries the HTTP status the API answers with; main.py turns them
into JSON responses.
"""

from typing import List, Optional


class ReunitemsError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class InputError(ReunitemsError):
    """A required field is missing or malformed. Nothing was written."""

    status_code = 400
    code = "invalid_input"


class AuthenticationError(ReunitemsError):
    status_code = 401
    code = "not_authenticated"


class PermissionDeniedError(ReunitemsError):
    status_code = 403
    code = "forbidden"


class NotFoundError(ReunitemsError):
    status_code = 404
    code = "not_found"


class ConflictError(ReunitemsError):
    status_code = 409
    code = "conflict"


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"


class StoreError(ReunitemsError):
    """The document store call failed. The operation was not applied."""

    status_code = 503
    code = "store_unavailable"


class StoreTimeoutError(StoreError):
    status_code = 504
    code = "store_timeout"


class PartialUpdateError(ReunitemsError):
    """
    A multi-document write stopped midway.

    Earlier steps are NOT rolled back; `completed` lists what was persisted and
    `failed` names the step to re-run.
    """

    status_code = 502
    code = "partial_update"

    def __init__(self, message: str, completed: List[str], failed: str, resource_id: Optional[str] = None):
        super().__init__(message)
        self.completed = list(completed)
        self.failed = failed
        self.resource_id = resource_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "completed": self.completed,
            "failed": self.failed,
            "resource_id": self.resource_id,
        })
        return data
