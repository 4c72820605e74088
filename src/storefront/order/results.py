"""Result objects returned by order actions.

Actions never raise for expected failures (signed out, not the owner, wrong
status, bad input). They return an ``ActionResult`` carrying either data or
a user-facing error, and the HTTP layer maps ``kind`` onto a status code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FailureKind(Enum):
    UNAUTHORIZED = "unauthorized"  # not signed in
    FORBIDDEN = "forbidden"  # signed in, but not allowed (or record hidden)
    VALIDATION = "validation"
    NOT_FOUND = "not_found"  # admin lookups only
    CONFLICT = "conflict"  # wrong lifecycle status
    UNAVAILABLE = "unavailable"  # nothing orderable left in the request
    INFRASTRUCTURE = "infrastructure"


UNAUTHORIZED = "Unauthorized"
ORDER_NOT_FOUND = "Order not found"


@dataclass(frozen=True)
class ActionResult:
    success: bool
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    data: Any = None
    kind: FailureKind | None = None

    @classmethod
    def ok(cls, data=None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: FailureKind) -> "ActionResult":
        return cls(success=False, error=error, kind=kind)

    @classmethod
    def invalid(cls, field_errors: dict[str, str], error: str | None = None) -> "ActionResult":
        return cls(success=False, error=error, field_errors=dict(field_errors), kind=FailureKind.VALIDATION)

    @classmethod
    def unauthorized(cls) -> "ActionResult":
        return cls.fail(UNAUTHORIZED, FailureKind.FORBIDDEN)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"success": self.success}
        if self.error:
            payload["error"] = self.error
        if self.field_errors:
            payload["fieldErrors"] = dict(self.field_errors)
        if self.data is not None:
            payload["data"] = self.data
        return payload
