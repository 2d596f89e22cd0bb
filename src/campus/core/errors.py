"""Rule violations raised by the campus services."""

from __future__ import annotations


class CampusRuleViolation(Exception):
    """Raised when business constraints are violated."""

    default_status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code or self.default_status_code


class NotFound(CampusRuleViolation):
    """A referenced entity does not exist."""

    default_status_code = 404


class Conflict(CampusRuleViolation):
    """A uniqueness rule would be broken."""

    default_status_code = 409


class CapacityExceeded(CampusRuleViolation):
    """The course has no seat left."""

    default_status_code = 409


class Forbidden(CampusRuleViolation):
    """The caller lacks the role or ownership for the action."""

    default_status_code = 403


class ValidationFailed(CampusRuleViolation):
    """A field constraint was violated."""

    default_status_code = 422
