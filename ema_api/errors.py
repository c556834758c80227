"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these; ``ema_api.api.exceptions`` turns them into JSON
responses with a stable ``error`` kind, a human-readable ``message`` and,
for validation failures, the list of violated fields.
"""

from typing import Any


class DomainError(Exception):
    """Base class for expected, caller-facing failures."""

    kind: str = "internal_failure"
    status_code: int = 500

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFound(DomainError):
    """The entity, or an entity it references, does not exist."""

    kind = "not_found"
    status_code = 404


class Forbidden(DomainError):
    """An authorization rule rejected the actor."""

    kind = "forbidden"
    status_code = 403


class InvalidInput(DomainError):
    """Schema, range or enum violation in the caller's input."""

    kind = "invalid_input"
    status_code = 400


class Conflict(DomainError):
    """A uniqueness or availability constraint was violated."""

    kind = "conflict"
    status_code = 409


def violations_from_pydantic(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten pydantic ``errors()`` output into ``{field, message}`` entries."""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return details
