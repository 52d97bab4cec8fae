"""
Typed service errors.

Services raise these instead of returning sentinel values.  Each
class carries the HTTP status code it maps to, so the exception
handlers installed by ``main.create_app`` can translate any of them
into an ``{"error": <message>}`` response without inspecting the
message text.
"""


class ServiceError(Exception):
    """Base class for predictable service-layer failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed or missing input, or a violated invariant."""

    status_code = 400


class NotFoundError(ServiceError):
    """A referenced identifier does not exist."""

    status_code = 404

    @classmethod
    def for_entity(cls, entity_name: str, record_id: int) -> "NotFoundError":
        return cls(f"{entity_name} with id {record_id} not found")
