"""Error taxonomy shared by services, API handlers, and MCP tools."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import pydantic


class EstateHubError(Exception):
    """Base exception for estate-hub."""

    message = "Request failed"

    def to_payload(self) -> dict[str, object]:
        return {"message": str(self) or self.message}


@dataclass(slots=True, frozen=True)
class FieldError:
    """One offending input field."""

    field: str
    message: str


class ValidationError(EstateHubError):
    """Missing or malformed input; carries every offending field."""

    message = "Invalid request data"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        self.errors = list(errors)
        super().__init__(message or self.message)

    @classmethod
    def from_pydantic(
        cls, exc: pydantic.ValidationError, message: str | None = None
    ) -> ValidationError:
        field_errors = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            field_errors.append(
                FieldError(
                    field=".".join(location) or "__root__",
                    message=str(error.get("msg", "invalid value")),
                )
            )
        return cls(field_errors, message)

    def to_payload(self) -> dict[str, object]:
        return {
            "message": str(self),
            "errors": [asdict(error) for error in self.errors],
        }


class NotFoundError(EstateHubError):
    """Unknown id, or an id the caller does not own."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class AuthenticationRequired(EstateHubError):
    """The operation needs a caller identity that the request lacks."""

    message = "Authentication required"


class StorageFailure(EstateHubError):
    """The durable store could not complete the operation."""

    message = "Storage operation failed"


class BillingError(EstateHubError):
    """The billing provider rejected or failed a request."""

    message = "Billing provider request failed"
