"""
Form error state shared by the client flows.

A form has one error slot per field plus a general slot. Client-side checks
and server 422 responses fill the same field slots; everything that does not
belong to a known field lands in `general`.
"""

from typing import Iterable, Optional

from marketplace.client.errors import (
    ClientError,
    ServerValidationError,
    TransportFailure,
    UnexpectedError,
)
from marketplace.client.transport import NETWORK_ERROR_MESSAGE

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class FormErrors:
    def __init__(self, fields: Optional[dict[str, str]] = None, general: Optional[str] = None):
        self.fields: dict[str, str] = dict(fields or {})
        self.general = general

    def __bool__(self) -> bool:
        return bool(self.fields) or self.general is not None

    def __repr__(self) -> str:
        return f"FormErrors(fields={self.fields!r}, general={self.general!r})"

    def get(self, field: str) -> Optional[str]:
        return self.fields.get(field)

    def as_dict(self) -> dict[str, str]:
        data = dict(self.fields)
        if self.general is not None:
            data["general"] = self.general
        return data

    def apply_server_errors(
        self,
        errors: Iterable[tuple[str, str]],
        known_fields: Iterable[str],
        group_prefixes: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Map (param, msg) pairs onto field slots.

        `group_prefixes` folds nested params into one slot, e.g.
        {"tickets": "tickets"} sends "tickets.0.price" to the tickets slot.
        """
        known = set(known_fields)
        prefixes = group_prefixes or {}
        for param, msg in errors:
            target = next((slot for prefix, slot in prefixes.items() if param.startswith(prefix)), None)
            if target is None and param in known:
                target = param
            if target is None:
                self.general = msg
            else:
                self.fields[target] = msg


class FormRejected(ClientError):
    """A form submission failed; `errors` says where to show why."""

    def __init__(self, errors: FormErrors, message: Optional[str] = None):
        super().__init__(message or errors.general or "Please fix the errors in the form")
        self.errors = errors


def errors_from_failure(
    exc: ClientError,
    known_fields: Iterable[str],
    fallback: str = UNEXPECTED_ERROR_MESSAGE,
    group_prefixes: Optional[dict[str, str]] = None,
) -> FormErrors:
    """Generic mapping of a request failure onto a form."""
    form = FormErrors()
    if isinstance(exc, ServerValidationError):
        form.apply_server_errors(exc.errors, known_fields, group_prefixes)
        if not form:
            form.general = exc.message
    elif isinstance(exc, TransportFailure):
        form.general = NETWORK_ERROR_MESSAGE
    elif isinstance(exc, UnexpectedError):
        form.general = fallback
    else:
        form.general = exc.message or fallback
    return form
