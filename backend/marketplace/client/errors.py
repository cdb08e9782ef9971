"""
Client-side error taxonomy.

Every failure a view can see is one of these. `error_from_response` turns a
non-2xx response (or a 2xx body with ``success: false``) into the matching
class using the API's error envelope.
"""

from typing import Optional

import httpx


class ClientError(Exception):
    """Base class; `message` is safe to show to the user."""

    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class FieldValidationError(ClientError):
    """Rejected locally, before any request was sent."""

    def __init__(self, message: str, field_errors: dict[str, str]):
        super().__init__(message)
        self.field_errors = field_errors


class ServerValidationError(ClientError):
    """422 with per-field errors: [(param, msg), ...]."""

    status_code = 422

    def __init__(self, message: str, errors: list[tuple[str, str]]):
        super().__init__(message)
        self.errors = errors


class BusinessRuleError(ClientError):
    status_code = 400


class ConflictError(BusinessRuleError):
    """409: the server state moved on (e.g. event already reviewed)."""

    status_code = 409


class AuthenticationError(ClientError):
    status_code = 401


class PermissionDeniedError(ClientError):
    status_code = 403


class NotFoundError(ClientError):
    status_code = 404


class RateLimitedError(ClientError):
    status_code = 429


class TransportFailure(ClientError):
    """No response at all: DNS, refused connection, timeout."""


class UnexpectedError(ClientError):
    pass


_BY_STATUS = {
    400: BusinessRuleError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitedError,
}


def _json_or_none(response: httpx.Response) -> Optional[dict]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def error_from_response(response: httpx.Response) -> ClientError:
    body = _json_or_none(response) or {}
    message = body.get("message") or f"Request failed with status {response.status_code}"
    status_code = response.status_code

    if status_code == 422:
        errors = [
            (str(item.get("param", "")), str(item.get("msg", "")))
            for item in body.get("errors") or []
            if isinstance(item, dict)
        ]
        return ServerValidationError(message, errors)

    error_cls = _BY_STATUS.get(status_code)
    if error_cls is None:
        if status_code < 400:
            # 2xx with success: false
            return BusinessRuleError(message, status_code=status_code)
        return UnexpectedError(message, status_code=status_code)
    return error_cls(message)
