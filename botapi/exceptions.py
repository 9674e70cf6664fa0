"""Exception hierarchy for the Bot API client.

::

    BotError
    ├── TransportError            network failure or undecodable body
    ├── APIException              the API answered ``ok: false``
    │   └── PermanentAPIError
    │       ├── UnauthorizedError 401, the token was revoked or is wrong
    │       └── ForbiddenError    403
    ├── ParamValidationError      a method parameter has a wrong value
    └── RequiredParamError        a required method parameter is missing
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from botapi.models import ResponseParameters


class BotError(Exception):
    """Base class of every error raised by the library."""


class TransportError(BotError):
    """The request did not produce a decodable API response.

    Raised for connection errors, timeouts and non-JSON bodies.  The original
    exception is chained as ``__cause__``.  Retrying is safe.
    """

    def __init__(self, method: str, reason: str) -> None:
        self.method = method
        self.reason = reason
        super().__init__(f"{method}: {reason}")


class APIException(BotError):
    """The Bot API rejected a request.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Raw response body as a dict, when available.
    """

    def __init__(self, status_code: int, response_body: Optional[Dict[str, Any]] = None) -> None:
        """Initialise with the HTTP status code and optional body."""
        self.status_code = status_code
        self.response_body = response_body or {}
        super().__init__(f"API error {self.error_code}: {self.description}")

    @property
    def description(self) -> str:
        return self.response_body.get("description", "Unknown error")

    @property
    def error_code(self) -> int:
        """``error_code`` from the body, falling back to the HTTP status."""
        code = self.response_body.get("error_code")
        return code if isinstance(code, int) else self.status_code

    @property
    def parameters(self) -> Optional[ResponseParameters]:
        """Decoded ``parameters`` of the body; ``None`` when absent or malformed."""
        raw = self.response_body.get("parameters")
        if not isinstance(raw, dict):
            return None
        try:
            return ResponseParameters.model_validate(raw)
        except ValidationError:
            return None

    @property
    def retry_after(self) -> Optional[int]:
        """Seconds to wait before repeating the request (flood control)."""
        parameters = self.parameters
        return parameters.retry_after if parameters is not None else None

    @property
    def migrate_to_chat_id(self) -> Optional[int]:
        """New id of a group that was upgraded to a supergroup."""
        parameters = self.parameters
        return parameters.migrate_to_chat_id if parameters is not None else None


class PermanentAPIError(APIException):
    """Rejection that repeating the same request will not fix."""


class UnauthorizedError(PermanentAPIError):
    """The bot token is invalid or has been revoked (401)."""

    def __init__(self, response_body: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(401, response_body or {"error_code": 401, "description": "Unauthorized"})


class ForbiddenError(PermanentAPIError):
    """The bot is not allowed to perform the request (403)."""

    def __init__(self, response_body: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(403, response_body or {"error_code": 403, "description": "Forbidden"})


class ParamValidationError(BotError, ValueError):
    """A method parameter has a value the API would reject."""

    def __init__(self, field: str, description: str) -> None:
        self.field = field
        self.description = description
        super().__init__(f"field {field} is invalid: {description}")


class RequiredParamError(BotError, ValueError):
    """None of the listed alternative parameters was filled."""

    def __init__(self, *fields: str) -> None:
        self.fields = list(fields)
        super().__init__(f"{' or '.join(self.fields)} required")
