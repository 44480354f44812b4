"""Request-level error hierarchy -- every error renders through an output."""

from __future__ import annotations

from typing import Any

# Fixed error raised when a partner backend declines without explaining why
ERROR_INVALID_ACTION_REQUEST_NAME = "ERROR_INVALID_ACTION_REQUEST"
ERROR_INVALID_ACTION_REQUEST_MSG = "Invalid action request"
ERROR_INVALID_ACTION_REQUEST_NO = 400


class ApiError(Exception):
    """Structured error with a name, message and numeric (HTTP) code."""

    default_name = "ERROR_API"
    default_message = "API error"
    default_code = 400

    def __init__(
        self,
        name: str | None = None,
        message: str | None = None,
        code: int | None = None,
        *,
        at: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.name = name or self.default_name
        self.message = message or self.default_message
        self.code = code if code is not None else self.default_code
        self.at = at
        self.headers = dict(headers or {})
        super().__init__(self.message)

    @property
    def status(self) -> int:
        """HTTP status the error renders with."""
        return self.code

    def to_error_array(self) -> dict[str, Any]:
        """Return the mapping handed to renderers."""
        return {
            "errors": [
                {
                    "name": self.name,
                    "message": self.message,
                    "at": self.at,
                }
            ]
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.message!r}, {self.code!r})"


class ResolutionError(ApiError):
    """Raised when a name cannot be resolved to an action or output."""


class ActionResolutionError(ResolutionError):
    """Unknown or disallowed action; renders like a declined authorization."""

    default_name = ERROR_INVALID_ACTION_REQUEST_NAME
    default_message = ERROR_INVALID_ACTION_REQUEST_MSG
    default_code = ERROR_INVALID_ACTION_REQUEST_NO


class OutputResolutionError(ResolutionError):
    default_name = "ERROR_INVALID_OUTPUT_FORMAT"
    default_message = "The requested output format is not supported"
    default_code = 400


class AuthorizationError(ApiError):
    default_name = "ERROR_UNAUTHORIZED"
    default_message = "Unauthorized"
    default_code = 401

    @classmethod
    def invalid_action_request(cls) -> AuthorizationError:
        """The generic error for a backend that declined without raising."""
        return cls(
            ERROR_INVALID_ACTION_REQUEST_NAME,
            ERROR_INVALID_ACTION_REQUEST_MSG,
            ERROR_INVALID_ACTION_REQUEST_NO,
        )


class MissingArgumentError(ApiError):
    default_name = "ERROR_MISSING_REQUEST_ARG"
    default_message = "A required parameter is missing"
    default_code = 400

    def __init__(self, param: str) -> None:
        super().__init__(message=f"Missing required parameter: {param}", at=param)


class MethodNotAllowedError(ApiError):
    default_name = "ERROR_METHOD_NOT_ALLOWED"
    default_message = "This action does not support the requested method"
    default_code = 405


class RenderingError(ApiError):
    default_name = "ERROR_RENDERING"
    default_message = "The response could not be rendered"
    default_code = 500


class InternalError(ApiError):
    default_name = "ERROR_INTERNAL"
    default_message = "An unexpected error occurred"
    default_code = 500
