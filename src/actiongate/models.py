"""Request context, response envelope, and other per-request value types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from multidict import CIMultiDict, CIMultiDictProxy


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: str | None) -> HttpMethod | None:
        """Return the member for *value* (any case), or None if unmapped."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


@dataclass
class UploadedFile:
    """A file received in a multipart request."""

    name: str  # form field name
    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class RequestContext:
    """Immutable view of one inbound request.

    Built once by the host and handed to the negotiator, authorizer and
    dispatcher.  Header lookup is case-insensitive.
    """

    action: str
    method: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, UploadedFile] = field(default_factory=dict)
    format: str | None = None
    path: str = "/"

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CIMultiDictProxy):
            object.__setattr__(self, "headers", CIMultiDictProxy(CIMultiDict(self.headers)))

    @property
    def accept(self) -> str | None:
        return self.headers.get("Accept")

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def auth_digest(self) -> str | None:
        """The Digest credential from the Authorization header, without the scheme."""
        header = self.headers.get("Authorization")
        if not header:
            return None
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() != "digest" or not credentials.strip():
            return None
        return credentials.strip()


@dataclass
class Response:
    """Uniform envelope around an action result."""

    data: Any = None
    template: str | None = None  # view-name hint for template renderers
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def wrap(cls, result: Any) -> Response:
        """Normalize any action result into an envelope."""
        if isinstance(result, cls):
            return result
        return cls(data=result)


@dataclass(frozen=True)
class NegotiatedType:
    """Outcome of content negotiation."""

    mime_type: str
    output_format: str  # upper-cased format identifier

    def as_dict(self) -> dict[str, str]:
        return {"mimeType": self.mime_type, "outputFormat": self.output_format}
