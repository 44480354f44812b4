"""Output ABC -- the renderer contract the dispatcher drives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from actiongate.errors import ApiError
from actiongate.models import NegotiatedType, Response


class Output(ABC):
    """Serializes one response in one format.

    The dispatcher calls, in order: ``set_output_action``, ``populate_output``,
    ``send_headers``, ``execute_output``.  The first three return ``self``.
    """

    format_id: ClassVar[str]
    default_mime_type: ClassVar[str]
    #: Negotiated media types this renderer may echo back as Content-Type
    mime_types: ClassVar[frozenset[str]] = frozenset()

    def __init__(
        self,
        options: NegotiatedType | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self.options = options
        self.params = dict(params or {})
        self.action: str | None = None
        self.data: Any = None
        self.template: str | None = None
        self.status = 200
        self.headers: dict[str, str] = {}

    @property
    def mime_type(self) -> str:
        """Content type for the body: the negotiated one if it fits this format."""
        if self.options is not None and self.options.mime_type in self.mime_types:
            return self.options.mime_type
        return self.default_mime_type

    def set_output_action(self, action: str) -> Output:
        self.action = action
        return self

    def populate_output(self, data: Any, template: str | None = None) -> Output:
        self.data = data
        self.template = template
        return self

    def send_headers(self, response: Response | ApiError) -> Output:
        """Record status and headers from a success envelope or an error."""
        self.status = response.status
        self.headers.update(response.headers)
        self.headers["Content-Type"] = f"{self.mime_type}; charset=utf-8"
        return self

    @abstractmethod
    def execute_output(self) -> str:
        """Render the populated data."""
        ...
