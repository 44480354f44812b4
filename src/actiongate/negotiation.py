"""Content negotiation -- exact-match media type to output format lookup."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from actiongate.models import NegotiatedType, RequestContext

# Keys are matched verbatim; add a media type here to make it negotiable.
DEFAULT_MIME_MAP: Mapping[str, str] = MappingProxyType(
    {
        "application/xml": "xml",
        "text/xml": "xml",
        "application/json": "json",
        "text/json": "json",
        "text/html": "html",
        "text/plain": "json",
        "text/javascript": "js",
    }
)


class ContentNegotiator:
    """Infers a preferred output format from the request headers."""

    def __init__(self, mime_map: Mapping[str, str] | None = None) -> None:
        self._mime_map = MappingProxyType(
            dict(mime_map) if mime_map is not None else dict(DEFAULT_MIME_MAP)
        )

    @property
    def mime_map(self) -> Mapping[str, str]:
        return self._mime_map

    def detect_and_set_mime_type(self, ctx: RequestContext) -> NegotiatedType | None:
        """Return the negotiated type, or None when nothing usable was sent.

        Accept wins over Content-Type.  No wildcard or quality-value parsing:
        a multi-value Accept header simply fails to match.
        """
        accept = ctx.accept
        content_type = ctx.content_type
        if accept is None and content_type is None:
            return None

        mime_type = accept if accept is not None else content_type
        output_format = self._mime_map.get(mime_type)
        if output_format is None:
            return None

        return NegotiatedType(mime_type=mime_type, output_format=output_format.upper())
