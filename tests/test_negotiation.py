"""Tests for actiongate.negotiation — exact-match content negotiation."""

from actiongate.models import NegotiatedType
from actiongate.negotiation import DEFAULT_MIME_MAP, ContentNegotiator
from conftest import make_ctx


class TestDetectAndSetMimeType:
    def test_no_headers_returns_none(self):
        assert ContentNegotiator().detect_and_set_mime_type(make_ctx()) is None

    def test_accept_json(self):
        ctx = make_ctx(headers={"Accept": "application/json"})
        result = ContentNegotiator().detect_and_set_mime_type(ctx)
        assert result == NegotiatedType(mime_type="application/json", output_format="JSON")
        assert result.as_dict() == {"mimeType": "application/json", "outputFormat": "JSON"}

    def test_content_type_used_without_accept(self):
        ctx = make_ctx(headers={"Content-Type": "text/html"})
        result = ContentNegotiator().detect_and_set_mime_type(ctx)
        assert result.as_dict() == {"mimeType": "text/html", "outputFormat": "HTML"}

    def test_accept_wins_over_content_type(self):
        ctx = make_ctx(headers={"Accept": "text/xml", "Content-Type": "application/json"})
        result = ContentNegotiator().detect_and_set_mime_type(ctx)
        assert result.mime_type == "text/xml"
        assert result.output_format == "XML"

    def test_unmapped_accept_does_not_fall_back_to_content_type(self):
        ctx = make_ctx(headers={"Accept": "image/png", "Content-Type": "application/json"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx) is None

    def test_multi_value_accept_fails(self):
        ctx = make_ctx(headers={"Accept": "application/json, text/html"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx) is None

    def test_wildcard_accept_fails(self):
        ctx = make_ctx(headers={"Accept": "*/*"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx) is None

    def test_quality_values_are_not_parsed(self):
        ctx = make_ctx(headers={"Accept": "application/json;q=0.9"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx) is None

    def test_media_type_match_is_case_sensitive(self):
        ctx = make_ctx(headers={"Accept": "Application/JSON"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx) is None

    def test_header_name_lookup_is_case_insensitive(self):
        ctx = make_ctx(headers={"accept": "text/javascript"})
        result = ContentNegotiator().detect_and_set_mime_type(ctx)
        assert result.output_format == "JS"

    def test_text_plain_maps_to_json(self):
        ctx = make_ctx(headers={"Accept": "text/plain"})
        assert ContentNegotiator().detect_and_set_mime_type(ctx).output_format == "JSON"

    def test_custom_map_replaces_default(self):
        negotiator = ContentNegotiator({"application/vnd.api+json": "json"})
        ctx = make_ctx(headers={"Accept": "application/vnd.api+json"})
        assert negotiator.detect_and_set_mime_type(ctx).output_format == "JSON"
        ctx = make_ctx(headers={"Accept": "application/json"})
        assert negotiator.detect_and_set_mime_type(ctx) is None

    def test_every_default_entry_negotiates(self):
        negotiator = ContentNegotiator()
        for mime_type, fmt in DEFAULT_MIME_MAP.items():
            result = negotiator.detect_and_set_mime_type(make_ctx(headers={"Accept": mime_type}))
            assert result == NegotiatedType(mime_type, fmt.upper())
