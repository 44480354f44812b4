"""Tests for the bundled renderers — json, js, xml, html."""

from __future__ import annotations

import json
from xml.etree import ElementTree as ET

import pytest

from actiongate.errors import ApiError, RenderingError
from actiongate.models import NegotiatedType, Response
from actiongate.outputs.html_output import HTMLOutput, build_template_env
from actiongate.outputs.json_output import JSONOutput, JSOutput
from actiongate.outputs.xml_output import XMLOutput


def _render(output, data, action="echo", source=None, template=None):
    return (
        output.set_output_action(action)
        .populate_output(data, template)
        .send_headers(source or Response(data=data))
        .execute_output()
    )


class TestSendHeaders:
    def test_status_and_headers_from_envelope(self):
        output = JSONOutput()
        output.send_headers(Response(status=201, headers={"X-Test": "1"}))
        assert output.status == 201
        assert output.headers["X-Test"] == "1"
        assert output.headers["Content-Type"] == "application/json; charset=utf-8"

    def test_status_and_headers_from_error(self):
        output = JSONOutput()
        output.send_headers(ApiError("E", "m", 401, headers={"WWW-Authenticate": "Digest"}))
        assert output.status == 401
        assert output.headers["WWW-Authenticate"] == "Digest"

    def test_negotiated_mime_type_echoed_when_it_fits(self):
        output = XMLOutput(NegotiatedType("text/xml", "XML"))
        output.send_headers(Response())
        assert output.headers["Content-Type"] == "text/xml; charset=utf-8"

    def test_negotiated_mime_type_ignored_for_other_format(self):
        output = XMLOutput(NegotiatedType("application/json", "JSON"))
        output.send_headers(Response())
        assert output.headers["Content-Type"] == "application/xml; charset=utf-8"


class TestJSONOutput:
    def test_renders_data(self):
        body = _render(JSONOutput(), {"a": [1, 2], "b": None})
        assert json.loads(body) == {"a": [1, 2], "b": None}

    def test_non_serializable_falls_back_to_str(self):
        body = _render(JSONOutput(), {"obj": object})
        assert json.loads(body)["obj"].startswith("<class")

    def test_circular_data_raises_rendering_error(self):
        data: dict = {}
        data["self"] = data
        with pytest.raises(RenderingError):
            _render(JSONOutput(), data)


class TestJSOutput:
    def test_without_callback_is_plain_json(self):
        assert json.loads(_render(JSOutput(), {"a": 1})) == {"a": 1}

    def test_wraps_in_callback(self):
        body = _render(JSOutput(params={"callback": "app.handle"}), {"a": 1})
        assert body == 'app.handle({"a": 1});'

    def test_rejects_unsafe_callback(self):
        with pytest.raises(RenderingError) as exc_info:
            _render(JSOutput(params={"callback": "alert(1)//"}), {"a": 1})
        assert exc_info.value.code == 400


class TestXMLOutput:
    def test_nested_data(self):
        body = _render(XMLOutput(), {"user": {"name": "ann", "tags": ["a", "b"], "admin": True}})
        assert body.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = ET.fromstring(body.split("\n", 1)[1])
        assert root.tag == "response"
        assert root.findtext("user/name") == "ann"
        assert [i.text for i in root.findall("user/tags/item")] == ["a", "b"]
        assert root.findtext("user/admin") == "true"

    def test_invalid_tag_names_become_keyed_items(self):
        body = _render(XMLOutput(), {"1st": "x", "has space": "y"})
        root = ET.fromstring(body.split("\n", 1)[1])
        items = {i.get("key"): i.text for i in root.findall("item")}
        assert items == {"1st": "x", "has space": "y"}

    def test_scalar_data(self):
        body = _render(XMLOutput(), "pong")
        assert body.endswith("<response>pong</response>")

    @pytest.mark.parametrize("data", [{"q": "a\x01b"}, ["\x0b"], {"bad key\x1f": "v"}, "\ufffe"])
    def test_illegal_characters_raise_rendering_error(self, data):
        with pytest.raises(RenderingError) as exc_info:
            _render(XMLOutput(), data)
        assert exc_info.value.code == 500

    def test_allowed_whitespace_controls(self):
        body = _render(XMLOutput(), {"q": "a\tb\nc"})
        root = ET.fromstring(body.split("\n", 1)[1])
        assert root.findtext("q") == "a\tb\nc"

    def test_error_array(self):
        err = ApiError("ERROR_X", "bad thing", 400, at="field")
        body = _render(XMLOutput(), err.to_error_array(), "defaultError", err)
        root = ET.fromstring(body.split("\n", 1)[1])
        assert root.findtext("errors/item/name") == "ERROR_X"
        assert root.findtext("errors/item/at") == "field"


class TestHTMLOutput:
    def test_default_template(self):
        body = _render(HTMLOutput(), {"name": "<ann>"})
        assert "<h1>echo</h1>" in body
        assert "&lt;ann&gt;" in body

    def test_error_template(self):
        err = ApiError("ERROR_X", "bad thing", 404)
        body = _render(HTMLOutput(), err.to_error_array(), "defaultError", err)
        assert "Error 404" in body
        assert "ERROR_X" in body

    def test_template_hint_preferred(self, tmp_path):
        (tmp_path / "greeting.html").write_text("hint: {{ data.greeting }}")
        (tmp_path / "echo.html").write_text("action template")
        output = HTMLOutput(env=build_template_env(str(tmp_path)))
        assert _render(output, {"greeting": "hi"}, template="greeting.html") == "hint: hi"

    def test_action_template_before_default(self, tmp_path):
        (tmp_path / "echo.html").write_text("echo says {{ data.x }}")
        output = HTMLOutput(env=build_template_env(str(tmp_path)))
        assert _render(output, {"x": 1}) == "echo says 1"

    def test_missing_hint_falls_through(self):
        body = _render(HTMLOutput(), {"a": 1}, template="missing.html")
        assert "<h1>echo</h1>" in body

    def test_broken_template_raises_rendering_error(self, tmp_path):
        (tmp_path / "echo.html").write_text("{{ data.x.y.z() }}")
        output = HTMLOutput(env=build_template_env(str(tmp_path)))
        with pytest.raises(RenderingError):
            _render(output, {"x": 1})
