"""JSON and JSONP renderers."""

from __future__ import annotations

import json
import re

from actiongate.errors import RenderingError
from actiongate.outputs.base import Output

# JSONP callbacks must be plain (dotted) JS identifiers
_CALLBACK_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")


def _dumps(data: object) -> str:
    try:
        return json.dumps(data, default=str)
    except (TypeError, ValueError) as e:
        raise RenderingError(message=f"Cannot encode response as JSON: {e}") from e


class JSONOutput(Output):
    format_id = "json"
    default_mime_type = "application/json"
    mime_types = frozenset({"application/json", "text/json", "text/plain"})

    def execute_output(self) -> str:
        return _dumps(self.data)


class JSOutput(Output):
    """JSON wrapped in a JSONP callback when ``callback`` is passed."""

    format_id = "js"
    default_mime_type = "text/javascript"
    mime_types = frozenset({"text/javascript"})

    def execute_output(self) -> str:
        body = _dumps(self.data)
        callback = self.params.get("callback")
        if not callback:
            return body
        if not isinstance(callback, str) or not _CALLBACK_RE.match(callback):
            raise RenderingError(
                "ERROR_INVALID_CALLBACK", "Invalid JSONP callback name", 400, at="callback"
            )
        return f"{callback}({body});"
