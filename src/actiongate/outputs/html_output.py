"""HTML renderer -- Jinja2 templates selected by hint, action, or default."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jinja2

from actiongate.errors import RenderingError
from actiongate.models import NegotiatedType
from actiongate.outputs.base import Output

_TEMPLATE_DIR = Path(__file__).parent / "templates"

DEFAULT_TEMPLATE = "default.html"


def build_template_env(template_dir: str | None = None) -> jinja2.Environment:
    """Jinja2 environment: user templates first, then the bundled ones."""
    loaders: list[jinja2.BaseLoader] = []
    if template_dir:
        loaders.append(jinja2.FileSystemLoader(template_dir))
    loaders.append(jinja2.FileSystemLoader(str(_TEMPLATE_DIR)))
    return jinja2.Environment(
        loader=jinja2.ChoiceLoader(loaders),
        autoescape=True,
    )


class HTMLOutput(Output):
    format_id = "html"
    default_mime_type = "text/html"
    mime_types = frozenset({"text/html"})

    def __init__(
        self,
        options: NegotiatedType | None = None,
        params: Mapping[str, Any] | None = None,
        *,
        env: jinja2.Environment | None = None,
    ) -> None:
        super().__init__(options, params)
        self._env = env or build_template_env()

    def _candidates(self) -> list[str]:
        names = []
        if self.template:
            names.append(self.template)
        if self.action:
            names.append(f"{self.action}.html")
        names.append(DEFAULT_TEMPLATE)
        return names

    def execute_output(self) -> str:
        try:
            template = self._env.select_template(self._candidates())
            return template.render(action=self.action, data=self.data, status=self.status)
        except jinja2.TemplateError as e:
            raise RenderingError(message=f"Cannot render HTML response: {e}") from e
