"""Output registry -- maps format identifiers to renderer factories."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from actiongate.errors import OutputResolutionError
from actiongate.models import NegotiatedType
from actiongate.outputs.base import Output
from actiongate.outputs.html_output import HTMLOutput, build_template_env
from actiongate.outputs.json_output import JSONOutput, JSOutput
from actiongate.outputs.xml_output import XMLOutput

OutputFactory = Callable[..., Output]


class OutputRegistry:
    """Case-insensitive lookup of renderers by format identifier."""

    def __init__(self, outputs: Mapping[str, OutputFactory]) -> None:
        self._outputs = {name.lower(): factory for name, factory in outputs.items()}

    def __contains__(self, format_id: object) -> bool:
        return isinstance(format_id, str) and format_id.lower() in self._outputs

    def formats(self) -> list[str]:
        return sorted(self._outputs)

    def resolve(
        self,
        format_id: str,
        options: NegotiatedType | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Output:
        """Return a fresh renderer for *format_id* bound to *options*.

        Raises OutputResolutionError if the format is unknown.
        """
        factory = self._outputs.get((format_id or "").lower())
        if factory is None:
            raise OutputResolutionError(
                message=f"The requested output format is not supported: {format_id!r}",
                at="format",
            )
        return factory(options, params)


def build_output_registry(template_dir: str | None = None) -> OutputRegistry:
    """Registry with the bundled json, js, xml and html renderers."""
    env = build_template_env(template_dir)
    return OutputRegistry(
        {
            JSONOutput.format_id: JSONOutput,
            JSOutput.format_id: JSOutput,
            XMLOutput.format_id: XMLOutput,
            HTMLOutput.format_id: partial(HTMLOutput, env=env),
        }
    )
