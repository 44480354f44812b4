"""Renderers and the output registry."""

from actiongate.outputs.base import Output
from actiongate.outputs.registry import OutputRegistry, build_output_registry

__all__ = ["Output", "OutputRegistry", "build_output_registry"]
