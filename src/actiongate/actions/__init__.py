"""Action base class and registry."""

from actiongate.actions.base import Action
from actiongate.actions.registry import ActionRegistry, build_action_registry

__all__ = ["Action", "ActionRegistry", "build_action_registry"]
