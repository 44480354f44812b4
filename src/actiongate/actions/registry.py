"""Action registry -- maps action names to Action classes."""

from __future__ import annotations

import importlib
from collections.abc import Mapping

from actiongate.actions.base import Action
from actiongate.config import Config, ConfigError
from actiongate.errors import ActionResolutionError

BUILTIN_ACTIONS: dict[str, str] = {
    "ping": "actiongate.actions.builtin:Ping",
}


def load_action_class(name: str, handler: str) -> type[Action]:
    """Import an Action class from a "module.path:ClassName" spec."""
    if ":" not in handler:
        raise ConfigError(
            f"Invalid handler for action '{name}': "
            f"expected 'module.path:ClassName', got '{handler}'"
        )

    module_path, class_name = handler.rsplit(":", 1)

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigError(
            f"Cannot import module '{module_path}' for action '{name}': {e}"
        ) from e

    try:
        cls = getattr(module, class_name)
    except AttributeError:
        raise ConfigError(
            f"Class '{class_name}' not found in module '{module_path}' for action '{name}'"
        ) from None

    if not (isinstance(cls, type) and issubclass(cls, Action)):
        raise ConfigError(f"Handler for action '{name}' is not an Action subclass: {handler}")
    return cls


class ActionRegistry:
    """Allow-list of action names, each bound to an Action class."""

    def __init__(self, actions: Mapping[str, type[Action] | str]) -> None:
        """Register *actions*; "module:Class" strings are imported here.

        Raises ConfigError if a handler string cannot be loaded.
        """
        self._actions = {
            name: load_action_class(name, cls) if isinstance(cls, str) else cls
            for name, cls in actions.items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def names(self) -> list[str]:
        """Return all registered action names, sorted."""
        return sorted(self._actions)

    def resolve(self, name: str) -> Action:
        """Return a fresh Action instance for *name*.

        Raises ActionResolutionError if the name is not registered.
        """
        cls = self._actions.get(name)
        if cls is None:
            raise ActionResolutionError(at="action")
        return cls()


def build_action_registry(config: Config) -> ActionRegistry:
    """Build an ActionRegistry from the built-ins plus configured actions.

    Raises ConfigError if a handler cannot be imported or a public action is
    not registered.
    """
    registry = ActionRegistry({**BUILTIN_ACTIONS, **config.actions})
    for name in config.public_actions:
        if name not in registry:
            raise ConfigError(f"Public action '{name}' is not a configured action")
    return registry
