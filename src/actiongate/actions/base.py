"""Action base class -- one instance per request, one entry point per verb."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from actiongate.errors import MethodNotAllowedError, MissingArgumentError
from actiongate.models import UploadedFile


class Action:
    """Base class for API actions.

    Subclasses override ``execute_action`` (any verb) and/or the verb-specific
    entry points.  Entry points may return a raw value or a ``Response``.
    """

    #: Parameters checked by ``has_required_parameters``
    required_params: ClassVar[tuple[str, ...]] = ()
    #: View-name hint passed to template renderers
    template: ClassVar[str | None] = None

    def __init__(self) -> None:
        self.params: dict[str, Any] = {}
        self.files: dict[str, UploadedFile] = {}

    def set_action_params(self, params: Mapping[str, Any]) -> Action:
        self.params = dict(params)
        return self

    def set_action_files(self, files: Mapping[str, UploadedFile]) -> Action:
        self.files = dict(files)
        return self

    def get_param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def has_required_parameters(self) -> bool:
        """Raise MissingArgumentError for the first absent required parameter."""
        for name in self.required_params:
            value = self.params.get(name)
            if value is None or value == "":
                raise MissingArgumentError(name)
        return True

    def get_template_file_name(self) -> str | None:
        return self.template

    async def execute_action(self) -> Any:
        raise MethodNotAllowedError()

    async def execute_get(self) -> Any:
        return await self.execute_action()

    async def execute_post(self) -> Any:
        return await self.execute_action()

    async def execute_put(self) -> Any:
        return await self.execute_action()

    async def execute_delete(self) -> Any:
        return await self.execute_action()

    async def execute_head(self) -> Any:
        return await self.execute_get()
