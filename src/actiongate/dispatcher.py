"""Dispatcher -- resolves, invokes and renders one request's action."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from actiongate.actions.base import Action
from actiongate.actions.registry import ActionRegistry
from actiongate.errors import ApiError
from actiongate.models import HttpMethod, RequestContext, Response
from actiongate.negotiation import ContentNegotiator
from actiongate.outputs.base import Output
from actiongate.outputs.registry import OutputRegistry

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "xml"

# Action tag renderers see on the error path
ERROR_OUTPUT_ACTION = "defaultError"

EntryPoint = Callable[[Action], Awaitable[Any]]

VERB_ENTRY_POINTS: dict[HttpMethod, EntryPoint] = {
    HttpMethod.GET: lambda action: action.execute_get(),
    HttpMethod.POST: lambda action: action.execute_post(),
    HttpMethod.PUT: lambda action: action.execute_put(),
    HttpMethod.DELETE: lambda action: action.execute_delete(),
    HttpMethod.HEAD: lambda action: action.execute_head(),
}


def _execute_action(action: Action) -> Awaitable[Any]:
    return action.execute_action()


def entry_point_for(method: str | None) -> EntryPoint:
    """Return the entry point for *method*; anything unmapped gets execute_action."""
    verb = HttpMethod.parse(method)
    if verb is None:
        return _execute_action
    return VERB_ENTRY_POINTS[verb]


class Dispatcher:
    """Per-request orchestrator.

    Create one per request; it holds that request's action and output
    instances and nothing else.
    """

    def __init__(
        self,
        ctx: RequestContext,
        actions: ActionRegistry,
        outputs: OutputRegistry,
        negotiator: ContentNegotiator | None = None,
        default_format: str = DEFAULT_OUTPUT_FORMAT,
    ) -> None:
        self.ctx = ctx
        self._actions = actions
        self._outputs = outputs
        self._negotiator = negotiator or ContentNegotiator()
        self._default_format = default_format
        self.action_context: Action | None = None
        self.output_context: Output | None = None

    def get_action(self) -> str:
        return self.ctx.action

    def get_format(self) -> str:
        """Explicit request format, else the default."""
        return self.ctx.format or self._default_format

    def get_action_instance(self, name: str) -> Action:
        self.action_context = self._actions.resolve(name)
        return self.action_context

    def get_output_instance(self, format_id: str) -> Output:
        """Resolve a renderer; negotiation feeds its options, not the choice."""
        options = self._negotiator.detect_and_set_mime_type(self.ctx)
        self.output_context = self._outputs.resolve(format_id, options, self.ctx.params)
        return self.output_context

    def process_action(self) -> Dispatcher:
        """Resolve the action and bind its inputs without running it."""
        (
            self.get_action_instance(self.get_action())
            .set_action_params(self.ctx.params)
            .set_action_files(self.ctx.files)
        )
        return self

    async def process_output(self) -> str:
        """Run the bound action for the request verb and render the result."""
        if self.action_context is None:
            self.process_action()
        action = self.action_context

        logger.debug("Dispatching %s %r to %s", self.ctx.method, self.ctx.action,
                     type(action).__name__)
        response = Response.wrap(await entry_point_for(self.ctx.method)(action))

        output = self.get_output_instance(self.get_format())
        return self._render(
            output,
            self.get_action(),
            response.data,
            response.template or action.get_template_file_name(),
            response,
        )

    def process_error(self, error: ApiError) -> str:
        """Render *error* through the same output path as a success."""
        logger.debug("Rendering %s for action %r", error.name, self.ctx.action)
        output = self.get_output_instance(self.get_format())
        return self._render(output, ERROR_OUTPUT_ACTION, error.to_error_array(), None, error)

    @staticmethod
    def _render(
        output: Output,
        action: str,
        data: Any,
        template: str | None,
        source: Response | ApiError,
    ) -> str:
        output.set_output_action(action)
        output.populate_output(data, template)
        output.send_headers(source)
        return output.execute_output()
