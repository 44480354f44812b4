"""aiohttp front controller -- request lifecycle around the dispatcher."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

from aiohttp import web

from actiongate.actions.registry import ActionRegistry, build_action_registry
from actiongate.authorizer import Authorizer
from actiongate.config import Config, ConfigError
from actiongate.dispatcher import Dispatcher
from actiongate.errors import ApiError, InternalError
from actiongate.models import RequestContext, UploadedFile
from actiongate.negotiation import ContentNegotiator
from actiongate.outputs.registry import OutputRegistry, build_output_registry
from actiongate.partners.digest import DigestPartnerAuthorization

logger = logging.getLogger(__name__)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class InvalidRequestBody(ApiError):
    default_name = "ERROR_INVALID_REQUEST_BODY"
    default_message = "The request body could not be parsed"
    default_code = 400


class RequestTooLarge(ApiError):
    default_name = "ERROR_REQUEST_TOO_LARGE"
    default_message = "The request body is too large"
    default_code = 413


def split_endpoint(endpoint: str) -> tuple[str, str | None]:
    """Split "users.json" into ("users", "json"); no suffix gives None."""
    action, dot, fmt = endpoint.rpartition(".")
    if not dot or not action or not fmt:
        return endpoint, None
    return action, fmt.lower()


async def read_inputs(request: web.Request) -> tuple[dict[str, Any], dict[str, UploadedFile]]:
    """Merge query string and body parameters; collect uploaded files.

    Raises InvalidRequestBody for bodies that cannot be decoded and
    RequestTooLarge past the application's client_max_size.
    """
    params: dict[str, Any] = dict(request.query)
    files: dict[str, UploadedFile] = {}

    if not request.body_exists:
        return params, files

    if request.content_type in _FORM_TYPES:
        try:
            form = await request.post()
        except web.HTTPRequestEntityTooLarge as e:
            raise RequestTooLarge(message=e.text) from e
        except ValueError as e:
            raise InvalidRequestBody(message=f"Malformed form body: {e}") from e
        for key, value in form.items():
            if isinstance(value, web.FileField):
                files[key] = UploadedFile(
                    name=value.name,
                    filename=value.filename,
                    content_type=value.content_type,
                    content=value.file.read(),
                )
            else:
                params[key] = value
    elif request.content_type == "application/json":
        try:
            body = await request.json()
        except web.HTTPRequestEntityTooLarge as e:
            raise RequestTooLarge(message=e.text) from e
        except json.JSONDecodeError as e:
            raise InvalidRequestBody(message=f"Malformed JSON body: {e.msg}") from e
        except UnicodeDecodeError as e:
            raise InvalidRequestBody(message=f"JSON body is not valid {e.encoding}") from e
        if not isinstance(body, dict):
            raise InvalidRequestBody(message="JSON body must be an object")
        params.update(body)

    return params, files


class FrontController:
    """Turns aiohttp requests into dispatcher runs; always renders a response."""

    def __init__(
        self,
        *,
        actions: ActionRegistry,
        outputs: OutputRegistry,
        authorizer: Authorizer,
        negotiator: ContentNegotiator | None = None,
        default_format: str = "xml",
    ) -> None:
        self._actions = actions
        self._outputs = outputs
        self._authorizer = authorizer
        self._negotiator = negotiator or ContentNegotiator()
        self._default_format = default_format

    def _dispatcher(self, ctx: RequestContext) -> Dispatcher:
        return Dispatcher(
            ctx,
            self._actions,
            self._outputs,
            negotiator=self._negotiator,
            default_format=self._default_format,
        )

    async def handle(self, request: web.Request) -> web.Response:
        """Authorize, bind, run and render one action request."""
        action, fmt = split_endpoint(request.match_info["endpoint"])
        ctx = RequestContext(
            action=action,
            method=request.method,
            headers=request.headers,
            params=dict(request.query),
            format=fmt or request.query.get("format"),
            path=request.path_qs,
        )

        try:
            params, files = await read_inputs(request)
        except ApiError as e:
            logger.info("Rejected %s %s: %s", request.method, request.path, e.message)
            return self._render_error(ctx, e)
        except Exception:
            logger.exception("Unexpected error reading body for %r", action)
            return self._render_error(ctx, InternalError())
        ctx = replace(ctx, params=params, files=files)

        dispatcher = self._dispatcher(ctx)
        try:
            await self._authorizer.authorize(ctx)
            dispatcher.process_action()
            body = await dispatcher.process_output()
        except ApiError as e:
            logger.info("%s %r failed: %s (%d)", request.method, action, e.name, e.code)
            return self._render_error(ctx, e)
        except Exception:
            logger.exception("Unexpected error dispatching %r", action)
            return self._render_error(ctx, InternalError())

        return self._to_response(dispatcher, body)

    def _render_error(self, ctx: RequestContext, error: ApiError) -> web.Response:
        """Render in the requested format, else the default format."""
        dispatcher = self._dispatcher(ctx)
        try:
            body = dispatcher.process_error(error)
        except ApiError as e:
            logger.warning("Falling back to %s for error output: %s", self._default_format, e.name)
            dispatcher = self._dispatcher(replace(ctx, format=None, params={}))
            body = dispatcher.process_error(error)
        return self._to_response(dispatcher, body)

    @staticmethod
    def _to_response(dispatcher: Dispatcher, body: str) -> web.Response:
        output = dispatcher.output_context
        return web.Response(text=body, status=output.status, headers=output.headers)

    async def health(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "status": "healthy",
                "actions": self._actions.names(),
                "formats": self._outputs.formats(),
            }
        )


_controller_key = web.AppKey("controller", FrontController)


def build_controller(config: Config) -> FrontController:
    """Wire registries, negotiator and authorizer from config."""
    outputs = build_output_registry(config.templates)
    if config.default_format not in outputs:
        raise ConfigError(
            f"Unsupported default_format: {config.default_format!r} "
            f"(expected one of {', '.join(outputs.formats())})"
        )
    authorization = DigestPartnerAuthorization(config.partners, config.realm)
    return FrontController(
        actions=build_action_registry(config),
        outputs=outputs,
        authorizer=Authorizer(config.public_actions, authorization),
        negotiator=ContentNegotiator(config.mime_map),
        default_format=config.default_format,
    )


def create_app(config: Config, controller: FrontController | None = None) -> web.Application:
    """Build the aiohttp application serving every action at /{action}[.{format}]."""
    controller = controller or build_controller(config)
    app = web.Application()
    app[_controller_key] = controller
    app.router.add_get("/healthz", controller.health)
    app.router.add_route("*", "/{endpoint}", controller.handle)
    return app
