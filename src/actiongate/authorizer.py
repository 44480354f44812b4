"""Authorizer -- public allow-list first, partner backend otherwise."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from actiongate.errors import AuthorizationError
from actiongate.models import RequestContext
from actiongate.partners.base import PartnerAuthorization

logger = logging.getLogger(__name__)


class Authorizer:
    """Decides whether a request may run its action.

    ``authorize`` returns True or raises; it never returns False.
    """

    def __init__(
        self, public_actions: Iterable[str], authorization: PartnerAuthorization
    ) -> None:
        self._public_actions = frozenset(public_actions)
        self._authorization = authorization

    def is_public_action(self, action: str) -> bool:
        return action in self._public_actions

    async def authorize(self, ctx: RequestContext) -> bool:
        if self.is_public_action(ctx.action):
            return True

        auth_params = {
            "digest": ctx.auth_digest,
            "method": ctx.method,
            "uri": ctx.path,
        }
        partner = (
            self._authorization.get_partner()
            .set_action(ctx.action)
            .set_authorization_params(auth_params)
        )

        # Backend errors propagate as-is; only a silent decline gets the generic error
        if not await partner.authorize():
            logger.info("Partner authorization declined for action %r", ctx.action)
            raise AuthorizationError.invalid_action_request()

        return True
