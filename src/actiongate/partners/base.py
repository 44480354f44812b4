"""Partner ABCs -- the contract the authorizer needs from a partner backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Partner(ABC):
    """A stateless principal authorizing a single action request."""

    def __init__(self) -> None:
        self.action: str | None = None
        self.auth_params: dict[str, Any] = {}

    def set_action(self, action: str) -> Partner:
        self.action = action
        return self

    def set_authorization_params(self, params: dict[str, Any]) -> Partner:
        self.auth_params = dict(params)
        return self

    @abstractmethod
    async def authorize(self) -> bool:
        """Return True if allowed, False to decline; may raise ApiError."""
        ...


class PartnerAuthorization(ABC):
    """Factory for per-request Partner principals."""

    @abstractmethod
    def get_partner(self) -> Partner:
        """Return a fresh Partner for the current request."""
        ...
