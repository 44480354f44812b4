"""Shared fixtures: registries, a fake partner backend, request contexts."""

from __future__ import annotations

import pytest

from actiongate.actions.builtin import Ping
from actiongate.actions.registry import ActionRegistry
from actiongate.models import RequestContext
from actiongate.outputs.registry import build_output_registry
from actiongate.partners.base import Partner, PartnerAuthorization
from sample_actions import Broken, Crashing, Echo, Greeting, Upload


class FakePartner(Partner):
    """Partner whose authorize() outcome is scripted by the test."""

    def __init__(self, outcome: bool | Exception) -> None:
        super().__init__()
        self._outcome = outcome

    async def authorize(self) -> bool:
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


class FakePartnerAuthorization(PartnerAuthorization):
    def __init__(self, outcome: bool | Exception = True) -> None:
        self.outcome = outcome
        self.partners: list[FakePartner] = []

    def get_partner(self) -> FakePartner:
        partner = FakePartner(self.outcome)
        self.partners.append(partner)
        return partner


@pytest.fixture()
def action_registry() -> ActionRegistry:
    return ActionRegistry(
        {
            "ping": Ping,
            "echo": Echo,
            "greeting": Greeting,
            "upload": Upload,
            "broken": Broken,
            "crashing": Crashing,
        }
    )


@pytest.fixture()
def output_registry():
    return build_output_registry()


def make_ctx(action: str = "echo", **kwargs) -> RequestContext:
    return RequestContext(action=action, **kwargs)
