"""Actions every deployment ships with."""

from __future__ import annotations

import time
from typing import Any

from actiongate.actions.base import Action


class Ping(Action):
    """Liveness probe: answers any verb."""

    async def execute_action(self) -> dict[str, Any]:
        return {"ping": "pong", "timestamp": int(time.time())}
