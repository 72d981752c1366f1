"""gaterelay.api.health

Liveness endpoint for platform probes. It must stay fast and must not
depend on Slack or on the gate device.
"""

from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Request, status

START_TIME = time.monotonic()

router = APIRouter(prefix="/health", tags=["health"])


def _uptime_seconds() -> int:
    return int(time.monotonic() - START_TIME)


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness(request: Request) -> Dict[str, Any]:
    """Liveness probe.

    Always returns 200 if the process is running.
    """
    return {
        "ok": True,
        "service": request.app.state.settings.APP_NAME,
        "uptime_seconds": _uptime_seconds(),
    }
