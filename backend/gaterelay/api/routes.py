"""
Relay Routes

- POST /incoming   Slack slash command asking for the gate to open
- POST /api/reset  gate device confirming it opened
- GET  /api        gate device polling whether it should open

Each path also answers with a trailing slash.
"""

from fastapi import APIRouter, Depends

from gaterelay.api.deps import (
    SlashCommand,
    get_coordinator,
    verified_device,
    verified_slash_command,
)
from gaterelay.core.logging import get_logger
from gaterelay.gate.coordinator import GateCoordinator
from gaterelay.gate.messages import GateStatus, ResetResult, SlackReply

logger = get_logger(__name__)

router = APIRouter(tags=["gate"])


@router.post("/incoming", response_model=SlackReply)
@router.post("/incoming/", response_model=SlackReply, include_in_schema=False)
async def incoming(
    command: SlashCommand = Depends(verified_slash_command),
    coordinator: GateCoordinator = Depends(get_coordinator),
) -> SlackReply:
    """Ask the gate to open and acknowledge the slash command."""
    logger.info(
        "Slash command received",
        command=command.command,
        text=command.text,
        user_name=command.user_name,
        channel_name=command.channel_name,
    )
    return await coordinator.trigger_open(command.response_url)


@router.post("/api/reset", response_model=ResetResult, dependencies=[Depends(verified_device)])
@router.post(
    "/api/reset/",
    response_model=ResetResult,
    dependencies=[Depends(verified_device)],
    include_in_schema=False,
)
async def reset(coordinator: GateCoordinator = Depends(get_coordinator)) -> ResetResult:
    """Confirm the gate opened."""
    return await coordinator.confirm_opened()


@router.get("/api", response_model=GateStatus)
@router.get("/api/", response_model=GateStatus, include_in_schema=False)
async def status(coordinator: GateCoordinator = Depends(get_coordinator)) -> GateStatus:
    """Report whether the gate should currently open."""
    return GateStatus(should_open=coordinator.query_status())
