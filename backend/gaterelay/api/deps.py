"""
API Dependencies

Request guards shared by the relay's routes. A guard either returns the
validated input or raises BadRequestException; rejected requests never
reach the coordinator.
"""

import hmac
from typing import Callable, Optional

from fastapi import Depends, Request
from pydantic import BaseModel, ConfigDict, ValidationError

from gaterelay.core.config import Settings
from gaterelay.gate.coordinator import GateCoordinator
from gaterelay.middleware.exception import BadRequestException

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


class SlashCommand(BaseModel):
    """The slash command fields the relay cares about."""

    model_config = ConfigDict(extra="ignore")

    token: str
    command: str
    response_url: Optional[str] = None
    text: Optional[str] = None
    user_name: Optional[str] = None
    channel_name: Optional[str] = None


# =============================================================================
# Application State
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_coordinator(request: Request) -> GateCoordinator:
    return request.app.state.coordinator


# =============================================================================
# Guards
# =============================================================================

def tokens_match(provided: Optional[str], configured: str) -> bool:
    """Exact, case-sensitive comparison. An unset secret matches nothing."""
    if not provided or not configured:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), configured.encode("utf-8"))


def require_content_type(expected: str) -> Callable[[Request], None]:
    """Build a guard that rejects requests with any other media type."""

    def guard(request: Request) -> None:
        content_type = request.headers.get("content-type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != expected:
            raise BadRequestException(f"expected content type {expected}")

    return guard


async def verified_slash_command(
    request: Request,
    _: None = Depends(require_content_type(FORM_CONTENT_TYPE)),
    settings: Settings = Depends(get_app_settings),
) -> SlashCommand:
    """Parse the slash command form and check its token and command."""
    form = await request.form()
    try:
        command = SlashCommand.model_validate(
            {key: value for key, value in form.items() if isinstance(value, str)}
        )
    except ValidationError as e:
        raise BadRequestException(f"incomplete slash command: {len(e.errors())} error(s)") from e

    if not tokens_match(command.token, settings.SLACK_TOKEN):
        raise BadRequestException("slash command token mismatch")

    if not request.app.state.command_regex.search(command.command):
        raise BadRequestException("command does not ask for the gate")

    return command


def verified_device(
    request: Request,
    _: None = Depends(require_content_type(JSON_CONTENT_TYPE)),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Check the gate device's X-API-Token header."""
    if not tokens_match(request.headers.get("x-api-token"), settings.API_TOKEN):
        raise BadRequestException("device token mismatch")
