"""
Reply bodies and response payloads.

The three Slack replies are fixed; they are posted either as the
synchronous answer to the slash command (ack) or later to the
command's response URL (success, failure).
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class SlackReply(BaseModel):
    """Message body understood by Slack's response_url endpoint."""

    model_config = ConfigDict(frozen=True)

    response_type: str = "in_channel"
    text: str
    attachments: List[Dict[str, Any]] = Field(default_factory=list)


class GateStatus(BaseModel):
    """Answer to the gate device's status poll."""

    model_config = ConfigDict(populate_by_name=True)

    should_open: bool = Field(alias="shouldOpen")


class ResetResult(BaseModel):
    success: bool = True


ACK_REPLY = SlackReply(text="You got it boss! Hang tight...")

SUCCESS_REPLY = SlackReply(text="Alright, the gate is open! :thumbsup:")

FAILURE_REPLY = SlackReply(
    text=(
        "Argh! Something's busted in my programming, "
        "I couldn't open the gate for you. :disappointed:"
    ),
)
