"""Gate Relay: Slack slash command to gate opener bridge."""

__version__ = "1.0.0"
