"""Outbound service clients."""

from gaterelay.services.notifier import SlackNotifier

__all__ = ["SlackNotifier"]
