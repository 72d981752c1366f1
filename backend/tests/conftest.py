"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests.
"""

import asyncio
from typing import Any, AsyncGenerator, Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from gaterelay.core.config import Settings
from gaterelay.gate.coordinator import GateCoordinator
from gaterelay.main import create_application

SLACK_TOKEN = "slack-verification-token"
API_TOKEN = "device-api-token"

# Short window so timeout paths run quickly
CONFIRM_TIMEOUT = 0.2


class RecordingNotifier:
    """Notifier double that records every reply instead of posting it."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    async def notify(self, address: str, body: Dict[str, Any]) -> bool:
        await asyncio.sleep(0)
        self.sent.append((address, body))
        return True

    async def aclose(self) -> None:
        self.closed = True

    def texts_for(self, address: str) -> List[str]:
        return [body["text"] for sent_to, body in self.sent if sent_to == address]


# =============================================================================
# Settings & Doubles
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings with known tokens and a shortened confirmation window."""
    return Settings(
        SLACK_TOKEN=SLACK_TOKEN,
        API_TOKEN=API_TOKEN,
        ENVIRONMENT="testing",
        LOG_FORMAT="text",
        GATE_CONFIRM_TIMEOUT_SECONDS=CONFIRM_TIMEOUT,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


# =============================================================================
# Coordinator Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def coordinator(notifier) -> AsyncGenerator[GateCoordinator, None]:
    """Coordinator with scoped timeouts."""
    coordinator = GateCoordinator(notifier, confirm_timeout=CONFIRM_TIMEOUT)
    yield coordinator
    await coordinator.close()


@pytest_asyncio.fixture
async def unscoped_coordinator(notifier) -> AsyncGenerator[GateCoordinator, None]:
    """Coordinator whose timeout checks resolve whatever request is pending."""
    coordinator = GateCoordinator(
        notifier,
        confirm_timeout=CONFIRM_TIMEOUT,
        scoped_timeouts=False,
    )
    yield coordinator
    await coordinator.close()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(settings, notifier) -> AsyncGenerator[FastAPI, None]:
    """Create test FastAPI application."""
    app = create_application(settings=settings, notifier=notifier)
    yield app
    await app.state.coordinator.close()


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create async test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def slash_command() -> Dict[str, str]:
    """Form fields of a valid /gate slash command."""
    return {
        "token": SLACK_TOKEN,
        "command": "/gate",
        "text": "open",
        "user_name": "frontdesk",
        "channel_name": "office",
        "response_url": "https://hooks.slack.test/commands/T000/1",
    }


@pytest.fixture
def device_headers() -> Dict[str, str]:
    return {"X-API-Token": API_TOKEN}
