"""
Slack reply notifier.

Posts the outcome of a gate request to the slash command's response URL.
Delivery is best effort: failures are logged and never raised, because
Slack already received its acknowledgment and cannot be answered again.
"""

from typing import Any, Dict, Optional

import httpx

from gaterelay.core.logging import get_logger

logger = get_logger(__name__)


class SlackNotifier:
    """Deliver JSON replies to Slack response URLs."""

    def __init__(
        self,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def notify(self, address: str, body: Dict[str, Any]) -> bool:
        """Post ``body`` to ``address``.

        Returns True when Slack answered 200, False otherwise.
        """
        try:
            response = await self.client.post(address, json=body)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers UnicodeError from IDNA-encoding the host
            logger.error(
                "Could not reply to Slack URL",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code != 200:
            logger.error(
                "Got non-200 reply from Slack when trying to reply",
                status_code=response.status_code,
            )
            return False

        logger.debug("Replied to Slack", text=body.get("text"))
        return True

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
