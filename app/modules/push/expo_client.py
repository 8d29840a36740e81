"""
Expo push gateway client.

Messages are POSTed in batches of at most ``expo_push_batch_size``. A failed
HTTP request aborts the remaining batches; per-token errors reported in the
response tickets are logged and returned, never raised. There is no retry.
"""

import logging
from typing import List, Optional, Sequence

import requests

from app.config import settings
from app.modules.push.schemas import PushMessage, PushTicket

logger = logging.getLogger(__name__)


class PushGatewayError(Exception):
    """Raised when the push gateway rejects a whole batch."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def chunk_messages(messages: Sequence[PushMessage], size: int) -> List[List[PushMessage]]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [list(messages[i:i + size]) for i in range(0, len(messages), size)]


class ExpoPushClient:
    def __init__(
        self,
        url: Optional[str] = None,
        batch_size: Optional[int] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or settings.expo_push_url
        self.batch_size = batch_size or settings.expo_push_batch_size
        self.access_token = access_token if access_token is not None else settings.expo_access_token
        self.timeout = timeout or settings.expo_push_timeout_seconds
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _send_batch(self, batch: List[PushMessage]) -> List[PushTicket]:
        payload = [m.model_dump(exclude_none=True) for m in batch]
        try:
            response = self.session.post(
                self.url, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise PushGatewayError(f"Failed to send push notifications: {e}") from e

        if not response.ok:
            error_text = response.text
            logger.error(f"Expo push error: {error_text}")
            raise PushGatewayError(
                f"Failed to send push notifications: {error_text}",
                status_code=response.status_code,
            )

        result = response.json()
        logger.debug(f"Expo push result: {result}")
        tickets = [PushTicket(**item) for item in (result.get("data") or [])]
        for message, ticket in zip(batch, tickets):
            if ticket.status == "error":
                logger.error(f"Push failed for token {message.to}: {ticket.message}")
        return tickets

    def send(self, messages: Sequence[PushMessage]) -> List[PushTicket]:
        """Send all messages, batch by batch. Returns the gateway tickets in message order."""
        if not messages:
            return []
        tickets: List[PushTicket] = []
        for batch in chunk_messages(messages, self.batch_size):
            tickets.extend(self._send_batch(batch))
        return tickets


def get_push_client() -> ExpoPushClient:
    return ExpoPushClient()
