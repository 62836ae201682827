"""
Notification Service - New-expense messages for the group chat.

Responsibilities:
- Format one text block per newly seen expense
- Deliver the batch to a Discord webhook (best effort, single attempt)
"""
import logging
import os
from typing import List, Optional

import requests

from splitboard.errors import ConfigError, NotificationError
from splitboard.splitwise.schemas import Expense

logger = logging.getLogger(__name__)


def format_expense(expense: Expense, dashboard_url: str) -> str:
    """
    Build the notification block for one expense.

    Layout: header with the description, amount line, one line per
    participant in upstream order, then a link back to the dashboard.
    """
    currency = expense.currency_code
    lines = [
        f"New expense: {expense.description}",
        f"Amount: {expense.cost} {currency}",
    ]
    for share in expense.users:
        lines.append(
            f"{share.user.full_name} "
            f"(paid: {share.paid_share} {currency}, owed: {share.owed_share} {currency})"
        )
    lines.append(f"View details: {dashboard_url}")
    return "\n".join(lines)


def split_message(text: str, limit: int) -> List[str]:
    """Split text on line boundaries into chunks of at most ``limit`` characters."""
    chunks: List[str] = []
    # None until the first line of a chunk is placed, so blank lines survive
    current: Optional[str] = None
    for line in text.split("\n"):
        # a single line longer than the limit is hard-wrapped
        while len(line) > limit:
            if current is not None:
                chunks.append(current)
                current = None
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = line if current is None else f"{current}\n{line}"
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current is not None:
        chunks.append(current)
    return chunks


class DiscordNotifier:
    """Posts plain-text messages to a Discord webhook."""

    # Discord rejects message content above this length
    MAX_CONTENT_LENGTH = 2000

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 10.0):
        self.webhook_url = webhook_url or os.environ.get("DISCORD_WEBHOOK_URL")
        self.timeout = timeout

    def send(self, text: str) -> bool:
        """
        Send a message to the webhook.

        Returns:
            True once every chunk was accepted, False for blank text (nothing sent)

        Raises:
            ConfigError: DISCORD_WEBHOOK_URL is not set
            NotificationError: Discord rejected a chunk or could not be reached
        """
        if not text or not text.strip():
            logger.debug("Skipping blank notification")
            return False
        if not self.webhook_url:
            raise ConfigError("DISCORD_WEBHOOK_URL is not set")

        for chunk in split_message(text, self.MAX_CONTENT_LENGTH):
            # Discord rejects empty content
            if chunk.strip():
                self._post(chunk)
        return True

    def _post(self, content: str) -> None:
        try:
            response = requests.post(
                self.webhook_url,
                json={"content": content},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"Discord webhook request failed: {e}") from e

        if not response.ok:
            raise NotificationError(f"Discord webhook returned {response.status_code}")


class NullNotifier:
    """Sink used when notifications are disabled; logs instead of sending."""

    def send(self, text: str) -> bool:
        if text and text.strip():
            logger.info("Notifications disabled, dropping message (%d chars)", len(text))
        return False


def build_notifier(config):
    """Pick the sink for the app: Discord, or a no-op when notifications are disabled."""
    if not config.get("NOTIFICATIONS_ENABLED", True):
        return NullNotifier()
    return DiscordNotifier(
        webhook_url=config.get("DISCORD_WEBHOOK_URL"),
        timeout=config.get("UPSTREAM_TIMEOUT") or 10.0,
    )
