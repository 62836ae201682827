"""Core services: expense sync, notifications and balance summaries."""

from .sync_service import ExpenseSyncService, SyncResult
from .notification_service import DiscordNotifier, NullNotifier, build_notifier, format_expense
from .balance_service import BalanceService

__all__ = [
    "ExpenseSyncService",
    "SyncResult",
    "DiscordNotifier",
    "NullNotifier",
    "build_notifier",
    "format_expense",
    "BalanceService",
]
