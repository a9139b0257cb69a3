from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    def notify(self, identifier: str, title: str, body: str) -> None: ...

    def request_permission(self) -> bool: ...


class LoggingNotifier:
    def notify(self, identifier: str, title: str, body: str) -> None:
        logger.info("Notification %s: %s - %s", identifier, title, body)

    def request_permission(self) -> bool:
        return True

