"""
Transient user-facing notifications ("toasts").

Views call a Notifier; how it is shown is up to the host application.
The default writes to the structured log.
"""

from typing import Protocol

from marketplace.core.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify_error", message=message)
