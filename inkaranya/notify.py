"""One notification channel for API, validation and success messages."""
from __future__ import annotations

from dataclasses import dataclass

from inkaranya.log import get_logger

log = get_logger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass
class Notification:
    title: str
    description: str
    variant: str = INFO


class Notifier:
    """Collects transient notifications until the UI drains them."""

    def __init__(self) -> None:
        self._pending: list[Notification] = []

    def notify(self, title: str, description: str, variant: str = INFO) -> None:
        if variant == ERROR:
            log.warning("%s: %s", title, description)
        else:
            log.info("%s: %s", title, description)
        self._pending.append(Notification(title, description, variant))

    def success(self, title: str, description: str) -> None:
        self.notify(title, description, SUCCESS)

    def error(self, title: str, description: str) -> None:
        self.notify(title, description, ERROR)

    def info(self, title: str, description: str) -> None:
        self.notify(title, description, INFO)

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        items, self._pending = self._pending, []
        return items
