"""User-facing notices raised by console actions."""

from dataclasses import dataclass
from typing import Literal

NoticeLevel = Literal["success", "error"]


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


class NoticeBoard:
    """Collects notices until the presentation layer drains them."""

    def __init__(self):
        self._pending: list[Notice] = []

    def success(self, message: str) -> None:
        self._pending.append(Notice("success", message))

    def error(self, message: str) -> None:
        self._pending.append(Notice("error", message))

    def drain(self) -> list[Notice]:
        notices, self._pending = self._pending, []
        return notices
