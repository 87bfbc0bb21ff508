from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


Notifier = Callable[[str, ToastType], None]


@dataclass(frozen=True)
class Toast:
    message: str
    kind: ToastType


@dataclass
class ToastQueue:
    """Collects notifications until the surface showing them consumes them."""

    messages: List[Toast] = field(default_factory=list)

    def __call__(self, message: str, kind: ToastType) -> None:
        self.push(message, kind)

    def push(self, message: str, kind: ToastType) -> None:
        self.messages.append(Toast(message, kind))

    def consume(self) -> List[Toast]:
        messages, self.messages = self.messages, []
        return messages
