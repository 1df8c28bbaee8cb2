"""
Message Window Models - Per-conversation message batches.

A window collects messages from one chat for a fixed duration and
moves through collecting -> processing -> completed exactly once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class WindowStatus(Enum):
    """Lifecycle state of a message window."""
    COLLECTING = "collecting"
    PROCESSING = "processing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class MessageEntry:
    """A single buffered message. Immutable once appended."""
    text: str
    user_id: str
    timestamp: int  # epoch ms
    platform_metadata: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "user_id": self.user_id,
            "timestamp": self.timestamp,
            "platform_metadata": self.platform_metadata,
        }


@dataclass(frozen=True)
class MessageInput:
    """An inbound message as handed over by the chat transport."""
    text: str
    user_id: str
    chat_id: str
    timestamp: Optional[int] = None  # epoch ms, defaults to arrival time
    platform_metadata: Optional[dict[str, Any]] = None


@dataclass
class MessageWindow:
    """
    A bounded-duration batch of messages from one conversation.

    ``window_id`` is ``<chat_id>_<bucket start ms>`` for canonical
    windows and ``<bucket id>_overflow`` for overflow windows.
    """
    window_id: str
    chat_id: str
    start_time: int  # epoch ms
    end_time: int    # epoch ms
    messages: list[MessageEntry] = field(default_factory=list)
    status: WindowStatus = WindowStatus.COLLECTING

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def is_collecting(self) -> bool:
        return self.status == WindowStatus.COLLECTING

    @property
    def is_overflow(self) -> bool:
        return self.window_id.endswith("_overflow")

    def to_dict(self) -> dict[str, Any]:
        return {
            "window_id": self.window_id,
            "chat_id": self.chat_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status.value,
            "message_count": self.message_count,
            "messages": [m.to_dict() for m in self.messages],
        }
