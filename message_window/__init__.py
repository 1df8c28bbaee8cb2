"""
Message Window Layer - Time-bucketed batching of chat messages.

Usage:
    from message_window import MessageWindowManager, MessageInput

    manager = MessageWindowManager()
    await manager.start_processing(handler)
    manager.add_message(MessageInput(text="wagmi", user_id="u1", chat_id="c1"))
"""

from .config import WindowConfig
from .manager import MessageWindowManager, WindowProcessor
from .models import MessageEntry, MessageInput, MessageWindow, WindowStatus


__all__ = [
    "MessageEntry",
    "MessageInput",
    "MessageWindow",
    "MessageWindowManager",
    "WindowConfig",
    "WindowProcessor",
    "WindowStatus",
]
