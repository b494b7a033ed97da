"""Use cases for the per-task chat."""

from .service import MAX_PAGE_SIZE, TaskChatService, run_inline, serialize_chat_message

__all__ = ["MAX_PAGE_SIZE", "TaskChatService", "run_inline", "serialize_chat_message"]
