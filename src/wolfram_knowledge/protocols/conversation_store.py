"""Conversation handle store protocol."""

from typing import Protocol, runtime_checkable

from wolfram_knowledge.entities import ConversationHandle


@runtime_checkable
class ConversationStore(Protocol):
    """Protocol for per-user conversation handle storage.

    Holds at most one handle per user id. Handles never expire locally;
    staleness is reported by the remote service.
    """

    def get_handle(self, user_id: str) -> ConversationHandle | None:
        """Return the active handle for ``user_id``, if any."""
        ...

    def set_handle(self, user_id: str, conversation_id: str) -> ConversationHandle:
        """Create or overwrite the handle for ``user_id``."""
        ...

    def clear(self, user_id: str) -> bool:
        """Drop the handle for ``user_id``.

        Returns:
            True if a handle was removed
        """
        ...

    def clear_all(self) -> int:
        """Drop every handle.

        Returns:
            Number of handles removed
        """
        ...

    @property
    def count(self) -> int:
        """Number of active conversations."""
        ...
