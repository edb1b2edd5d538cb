"""Conversation handle domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConversationHandle:
    """Link between a host user and a remote conversation thread.

    Attributes:
        user_id: Opaque user identifier supplied by the host
        conversation_id: Remote ``conversationID`` that continues the thread
    """

    user_id: str
    conversation_id: str
