"""In-process implementation of ConversationStore."""

from wolfram_knowledge.entities import ConversationHandle
from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryConversationRepository:
    """Maps a host user id to its remote conversation thread.

    This class satisfies the ConversationStore protocol through structural
    typing. There is no local expiry: a handle lives until it is cleared or
    overwritten by a newer conversation id.
    """

    def __init__(self) -> None:
        self._handles: dict[str, ConversationHandle] = {}

    def get_handle(self, user_id: str) -> ConversationHandle | None:
        return self._handles.get(user_id)

    def set_handle(self, user_id: str, conversation_id: str) -> ConversationHandle:
        handle = ConversationHandle(user_id=user_id, conversation_id=conversation_id)
        previous = self._handles.get(user_id)
        self._handles[user_id] = handle
        if previous is None or previous.conversation_id != conversation_id:
            logger.debug("Conversation for user %s is now %s", user_id, conversation_id)
        return handle

    def clear(self, user_id: str) -> bool:
        removed = self._handles.pop(user_id, None) is not None
        if removed:
            logger.info("Cleared conversation for user %s", user_id)
        return removed

    def clear_all(self) -> int:
        count = len(self._handles)
        self._handles.clear()
        return count

    @property
    def count(self) -> int:
        return len(self._handles)
