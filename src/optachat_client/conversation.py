"""
Conversation state: the append-only message list and its reactions.
"""

import logging
from typing import List, Optional, Tuple

from optachat_client.client import OptaChatClient
from optachat_client.exceptions import OptaChatError
from optachat_client.models import ConversationMessage
from optachat_client.reactions import ReactionLedger

logger = logging.getLogger(__name__)

SEND_ERROR_TEXT = "❌ Sorry, I encountered an error. Please try again."
HISTORY_ERROR_TEXT = "❌ Error loading chat history. Please try again."

IMAGE_REQUEST_KEYWORDS = ("image of", "show me", "generate image", "picture of")


def is_image_request(text: str) -> bool:
    """Whether the user text asks for an image (selects the status line)."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in IMAGE_REQUEST_KEYWORDS)


class Conversation:
    """
    Messages of one chat session.

    Messages are only appended, so a message index stays valid until the
    conversation is cleared. Reactions are keyed by that index.
    """

    def __init__(self, client: OptaChatClient):
        self._client = client
        self._messages: List[ConversationMessage] = []
        self.reactions = ReactionLedger()

    @property
    def messages(self) -> Tuple[ConversationMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, message: ConversationMessage) -> int:
        """Append a message and return its index."""
        self._messages.append(message)
        return len(self._messages) - 1

    def send(self, text: str) -> Optional[ConversationMessage]:
        """
        Send user text and append both sides of the exchange.

        Backend failures are appended as an assistant error message instead
        of being raised.

        Args:
            text: User input

        Returns:
            The appended reply, or None for blank input
        """
        if not text.strip():
            return None

        self.append(ConversationMessage(role="user", text=text))

        try:
            reply = self._client.send_message(text)
        except OptaChatError as e:
            logger.error(f"Error sending message: {e.message}")
            reply = ConversationMessage(role="assistant", text=SEND_ERROR_TEXT)

        self.append(reply)
        return reply

    def load_history(self) -> bool:
        """
        Replace the messages with the backend history.

        Returns:
            True on success; on failure an error message is appended
        """
        try:
            history = self._client.fetch_history()
        except OptaChatError as e:
            logger.error(f"Error loading history: {e.message}")
            self.append(ConversationMessage(role="assistant", text=HISTORY_ERROR_TEXT))
            return False

        self._messages = list(history)
        self.reactions.clear()
        return True

    def clear(self) -> None:
        """Clear the local session only."""
        self._messages = []
        self.reactions.clear()

    def clear_history(self) -> bool:
        """
        Delete the backend history, then the local session.

        Returns:
            True on success; local state is kept on failure
        """
        try:
            self._client.clear_history()
        except OptaChatError as e:
            logger.error(f"Error clearing history: {e.message}")
            return False

        self.clear()
        return True

    def react(self, message_index: int, emoji: str) -> None:
        """
        Record a reaction on an existing message.

        Raises:
            IndexError: If no message has that index
        """
        if not 0 <= message_index < len(self._messages):
            raise IndexError(f"No message at index {message_index}")
        self.reactions.record(message_index, emoji)
