"""
Emoji reaction tallies per conversation message.
"""

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)

# Palette offered on assistant messages
DEFAULT_REACTIONS = ("👍", "👎", "❤️", "😂", "😮", "😢")


class ReactionLedger:
    """
    Reaction counters keyed by message index.

    Counts only go up. An emoji nobody reacted with is absent from the
    snapshot rather than zero. Dict insertion order gives the display order
    of distinct emoji.
    """

    def __init__(self):
        self._counts: Dict[int, Dict[str, int]] = {}
        self._lock = threading.Lock()

    def record(self, message_index: int, emoji: str) -> None:
        """
        Add one reaction.

        Args:
            message_index: Position of the message in the conversation
            emoji: Reaction symbol
        """
        with self._lock:
            per_message = self._counts.setdefault(message_index, {})
            per_message[emoji] = per_message.get(emoji, 0) + 1
        logger.debug(f"Reaction {emoji} on message {message_index}")

    def snapshot(self, message_index: int) -> Dict[str, int]:
        """Copy of the {emoji: count} mapping, empty if nothing recorded."""
        with self._lock:
            return dict(self._counts.get(message_index, {}))

    def clear(self) -> None:
        """Forget all reactions (session reset)."""
        with self._lock:
            self._counts.clear()

    def __contains__(self, message_index: int) -> bool:
        return message_index in self._counts

    def __len__(self) -> int:
        return len(self._counts)
