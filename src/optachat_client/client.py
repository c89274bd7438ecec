"""
High-level chat backend client.

Wraps the three backend operations: fetch history, send a message and
clear history.
"""

import logging
from pathlib import Path
from typing import Optional, List

import httpx
from pydantic import ValidationError as PydanticValidationError

from optachat_client.config import get_config_manager
from optachat_client.exceptions import ResponseFormatError
from optachat_client.http_client import HTTPClient
from optachat_client.models import (
    ChatReply,
    ChatRequest,
    ConversationMessage,
    HistoryEntry,
)

logger = logging.getLogger(__name__)


class OptaChatClient:
    """
    Client for the chat backend.

    Example:

    ```python
    with OptaChatClient(server_url="http://localhost:5000") as client:
        reply = client.send_message("Write a haiku")
        print(reply.text)
    ```
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        config_dir: Optional[Path] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Args:
            server_url: Server URL (e.g. http://localhost:5000)
            config_dir: Configuration directory
            timeout: Request timeout in seconds
            transport: Custom httpx transport
        """
        self._config_manager = get_config_manager(config_dir)

        self._http = HTTPClient(
            server_url=server_url,
            config_manager=self._config_manager,
            timeout=timeout,
            transport=transport
        )

    @property
    def server_url(self) -> str:
        return self._http.server_url

    # ===== MESSAGES =====

    def fetch_history(self) -> List[ConversationMessage]:
        """
        Load the stored conversation.

        Returns:
            Messages in conversation order

        Raises:
            ResponseFormatError: If the payload is not a list of entries
        """
        response = self._http.get("/chat/history")
        try:
            data = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"History payload is not JSON: {e}") from e
        if not isinstance(data, list):
            raise ResponseFormatError("History payload is not a list", {"payload": data})

        try:
            messages = [HistoryEntry.model_validate(item).to_message() for item in data]
        except PydanticValidationError as e:
            raise ResponseFormatError(f"Malformed history entry: {e}") from e

        logger.info(f"Loaded {len(messages)} messages from history")
        return messages

    def send_message(self, message: str) -> ConversationMessage:
        """
        Send user text and wait for the complete reply.

        Args:
            message: User text

        Returns:
            Assistant message (text or image)
        """
        body = ChatRequest(message=message).model_dump()
        response = self._http.post("/chat", json=body)

        try:
            reply = ChatReply.model_validate(response.json())
            return reply.to_message()
        except (ValueError, PydanticValidationError) as e:
            raise ResponseFormatError(f"Malformed chat reply: {e}") from e

    def clear_history(self) -> None:
        """Delete the stored conversation on the backend."""
        self._http.delete("/chat/history")
        logger.info("Backend chat history cleared")

    # ===== CONTEXT MANAGEMENT =====

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._http.close()

    def close(self) -> None:
        """Close the client."""
        self._http.close()
