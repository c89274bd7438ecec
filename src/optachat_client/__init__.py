"""
OptaChat Python Client.

Chat client for the OptaChat backend with a typed message formatter.
"""

from optachat_client.client import OptaChatClient
from optachat_client.conversation import Conversation
from optachat_client.formatter import format_message, format_text
from optachat_client.reactions import ReactionLedger, DEFAULT_REACTIONS
from optachat_client.models import (
    ConversationMessage,
    Span,
    RenderedBlock,
    TextSegment,
    CodeSegment,
    ImageSegment,
    ContentSegment,
)
from optachat_client.exceptions import (
    OptaChatError,
    ConnectionFailedError,
    ResponseFormatError,
    APIError,
    NotFoundError,
    ServerError,
)

__version__ = "1.0.0"

__all__ = [
    # Client
    "OptaChatClient",
    "Conversation",
    # Formatter
    "format_message",
    "format_text",
    "ReactionLedger",
    "DEFAULT_REACTIONS",
    # Models
    "ConversationMessage",
    "Span",
    "RenderedBlock",
    "TextSegment",
    "CodeSegment",
    "ImageSegment",
    "ContentSegment",
    # Exceptions
    "OptaChatError",
    "ConnectionFailedError",
    "ResponseFormatError",
    "APIError",
    "NotFoundError",
    "ServerError",
]
