"""
Pydantic models for the chat client.

Conversation messages, formatter output (segments, blocks, spans),
backend wire payloads and the local client configuration.
"""

from typing import Optional, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


# ===== CONVERSATION MODELS =====

class ConversationMessage(BaseModel):
    """One message of the conversation. Never mutated once appended."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    kind: Literal["text", "image"] = "text"
    text: Optional[str] = None
    image_ref: Optional[str] = Field(
        default=None,
        description="URL or data URI of the attached image (kind == 'image')"
    )

    @model_validator(mode="after")
    def _image_requires_ref(self) -> "ConversationMessage":
        if self.kind == "image" and not self.image_ref:
            raise ValueError("image messages require image_ref")
        return self


# ===== FORMATTER OUTPUT MODELS =====

SpanKind = Literal["plain", "bold", "italic", "bullet", "ordinal", "break"]


class Span(BaseModel):
    """Inline run of a paragraph with its style kind and literal payload."""
    model_config = ConfigDict(frozen=True)

    kind: SpanKind = "plain"
    text: str


class RenderedBlock(BaseModel):
    """One paragraph as an ordered sequence of spans."""
    spans: List[Span] = Field(default_factory=list)

    @property
    def plain_text(self) -> str:
        """Payload text of all spans joined, markers included."""
        return "".join(span.text for span in self.spans)


class TextSegment(BaseModel):
    """Prose part of a message, split into paragraphs."""
    type: Literal["text"] = "text"
    blocks: List[RenderedBlock] = Field(default_factory=list)


class CodeSegment(BaseModel):
    """Fenced code block, kept verbatim."""
    type: Literal["code"] = "code"
    language: str = "text"
    body: str


class ImageSegment(BaseModel):
    """Image descriptor of an image-bearing message."""
    type: Literal["image"] = "image"
    image_ref: str


ContentSegment = Union[TextSegment, CodeSegment, ImageSegment]


# ===== WIRE MODELS =====

def _normalize_role(role: str) -> Literal["user", "assistant"]:
    # Backend history stores assistant replies as "ai"
    return "user" if role == "user" else "assistant"


class ChatRequest(BaseModel):
    """Body of POST /chat."""
    message: str


class ChatReply(BaseModel):
    """Reply of POST /chat: either text or a generated image."""
    type: Literal["text", "image"] = "text"
    text: Optional[str] = None
    image: Optional[str] = None

    def to_message(self) -> ConversationMessage:
        """Convert the reply to an assistant message."""
        if self.type == "image" or (self.image and not self.text):
            return ConversationMessage(
                role="assistant",
                kind="image",
                text=self.text or None,
                image_ref=self.image,
            )
        return ConversationMessage(role="assistant", kind="text", text=self.text or "")


class HistoryEntry(BaseModel):
    """Item of GET /chat/history."""
    role: str
    text: Optional[str] = None
    image: Optional[str] = None
    type: Optional[Literal["text", "image"]] = None

    def to_message(self) -> ConversationMessage:
        """Convert the stored entry to a conversation message."""
        role = _normalize_role(self.role)
        if self.image and self.type != "text":
            return ConversationMessage(
                role=role, kind="image", text=self.text or None, image_ref=self.image
            )
        return ConversationMessage(role=role, kind="text", text=self.text or "")


class ErrorResponse(BaseModel):
    """Error payload returned by the backend."""
    error: str = "unknown_error"
    message: Optional[str] = None


# ===== LOCAL CONFIG MODELS =====

class ClientConfig(BaseModel):
    """Client configuration."""
    server_url: str
    timeout: float = Field(default=60.0, description="HTTP timeout in seconds")
