# -*- coding: utf-8 -*-
"""
Message content formatter.

Turns a raw reply string into typed content segments:

    tokenize()          fenced code blocks vs. prose
    split_paragraphs()  prose -> paragraphs with soft line breaks
    transform_inline()  paragraph -> spans (bold, italic, list markers)

format_message() dispatches on the message kind and runs the pipeline.
The output is data, not markup: renderers escape plain text themselves.
Every function here is total over strings; markup that cannot be closed
stays literal.
"""

import re
from typing import Callable, List, Tuple, Union

from optachat_client.models import (
    CodeSegment,
    ContentSegment,
    ConversationMessage,
    ImageSegment,
    RenderedBlock,
    Span,
    TextSegment,
)


DEFAULT_CODE_LANGUAGE = "text"


# ---------------------------------------------------------------------------
# Code fences
# ---------------------------------------------------------------------------

# ```lang\n ... ```  (lang optional, closing fence required)
_FENCE_RE = re.compile(r'```([^\s`]+)?[ \t]*\n(.*?)```', re.DOTALL)


def tokenize(text: str) -> List[Union[str, CodeSegment]]:
    """
    Split text into prose strings and fenced code blocks, in document order.

    Unterminated fences are not code: their backticks stay in the prose.
    Without any fence the result is ``[text]``, also for ``""``.
    """
    parts: List[Union[str, CodeSegment]] = []
    last_end = 0

    for m in _FENCE_RE.finditer(text):
        if m.start() > last_end:
            parts.append(text[last_end:m.start()])
        parts.append(CodeSegment(
            language=m.group(1) or DEFAULT_CODE_LANGUAGE,
            body=m.group(2).strip(),
        ))
        last_end = m.end()

    if last_end < len(text):
        parts.append(text[last_end:])

    if not parts:
        parts.append(text)

    return parts


# ---------------------------------------------------------------------------
# Paragraphs
# ---------------------------------------------------------------------------

_PARAGRAPH_BREAK_RE = re.compile(r'\n\s*\n')
_EDGE_BLANK_LINES_RE = re.compile(r'^(?:[ \t]*\n)+|(?:\n[ \t]*)+$')


def split_paragraphs(text: str) -> List[str]:
    """
    Split prose into paragraphs on blank lines.

    A single paragraph keeps every single newline as a soft break, so short
    replies formatted line by line survive. Blank edge lines are dropped.
    """
    if not text or not text.strip():
        return []

    paragraphs = [p for p in _PARAGRAPH_BREAK_RE.split(text) if p.strip()]
    if len(paragraphs) <= 1:
        paragraphs = [text]

    return [_EDGE_BLANK_LINES_RE.sub('', p) for p in paragraphs]


# ---------------------------------------------------------------------------
# Inline markup
# ---------------------------------------------------------------------------

_BOLD_RE = re.compile(r'\*\*(.+?)\*\*')
_ITALIC_RE = re.compile(r'\*(.+?)\*')
_BULLET_RE = re.compile(r'^• ', re.MULTILINE)
_ORDINAL_RE = re.compile(r'^(\d+)\. ', re.MULTILINE)

# Styled span, or a (start, end) range of the paragraph still plain
_Piece = Union[Span, Tuple[int, int]]

_INLINE_RULES: List[Tuple[re.Pattern, Callable[[re.Match], Span]]] = [
    (_BOLD_RE, lambda m: Span(kind="bold", text=m.group(1))),
    (_ITALIC_RE, lambda m: Span(kind="italic", text=m.group(1))),
    (_BULLET_RE, lambda m: Span(kind="bullet", text="•")),
    (_ORDINAL_RE, lambda m: Span(kind="ordinal", text=f"{m.group(1)}.")),
]


def _apply_rule(
    paragraph: str,
    pieces: List[_Piece],
    pattern: re.Pattern,
    make_span: Callable[[re.Match], Span],
) -> List[_Piece]:
    """Rewrite matches of one rule inside the plain ranges only."""
    result: List[_Piece] = []

    for piece in pieces:
        if isinstance(piece, Span):
            result.append(piece)
            continue

        start, end = piece
        cursor = start
        # pos/endpos keep '^' anchored to real line starts of the paragraph
        for m in pattern.finditer(paragraph, start, end):
            if m.start() > cursor:
                result.append((cursor, m.start()))
            result.append(make_span(m))
            cursor = m.end()
        if cursor < end:
            result.append((cursor, end))

    return result


def _plain_spans(text: str) -> List[Span]:
    """Plain text with newlines turned into soft break spans."""
    spans: List[Span] = []
    for i, line in enumerate(text.split('\n')):
        if i:
            spans.append(Span(kind="break", text="\n"))
        if line:
            spans.append(Span(kind="plain", text=line))
    return spans


def transform_inline(paragraph: str) -> RenderedBlock:
    """
    Convert one paragraph into styled spans.

    Rules run in a fixed order (bold, italic, bullet, ordinal), each on the
    plain text left over by the previous ones. List markers only match at
    the start of a line.
    """
    pieces: List[_Piece] = [(0, len(paragraph))] if paragraph else []

    for pattern, make_span in _INLINE_RULES:
        pieces = _apply_rule(paragraph, pieces, pattern, make_span)

    spans: List[Span] = []
    for piece in pieces:
        if isinstance(piece, Span):
            spans.append(piece)
        else:
            spans.extend(_plain_spans(paragraph[piece[0]:piece[1]]))

    return RenderedBlock(spans=spans)


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------

def format_text(text: str) -> List[ContentSegment]:
    """
    Format a raw reply string.

    Code blocks are kept in place and verbatim; prose between them becomes
    TextSegment objects. Whitespace-only prose produces no segment.
    """
    if not text:
        return []

    text = text.replace('\r\n', '\n')
    segments: List[ContentSegment] = []

    for part in tokenize(text):
        if isinstance(part, CodeSegment):
            segments.append(part)
            continue

        blocks = [transform_inline(p) for p in split_paragraphs(part)]
        if blocks:
            segments.append(TextSegment(blocks=blocks))

    return segments


def format_message(message: Union[ConversationMessage, str]) -> List[ContentSegment]:
    """
    Format a conversation message into renderable segments.

    Image messages yield an ImageSegment followed by the formatted caption,
    if any. A bare string is formatted as text.
    """
    if isinstance(message, str):
        return format_text(message)

    if message.kind == "image" and message.image_ref:
        segments: List[ContentSegment] = [ImageSegment(image_ref=message.image_ref)]
        if message.text:
            segments.extend(format_text(message.text))
        return segments

    return format_text(message.text or "")
