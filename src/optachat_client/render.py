# -*- coding: utf-8 -*-
"""
Renderers for formatted message segments.

to_html() builds an HTML fragment with inline styles; to_rich() builds
rich renderables for the terminal. Both treat span payloads as text:
HTML output is escaped and rich output never parses console markup.
"""

from html import escape
from typing import Dict, List, Sequence

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from optachat_client.models import (
    CodeSegment,
    ContentSegment,
    ImageSegment,
    RenderedBlock,
    TextSegment,
)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

_PARAGRAPH_STYLE = 'margin:0 0 10px 0; line-height:1.5;'
_BOLD_STYLE = 'font-weight:600;'
_ITALIC_STYLE = 'font-style:italic; color:#1a5276;'
_MARKER_STYLE = 'color:#2980b9; font-weight:bold;'
_CODE_BLOCK_STYLE = (
    'background:#2d2d2d; color:#f8f8f2; padding:10px 12px; '
    'border-radius:6px; font-family:Consolas,\'Courier New\',monospace; '
    'font-size:12px; white-space:pre; overflow-x:auto; margin:8px 0; '
    'border:1px solid #555;'
)
_CODE_LABEL_STYLE = 'font-size:9px; color:#999; margin-bottom:4px;'
_IMAGE_STYLE = 'max-width:100%; border-radius:6px; margin:8px 0;'


def _block_to_html(block: RenderedBlock) -> str:
    parts: List[str] = []
    for span in block.spans:
        text = escape(span.text, quote=False)
        if span.kind == "bold":
            parts.append(f'<strong style="{_BOLD_STYLE}">{text}</strong>')
        elif span.kind == "italic":
            parts.append(f'<em style="{_ITALIC_STYLE}">{text}</em>')
        elif span.kind in ("bullet", "ordinal"):
            parts.append(f'<span style="{_MARKER_STYLE}">{text}</span> ')
        elif span.kind == "break":
            parts.append('<br>')
        else:
            parts.append(text)
    return f'<p style="{_PARAGRAPH_STYLE}">{"".join(parts)}</p>'


def to_html(segments: Sequence[ContentSegment]) -> str:
    """
    Render segments as an HTML fragment.

    Every payload is escaped; the only markup comes from this module.
    """
    html: List[str] = []

    for segment in segments:
        if isinstance(segment, ImageSegment):
            src = escape(segment.image_ref, quote=True)
            html.append(f'<img src="{src}" alt="Generated image" style="{_IMAGE_STYLE}">')
        elif isinstance(segment, CodeSegment):
            lang = escape(segment.language, quote=True)
            body = escape(segment.body, quote=False)
            html.append(
                f'<div style="{_CODE_BLOCK_STYLE}">'
                f'<div style="{_CODE_LABEL_STYLE}">{escape(segment.language, quote=False)}</div>'
                f'<pre><code data-language="{lang}">{body}</code></pre></div>'
            )
        elif isinstance(segment, TextSegment):
            html.extend(_block_to_html(block) for block in segment.blocks)

    return ''.join(html)


# ---------------------------------------------------------------------------
# Terminal (rich)
# ---------------------------------------------------------------------------

_RICH_STYLES: Dict[str, str] = {
    "plain": "",
    "bold": "bold white",
    "italic": "italic light_sky_blue1",
    "bullet": "bold dodger_blue1",
    "ordinal": "bold dodger_blue1",
}

CODE_THEME = "monokai"


def _block_to_text(block: RenderedBlock) -> Text:
    text = Text()
    for span in block.spans:
        if span.kind == "break":
            text.append("\n")
        elif span.kind in ("bullet", "ordinal"):
            text.append(span.text, style=_RICH_STYLES[span.kind])
            text.append(" ")
        else:
            text.append(span.text, style=_RICH_STYLES.get(span.kind, ""))
    return text


def to_rich(segments: Sequence[ContentSegment]) -> Group:
    """Render segments as a rich Group (paragraphs, code panels, image refs)."""
    renderables: List[RenderableType] = []

    for segment in segments:
        if isinstance(segment, ImageSegment):
            renderables.append(Text(f"[image: {segment.image_ref}]", style="magenta"))
        elif isinstance(segment, CodeSegment):
            syntax = Syntax(segment.body, segment.language, theme=CODE_THEME, word_wrap=True)
            renderables.append(Panel(syntax, title=Text(segment.language), title_align="left"))
        elif isinstance(segment, TextSegment):
            for i, block in enumerate(segment.blocks):
                if i:
                    renderables.append(Text(""))
                renderables.append(_block_to_text(block))

    return Group(*renderables)
