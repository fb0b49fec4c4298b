"""
Message Micro-Format

The assistant writes a tiny markdown subset:
- ```lang ... ``` fenced code blocks
- `inline code`
- **bold**
- literal newlines

parse() splits text into segments so the rules cannot interfere with each
other: nothing inside code is bold-scanned and fence bodies keep their
newlines. A bold span may contain inline code and line breaks; its pieces
are kept as child segments. to_html() renders the segments.
"""

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

_FENCE_RE = re.compile(r"```(\w+)?\n([\s\S]*?)```")
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
# Inline code wins over a bold marker starting inside it
_INLINE_TOKEN_RE = re.compile(r"`([^`]+)`|\*\*")


class SegmentKind(Enum):
    TEXT = "text"
    BOLD = "bold"
    INLINE_CODE = "inline_code"
    CODE_BLOCK = "code_block"
    LINE_BREAK = "line_break"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    text: str = ""
    language: Optional[str] = None
    children: Tuple["Segment", ...] = ()


def _split_lines(text: str, segments: List[Segment]):
    for line_no, line in enumerate(text.split("\n")):
        if line_no:
            segments.append(Segment(SegmentKind.LINE_BREAK))
        if line:
            segments.append(Segment(SegmentKind.TEXT, line))


def _split_code(text: str, segments: List[Segment]):
    """Inline code spans and line breaks; no bold scanning."""
    pos = 0
    for match in _INLINE_CODE_RE.finditer(text):
        _split_lines(text[pos:match.start()], segments)
        segments.append(Segment(SegmentKind.INLINE_CODE, match.group(1)))
        pos = match.end()
    _split_lines(text[pos:], segments)


def _split_inline(text: str, segments: List[Segment]):
    """
    Text outside fences. `**` markers outside inline code pair up left to
    right; an unpaired last marker stays literal.
    """
    markers = [m for m in _INLINE_TOKEN_RE.finditer(text) if m.group(1) is None]
    pos = 0
    for opening, closing in zip(markers[0::2], markers[1::2]):
        _split_code(text[pos:opening.start()], segments)
        inner = text[opening.end():closing.start()]
        children: List[Segment] = []
        _split_code(inner, children)
        segments.append(Segment(SegmentKind.BOLD, inner, children=tuple(children)))
        pos = closing.end()
    _split_code(text[pos:], segments)


def parse(content: str) -> List[Segment]:
    """Split micro-format text into ordered segments."""
    segments: List[Segment] = []
    content = content or ""
    pos = 0
    for match in _FENCE_RE.finditer(content):
        if match.start() > pos:
            _split_inline(content[pos:match.start()], segments)
        segments.append(Segment(SegmentKind.CODE_BLOCK, match.group(2), language=match.group(1)))
        pos = match.end()
    if pos < len(content):
        _split_inline(content[pos:], segments)
    return segments


def _segment_html(segment: Segment) -> str:
    text = html.escape(segment.text, quote=False)
    if segment.kind is SegmentKind.CODE_BLOCK:
        if segment.language:
            return f'<pre><code class="language-{segment.language}">{text}</code></pre>'
        return f"<pre><code>{text}</code></pre>"
    if segment.kind is SegmentKind.INLINE_CODE:
        return f"<code>{text}</code>"
    if segment.kind is SegmentKind.BOLD:
        return "<strong>" + "".join(_segment_html(child) for child in segment.children) + "</strong>"
    if segment.kind is SegmentKind.LINE_BREAK:
        return "<br>"
    return text


def to_html(content: str) -> str:
    """Render micro-format text as HTML."""
    return "".join(_segment_html(segment) for segment in parse(content))


def fence(code: str, language: Optional[str] = None) -> str:
    """Wrap code in a fenced block the parser recognises."""
    return f"```{language or ''}\n{code}\n```"
