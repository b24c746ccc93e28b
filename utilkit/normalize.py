"""Text normalisation: trimming, case changes and HTML stripping."""

from __future__ import annotations

from dataclasses import dataclass
from html.parser import HTMLParser


@dataclass(frozen=True)
class NormalizeOptions:
    """Which normalisation steps to apply."""

    trim_spaces: bool = False
    strip_html: bool = False
    lowercase: bool = False
    uppercase: bool = False


DEFAULT_NORMALIZE_OPTIONS = NormalizeOptions(trim_spaces=True, strip_html=True)

_SKIP_CONTENT = frozenset(
    {
        "frame",
        "frameset",
        "iframe",
        "noembed",
        "noframes",
        "noscript",
        "nostyle",
        "object",
        "script",
        "style",
        "title",
    }
)

_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in _SKIP_CONTENT:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIP_CONTENT and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.parts.append(data.translate(_ESCAPES))


def strip_html(data: str) -> str:
    """Remove every HTML tag, drop script-like content and escape the remaining text."""
    extractor = _TextExtractor()
    extractor.feed(data)
    extractor.close()
    return "".join(extractor.parts)


def normalize_with_options(data: str, options: NormalizeOptions) -> str:
    """Apply trimming, lowercasing, uppercasing and HTML stripping, in that order."""
    if options.trim_spaces:
        data = data.strip()
    if options.lowercase:
        data = data.lower()
    if options.uppercase:
        data = data.upper()
    if options.strip_html:
        data = strip_html(data)
    return data


def normalize(data: str) -> str:
    """Trim surrounding whitespace and strip HTML."""
    return normalize_with_options(data, DEFAULT_NORMALIZE_OPTIONS)