"""Pure markup helpers for Craft note lines - no I/O dependencies."""

import re

# <highlight color="blue">content</highlight>
HIGHLIGHT_PATTERN = re.compile(
    r"<highlight\s+color=[\"']([^\"']+)[\"']>(.+?)</highlight>",
    re.IGNORECASE | re.DOTALL,
)

BULLET_PREFIX = re.compile(r"^[•\-*+]\s+")

# "- [ ] text", "[ ] text", "[x] text", "[] text"
CHECKBOX_PREFIX = re.compile(r"^\s*-?\s*\[([ x]?)\]\s*", re.IGNORECASE)

_ZERO_WIDTH_PREFIX = re.compile(r"^[\s\u200b\ufeff]*")
_BULLETED_CHECKBOX = re.compile(r"^[-–—•*+]\s*\[[ x]?\]\s*", re.IGNORECASE)
_BARE_CHECKBOX = re.compile(r"^\[[ x]?\]\s*", re.IGNORECASE)
_ANY_BULLET = re.compile(r"^[-–—•*+]\s+")
_HIGHLIGHT_OPEN_TAG = re.compile(r"<highlight[^>]*>", re.IGNORECASE)
_HIGHLIGHT_CLOSE_TAG = re.compile(r"</highlight>", re.IGNORECASE)
_EDIT_PREFIX = re.compile(r"^(-\s*\[[ x]\]\s*|\[[ x]\]\s*)", re.IGNORECASE)

DEFAULT_CHECKBOX_PREFIX = "- [ ] "


def strip_highlight(text: str) -> tuple[str, str | None]:
    """
    Remove a highlight wrapper, returning (content, color).

    Text around the wrapper is kept. Without a wrapper the text comes back
    unchanged with color None.
    """
    match = HIGHLIGHT_PATTERN.search(text)
    if not match:
        return text, None
    content = text[: match.start()] + match.group(2) + text[match.end() :]
    return content.strip(), match.group(1)


def strip_bullet(text: str) -> str:
    """Remove a single leading bullet glyph (-, •, *, +) and its whitespace."""
    return BULLET_PREFIX.sub("", text, count=1)


def strip_checkbox(text: str) -> str:
    """Remove a leading checkbox token, optionally preceded by a dash."""
    match = CHECKBOX_PREFIX.match(text)
    if not match:
        return text
    return text[match.end() :].strip()


def is_checked_token(token: str | None) -> bool:
    """True for the inside of a ticked checkbox ("x" or "X")."""
    return bool(token) and token.lower() == "x"


def clean_task_text(markdown: str) -> str:
    """
    Strip checkbox, bullet and highlight markup from task markdown for display.

    Pure function - no I/O.
    """
    text = markdown.strip()
    text = _ZERO_WIDTH_PREFIX.sub("", text)
    text = _BULLETED_CHECKBOX.sub("", text, count=1)
    text = _BARE_CHECKBOX.sub("", text, count=1)
    text = _ANY_BULLET.sub("", text, count=1)
    text = _HIGHLIGHT_OPEN_TAG.sub("", text)
    text = _HIGHLIGHT_CLOSE_TAG.sub("", text)
    return text.strip()


def checkbox_prefix(markdown: str) -> str:
    """The checkbox prefix already on a task line, or the default "- [ ] "."""
    match = _EDIT_PREFIX.match(markdown)
    return match.group(0) if match else DEFAULT_CHECKBOX_PREFIX
