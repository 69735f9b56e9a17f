"""Message tagging: style envelopes used at the protocol boundary.

A NOTICE travels to Slack as ``_ text _`` (italics) and a /me action as
``*text*`` (bold). A Slack user can send an IRC notice by wrapping the whole
message in underscores. Text that genuinely starts and ends with ``_`` or
``*`` is indistinguishable from a tagged message.
"""

from __future__ import annotations

import re

ZERO_WIDTH_SPACE = "\u200b"

_EMPHASIZED = re.compile(r"\*.*\*", re.DOTALL)
_WEAKENED = re.compile(r"_.*_", re.DOTALL)
_LEADING_MARK = re.compile(r"^[_*]")
_TRAILING_MARK = re.compile(r"[_*]\Z")

# IRC formatting: color (\x03fg[,bg]), hex color (\x04RRGGBB), bold, reset, monospace,
# reverse, italic, strikethrough, underline
_IRC_COLOR = re.compile(r"\x03(?:\d{1,2}(?:,\d{1,2})?)?")
_IRC_HEX_COLOR = re.compile(r"\x04(?:[0-9a-fA-F]{6}(?:,[0-9a-fA-F]{6})?)?")
_IRC_FORMAT = re.compile(r"[\x02\x0f\x11\x16\x1d\x1e\x1f]")


def emphasize(text: str) -> str:
    return f"*{text}*"


def is_emphasized(text: str) -> bool:
    return bool(_EMPHASIZED.fullmatch(text))


def weaken(text: str) -> str:
    return f"_ {text} _"


def is_weakened(text: str) -> bool:
    return bool(_WEAKENED.fullmatch(text))


def normalize(text: str) -> str:
    """Remove one style envelope: ``_ x _`` -> ``x``, ``*x*`` -> ``x``, ``_x_`` -> ``x``."""
    if len(text) >= 4 and text.startswith("_ ") and text.endswith(" _"):
        return text[2:-2]
    text = _LEADING_MARK.sub("", text, count=1)
    return _TRAILING_MARK.sub("", text, count=1)


def insert_space(name: str) -> str:
    """Break up a nick so IRC clients do not highlight its owner."""
    return ZERO_WIDTH_SPACE.join(name)


def strip_control_codes(text: str) -> str:
    """Remove IRC formatting and color bytes."""
    if not text:
        return text
    text = _IRC_COLOR.sub("", text)
    text = _IRC_HEX_COLOR.sub("", text)
    return _IRC_FORMAT.sub("", text)
