"""Convert IRC text for Slack. IRC text is plain; only encoding artifacts are removed."""

from __future__ import annotations

import re

# A control byte immediately followed by digits: leftover color-code encoding
_COLOR_CODE = re.compile(r"[\x01-\x1f\x7f]\d+")


def to_source(content: str) -> str:
    """Strip control bytes that carry trailing digits; pass everything else verbatim."""
    if not content:
        return content
    return _COLOR_CODE.sub("", content)
