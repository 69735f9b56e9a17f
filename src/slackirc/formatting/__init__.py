"""Text codec and message tagging between Slack and IRC."""

from slackirc.formatting.irc_to_slack import to_source
from slackirc.formatting.slack_to_irc import to_irc
from slackirc.formatting.tags import (
    emphasize,
    insert_space,
    is_emphasized,
    is_weakened,
    normalize,
    strip_control_codes,
    weaken,
)

__all__ = [
    "emphasize",
    "insert_space",
    "is_emphasized",
    "is_weakened",
    "normalize",
    "strip_control_codes",
    "to_irc",
    "to_source",
    "weaken",
]
