"""Protocol adapters. Each publishes inbound events to the bus and implements one session contract."""

from slackirc.adapters.base import AdapterBase, IrcSession, SlackChannel, SlackSession, SlackUser
from slackirc.adapters.irc import IRCAdapter
from slackirc.adapters.slack import SlackAdapter

__all__ = [
    "AdapterBase",
    "IRCAdapter",
    "IrcSession",
    "SlackAdapter",
    "SlackChannel",
    "SlackSession",
    "SlackUser",
]
