"""Gateway: event bus, channel mapping, bridge."""

from slackirc.gateway.bridge import Bridge, SessionState
from slackirc.gateway.bus import Bus
from slackirc.gateway.router import ChannelMapping

__all__ = ["Bridge", "Bus", "ChannelMapping", "SessionState"]
