"""In-process bus between the two chat sessions and the bridge.

The Slack and IRC adapters publish inbound events under their origin name
(``"slack"`` or ``"irc"``); the Bridge is normally the only registered target.
"""

from loguru import logger

from slackirc.events import Dispatcher, EventTarget

__all__ = ["Bus", "EventTarget"]


class Bus:
    """Delivers each published event to every accepting target before returning."""

    def __init__(self) -> None:
        self._dispatcher = Dispatcher()

    def register(self, target: EventTarget) -> None:
        self._dispatcher.register(target)

    def unregister(self, target: EventTarget) -> None:
        self._dispatcher.unregister(target)

    @property
    def targets(self) -> list[EventTarget]:
        """Snapshot of registered targets, in registration order."""
        return list(self._dispatcher._targets)

    def publish(self, source: str, evt: object) -> None:
        """Hand an inbound Slack or IRC event to the bridge.

        Delivery is synchronous, so events from one session reach the bridge
        in the order the adapter published them.
        """
        logger.trace("{} event from {}", type(evt).__name__, source)
        self._dispatcher.dispatch(source, evt)
