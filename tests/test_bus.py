"""Tests for the event bus."""

from __future__ import annotations

from slackirc.events import IRC, plain
from slackirc.gateway.bus import Bus


class Recorder:
    def __init__(self) -> None:
        self.events: list[object] = []

    def accept_event(self, source, evt):
        return True

    def push_event(self, source, evt):
        self.events.append(evt)


class TestBus:
    def test_publish_reaches_registered_target(self):
        # Arrange
        bus = Bus()
        recorder = Recorder()
        bus.register(recorder)
        _, evt = plain(IRC, "#bridge", "carol", "hi")

        # Act
        bus.publish("irc", evt)

        # Assert
        assert recorder.events == [evt]

    def test_unregister_stops_delivery(self):
        bus = Bus()
        recorder = Recorder()
        bus.register(recorder)
        bus.unregister(recorder)
        bus.publish("irc", plain(IRC, "#bridge", "carol", "hi")[1])
        assert recorder.events == []
        assert bus.targets == []

    def test_events_handled_to_completion_in_order(self):
        bus = Bus()
        order: list[str] = []

        class Nested:
            def accept_event(self, source, evt):
                return True

            def push_event(self, source, evt):
                order.append(f"start {evt.text}")
                order.append(f"end {evt.text}")

        bus.register(Nested())
        for text in ("a", "b"):
            bus.publish("irc", plain(IRC, "#bridge", "carol", text)[1])
        assert order == ["start a", "end a", "start b", "end b"]

    def test_failing_target_does_not_block_others(self):
        # Arrange
        class Broken:
            def accept_event(self, source, evt):
                return True

            def push_event(self, source, evt):
                raise RuntimeError("boom")

        bus = Bus()
        recorder = Recorder()
        bus.register(Broken())
        bus.register(recorder)
        _, evt = plain(IRC, "#bridge", "carol", "still relayed")

        # Act
        bus.publish("irc", evt)

        # Assert
        assert recorder.events == [evt]
        assert len(bus.targets) == 2
