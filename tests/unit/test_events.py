"""
Tests for the crawl event emitter and logging handler.
"""

import logging

from cdp_topology.events import (
    CrawlEvent,
    EventEmitter,
    EventType,
    LoggingEventHandler,
    LogLevel,
)


class TestEventEmitter:

    def test_filtered_subscription(self):
        emitter = EventEmitter()
        failed = []
        emitter.subscribe(failed.append, EventType.DEVICE_FAILED)

        emitter.device_complete("R1", 2, 10.0, 0)
        emitter.device_failed("R9", "timeout", 1)

        assert [e.target for e in failed] == ["R9"]
        assert failed[0].data['error'] == "timeout"

    def test_listener_error_does_not_stop_others(self, caplog):
        emitter = EventEmitter()
        received = []

        def broken(event):
            raise RuntimeError("listener bug")

        emitter.subscribe(broken)
        emitter.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="cdp_topology.events"):
            emitter.log("hello")

        assert [e.message for e in received] == ["hello"]
        assert "listener bug" in caplog.text

    def test_unsubscribe_and_clear(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.unsubscribe(received.append)
        emitter.log("dropped")
        assert received == []

        emitter.subscribe(received.append)
        emitter.clear()
        emitter.log("dropped")
        assert received == []

    def test_stats(self):
        emitter = EventEmitter()
        emitter.crawl_started("R1", None, [], 10)
        emitter.device_complete("R1", 2, 5.0, 0)
        emitter.neighbor_queued("R2", "R1", 1)
        emitter.neighbor_ignored("R3", "R1")
        emitter.neighbor_skipped("R1", "already claimed", "R2")
        emitter.device_failed("R2", "timeout", 1)

        stats = emitter.stats
        assert stats.discovered == 1
        assert stats.failed == 1
        assert stats.total == 2
        assert stats.ignored == 1
        assert stats.skipped == 1
        assert stats.success_rate == 50.0

    def test_crawl_started_resets_stats(self):
        emitter = EventEmitter()
        emitter.device_failed("R9", "timeout", 1)
        emitter.crawl_started("R1", 2, ["R3"], 5)
        assert emitter.stats.failed == 0


class TestLoggingEventHandler:

    def test_forwards_to_logger(self, caplog):
        handler = LoggingEventHandler(logging.getLogger("crawl-test"))

        with caplog.at_level(logging.DEBUG, logger="crawl-test"):
            handler.handle_event(CrawlEvent(
                EventType.DEVICE_FAILED, data={'target': "R9", 'error': "timeout"}
            ))
            handler.handle_event(CrawlEvent(
                EventType.LOG_MESSAGE, data={'message': "careful", 'level': LogLevel.WARNING.value}
            ))
            handler.handle_event(CrawlEvent(EventType.STATS_UPDATED, data={'total': 1}))

        messages = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert messages == [
            (logging.WARNING, "FAILED: R9 - timeout"),
            (logging.WARNING, "careful"),
        ]
