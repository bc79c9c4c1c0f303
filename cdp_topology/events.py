"""
CDP Topology - Crawl Event System.

Structured progress events emitted by the topology engine. Callers
subscribe to drive progress displays or collect statistics; the
LoggingEventHandler forwards everything to the logging module.

Event Flow:
    crawl_started -> depth_started -> device_started ->
    device_complete/device_failed -> neighbor_queued* /
    neighbor_ignored* / neighbor_skipped* -> depth_complete ->
    ... -> crawl_complete
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Crawl event types."""
    # Crawl lifecycle
    CRAWL_STARTED = "crawl_started"
    CRAWL_COMPLETE = "crawl_complete"

    # Depth progression
    DEPTH_STARTED = "depth_started"
    DEPTH_COMPLETE = "depth_complete"

    # Device queries
    DEVICE_STARTED = "device_started"
    DEVICE_COMPLETE = "device_complete"
    DEVICE_FAILED = "device_failed"

    # Neighbor processing
    NEIGHBOR_QUEUED = "neighbor_queued"
    NEIGHBOR_IGNORED = "neighbor_ignored"
    NEIGHBOR_SKIPPED = "neighbor_skipped"

    # Aggregated updates
    STATS_UPDATED = "stats_updated"

    LOG_MESSAGE = "log_message"


class LogLevel(str, Enum):
    """Log message severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CrawlStats:
    """Running crawl statistics."""
    discovered: int = 0
    failed: int = 0
    queue: int = 0
    total: int = 0
    ignored: int = 0
    skipped: int = 0

    current_depth: int = 0
    current_device: str = ""
    status: str = "Ready"

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total == 0:
            return 0.0
        return (self.discovered / self.total) * 100


@dataclass
class CrawlEvent:
    """
    Event emitted by the topology engine.

    All events have a type, timestamp, and event-specific data.
    """
    event_type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        """Get log message if present."""
        return self.data.get("message", "")

    @property
    def target(self) -> str:
        """Get target device if present."""
        return self.data.get("target", "")

    @property
    def depth(self) -> int:
        """Get current depth if present."""
        return self.data.get("depth", 0)


# Type alias for event callback
EventCallback = Callable[[CrawlEvent], None]


class EventEmitter:
    """
    Event emitter for the topology engine.

    Usage:
        emitter = EventEmitter()

        # Subscribe to all events
        emitter.subscribe(my_handler)

        # Subscribe to specific event types
        emitter.subscribe(failed_handler, EventType.DEVICE_FAILED)
    """

    def __init__(self):
        self._listeners: List[tuple] = []
        self._stats = CrawlStats()

    @property
    def stats(self) -> CrawlStats:
        """Get current statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics for new crawl."""
        self._stats = CrawlStats()

    def subscribe(
        self,
        callback: EventCallback,
        event_type: Optional[EventType] = None
    ) -> None:
        """
        Subscribe to events.

        Args:
            callback: Function to call with CrawlEvent
            event_type: If specified, only receive this event type
        """
        self._listeners.append((callback, event_type))

    def unsubscribe(self, callback: EventCallback) -> None:
        """Remove a callback from listeners."""
        self._listeners = [
            (cb, et) for cb, et in self._listeners if cb != callback
        ]

    def clear(self) -> None:
        """Remove all listeners."""
        self._listeners.clear()

    def emit(self, event_type: EventType, **data) -> CrawlEvent:
        """
        Emit an event to all subscribed listeners.

        Listener exceptions are logged and do not interrupt the crawl.
        """
        event = CrawlEvent(
            event_type=event_type,
            timestamp=datetime.now(),
            data=data
        )

        for callback, filter_type in self._listeners:
            if filter_type is None or filter_type == event_type:
                try:
                    callback(event)
                except Exception:
                    logger.exception("Event listener error on %s", event_type.value)

        return event

    # =========================================================================
    # Convenience methods for common events
    # =========================================================================

    def crawl_started(
        self,
        seed: str,
        max_depth: Optional[int],
        ignore: List[str],
        concurrency: int,
    ) -> None:
        """Emit crawl started event and reset stats."""
        self.reset_stats()
        self._stats.queue = 1
        self._stats.status = "Starting"

        self.emit(
            EventType.CRAWL_STARTED,
            seed=seed,
            max_depth=max_depth,
            ignore=ignore,
            concurrency=concurrency,
        )
        self._emit_stats_update()

    def crawl_complete(self, duration_seconds: float, device_count: int) -> None:
        """Emit crawl complete event."""
        self._stats.status = "Complete"
        self._stats.queue = 0

        self.emit(
            EventType.CRAWL_COMPLETE,
            discovered=self._stats.discovered,
            failed=self._stats.failed,
            total=self._stats.total,
            ignored=self._stats.ignored,
            device_count=device_count,
            duration_seconds=duration_seconds,
        )
        self._emit_stats_update()

    def depth_started(self, depth: int, device_count: int) -> None:
        """Emit depth started event."""
        self._stats.current_depth = depth
        self._stats.status = f"Depth {depth}"

        self.emit(
            EventType.DEPTH_STARTED,
            depth=depth,
            device_count=device_count,
        )

    def depth_complete(self, depth: int, discovered: int, failed: int) -> None:
        """Emit depth complete event."""
        self.emit(
            EventType.DEPTH_COMPLETE,
            depth=depth,
            discovered=discovered,
            failed=failed,
        )

    def device_started(self, target: str, depth: int) -> None:
        """Emit device query started event."""
        self._stats.current_device = target
        self._stats.status = f"Querying: {target}"

        self.emit(
            EventType.DEVICE_STARTED,
            target=target,
            depth=depth,
        )

    def device_complete(
        self,
        target: str,
        neighbor_count: int,
        duration_ms: float,
        depth: int,
    ) -> None:
        """Emit device query complete event."""
        self._stats.discovered += 1
        self._stats.total += 1
        self._stats.queue = max(0, self._stats.queue - 1)

        self.emit(
            EventType.DEVICE_COMPLETE,
            target=target,
            neighbor_count=neighbor_count,
            duration_ms=duration_ms,
            depth=depth,
        )
        self._emit_stats_update()

    def device_failed(self, target: str, error: str, depth: int) -> None:
        """Emit device query failed event."""
        self._stats.failed += 1
        self._stats.total += 1
        self._stats.queue = max(0, self._stats.queue - 1)

        self.emit(
            EventType.DEVICE_FAILED,
            target=target,
            error=error,
            depth=depth,
        )
        self._emit_stats_update()

    def neighbor_queued(self, target: str, from_device: str, depth: int) -> None:
        """Emit neighbor queued for the next depth."""
        self._stats.queue += 1

        self.emit(
            EventType.NEIGHBOR_QUEUED,
            target=target,
            from_device=from_device,
            depth=depth,
        )

    def neighbor_ignored(self, target: str, from_device: str) -> None:
        """Emit neighbor pruned by the ignore list."""
        self._stats.ignored += 1

        self.emit(
            EventType.NEIGHBOR_IGNORED,
            target=target,
            from_device=from_device,
        )

    def neighbor_skipped(self, target: str, reason: str, from_device: str) -> None:
        """Emit neighbor skipped (already claimed, self-loop, depth limit)."""
        self._stats.skipped += 1

        self.emit(
            EventType.NEIGHBOR_SKIPPED,
            target=target,
            reason=reason,
            from_device=from_device,
        )

    def log(
        self,
        message: str,
        level: LogLevel = LogLevel.INFO,
        device: str = "",
    ) -> None:
        """Emit free-form log message."""
        self.emit(
            EventType.LOG_MESSAGE,
            message=message,
            level=level.value,
            device=device,
        )

    def _emit_stats_update(self) -> None:
        """Emit aggregated stats update."""
        self.emit(
            EventType.STATS_UPDATED,
            discovered=self._stats.discovered,
            failed=self._stats.failed,
            queue=self._stats.queue,
            total=self._stats.total,
            ignored=self._stats.ignored,
            skipped=self._stats.skipped,
            current_depth=self._stats.current_depth,
            current_device=self._stats.current_device,
            status=self._stats.status,
        )


class LoggingEventHandler:
    """
    Forwards crawl events to a logger.

    Usage:
        emitter.subscribe(LoggingEventHandler().handle_event)
    """

    LEVELS = {
        LogLevel.DEBUG.value: logging.DEBUG,
        LogLevel.INFO.value: logging.INFO,
        LogLevel.WARNING.value: logging.WARNING,
        LogLevel.ERROR.value: logging.ERROR,
    }

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def handle_event(self, event: CrawlEvent) -> None:
        """Log a crawl event at a level suited to its type."""
        data = event.data
        event_type = event.event_type

        if event_type == EventType.STATS_UPDATED:
            return

        if event_type == EventType.LOG_MESSAGE:
            level = self.LEVELS.get(data.get('level', 'info'), logging.INFO)
            self.log.log(level, "%s", event.message)
        elif event_type == EventType.CRAWL_STARTED:
            self.log.info("Crawl started from %s (max depth %s)",
                          data['seed'], data.get('max_depth'))
        elif event_type == EventType.CRAWL_COMPLETE:
            self.log.info("Crawl complete: %d discovered, %d failed in %.1fs",
                          data['discovered'], data['failed'], data['duration_seconds'])
        elif event_type == EventType.DEVICE_COMPLETE:
            self.log.info("OK: %s (%d neighbors, %.0fms)",
                          data['target'], data['neighbor_count'], data['duration_ms'])
        elif event_type == EventType.DEVICE_FAILED:
            self.log.warning("FAILED: %s - %s", data['target'], data['error'])
        else:
            self.log.debug("[%s] %s", event_type.value, data)
