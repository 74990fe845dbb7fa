"""Consumer events and listener registry.

Observers register callbacks per event. Callbacks run on the thread that
produced the event: the poll thread for lifecycle events, a worker thread
for per-message events.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.big_payload.shared.logging_utils import get_safe_error_info

logger = logging.getLogger(__name__)


class ConsumerEvents(str, Enum):
    """Named outcome notifications emitted by SqsConsumer."""

    # Lifecycle
    STARTED = "started"
    POLL_ENDED = "poll_ended"
    BATCH_PROCESSED = "batch_processed"
    STOPPED = "stopped"

    # Per message
    MESSAGE_RECEIVED = "message_received"
    MESSAGE_PARSED = "message_parsed"
    MESSAGE_PROCESSED = "message_processed"

    # Errors
    ERROR = "error"
    CONNECTION_ERROR = "connection_error"
    PROCESSING_ERROR = "processing_error"
    PAYLOAD_PARSE_ERROR = "payload_parse_error"
    S3_PAYLOAD_ERROR = "s3_payload_error"
    S3_EXTENDED_PAYLOAD_ERROR = "s3_extended_payload_error"


@dataclass(frozen=True)
class MessageErrorEvent:
    """Payload of every per-message error event.

    Attributes:
        error: The exception describing the failure
        message: The raw SQS message, or for malformed envelopes the parsed
            envelope structure exactly as received
    """

    error: Exception
    message: Any


Listener = Callable[..., Any]


class EventEmitter:
    """Callback registry keyed by ConsumerEvents.

    A listener that raises is logged and skipped; it never interrupts the
    emitting thread or the remaining listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[ConsumerEvents, list[Listener]] = {}
        self._lock = threading.Lock()

    def on(self, event: ConsumerEvents | str, listener: Listener) -> None:
        event = ConsumerEvents(event)
        with self._lock:
            self._listeners.setdefault(event, []).append(listener)

    def off(self, event: ConsumerEvents | str, listener: Listener) -> None:
        event = ConsumerEvents(event)
        with self._lock:
            listeners = self._listeners.get(event, [])
            if listener in listeners:
                listeners.remove(listener)

    def listener_count(self, event: ConsumerEvents | str) -> int:
        with self._lock:
            return len(self._listeners.get(ConsumerEvents(event), []))

    def emit(self, event: ConsumerEvents, *args: Any) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event, []))

        for listener in listeners:
            try:
                listener(*args)
            except Exception as e:
                logger.error(
                    "Event listener failed",
                    extra={"event": event.value, **get_safe_error_info(e)},
                )
