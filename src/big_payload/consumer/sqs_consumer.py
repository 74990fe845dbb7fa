"""
SQS Consumer
============

Long-polls an SQS queue, resolves offloaded payloads from S3 and hands the
result to a user handler.

Per-message pipeline (concurrent within a batch):
    received --> transform --> DECODING --> RESOLVING --> PARSING
             --> HANDLING --> ACKNOWLEDGING --> processed

Any failing stage emits its error event and ends the message there without
deleting it. SQS redelivers it after the visibility timeout; the queue's
redrive policy moves it to a dead-letter queue eventually.

For On-Call Engineers:
    - connection_error events: SQS unreachable or credentials rejected. The
      consumer pauses connection_error_timeout_seconds and polls again.
    - error event followed by stopped: the queue does not exist.
    - s3_payload_error: the referenced object is missing or unreadable.
      Check the producer's bucket and any lifecycle expiry rule.
    - s3_extended_payload_error: an Extended Client pointer is malformed.

For Developers:
    - Inject sqs_client/s3_client (MagicMock or moto) in tests.
    - Use run_once() or process_message() when the caller owns scheduling
      (Lambda, cron) instead of start().
"""

import json
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Any

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from src.big_payload.consumer.config import ConsumerConfig, get_consumer_config
from src.big_payload.consumer.events import (
    ConsumerEvents,
    EventEmitter,
    Listener,
    MessageErrorEvent,
)
from src.big_payload.shared.aws_clients import get_s3_client, get_sqs_client
from src.big_payload.shared.constants import LARGE_PAYLOAD_SIZE_ATTRIBUTE
from src.big_payload.shared.envelope import detect_envelope
from src.big_payload.shared.errors import (
    ConfigurationError,
    MalformedArrayShapeError,
    MalformedEnvelopeError,
    MissingRequiredFieldsError,
    PayloadFetchError,
    PayloadParseError,
    ProcessingError,
    TransportConnectionError,
)
from src.big_payload.shared.logging_utils import (
    body_preview,
    get_safe_error_info,
    redact_message_attributes,
)
from src.big_payload.shared.models import ProcessedMessage
from src.big_payload.shared.payload_store import S3PayloadStore
from src.lib.threading_utils import BatchSummary, BatchTracker

logger = logging.getLogger(__name__)

# Transport failures that mean "SQS is unreachable right now"
CONNECTION_EXCEPTIONS = (
    EndpointConnectionError,
    ConnectTimeoutError,
    ConnectionClosedError,
    ReadTimeoutError,
    NoCredentialsError,
)

AUTH_ERROR_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "ExpiredToken",
    "InvalidClientTokenId",
    "InvalidSecurity",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
}

# Polling can never succeed after these
FATAL_ERROR_CODES = {
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
}

MessageHandler = Callable[[ProcessedMessage], Any]
BatchHandler = Callable[[list[ProcessedMessage]], Any]


class ConsumerState(str, Enum):
    """Lifecycle of the poll loop."""

    IDLE = "idle"
    POLLING = "polling"
    STOPPING = "stopping"


class MessageStage(str, Enum):
    """Per-message pipeline stage, used in debug logs."""

    DECODING = "decoding"
    RESOLVING = "resolving"
    PARSING = "parsing"
    HANDLING = "handling"
    ACKNOWLEDGING = "acknowledging"


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def is_connection_error(exc: Exception) -> bool:
    """True for network failures and rejected credentials."""
    if isinstance(exc, CONNECTION_EXCEPTIONS):
        return True
    if isinstance(exc, ClientError):
        status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return status == 403 or _error_code(exc) in AUTH_ERROR_CODES
    return False


def is_fatal_error(exc: Exception) -> bool:
    """True when the queue itself is gone."""
    return _error_code(exc) in FATAL_ERROR_CODES


class SqsConsumer:
    """Polls a queue and delivers resolved payloads to a handler.

    Exactly one of handle_message or handle_batch is required.

    Usage:
        consumer = SqsConsumer(config, handle_message=lambda m: print(m.payload))
        consumer.on(ConsumerEvents.PROCESSING_ERROR, report)
        consumer.start()
        ...
        consumer.stop()
        consumer.wait()
    """

    def __init__(
        self,
        config: ConsumerConfig,
        handle_message: MessageHandler | None = None,
        handle_batch: BatchHandler | None = None,
        parse_payload: Callable[[str], Any] = json.loads,
        transform_message_body: Callable[[str], str] | None = None,
        sqs_client: Any = None,
        s3_client: Any = None,
    ) -> None:
        """Initialize SqsConsumer.

        Args:
            config: Consumer configuration
            handle_message: Called once per message that parsed
            handle_batch: Called once per batch with every message that parsed
            parse_payload: Turns the effective body into the payload
            transform_message_body: Applied to the body before envelope
                detection (e.g. unwrap_sns_notification)
            sqs_client: boto3 SQS client (injected for testing)
            s3_client: boto3 S3 client (injected for testing)

        Raises:
            ConfigurationError: If no handler or both handlers are given
        """
        if (handle_message is None) == (handle_batch is None):
            raise ConfigurationError(
                "Exactly one of handle_message or handle_batch is required"
            )

        self._config = config
        self._handle_message = handle_message
        self._handle_batch = handle_batch
        self._parse_payload = parse_payload
        self._transform = transform_message_body

        self._sqs = sqs_client or get_sqs_client(
            config.region, config.sqs_endpoint_url
        )
        self._store: S3PayloadStore | None = None
        if config.get_payload_from_s3:
            self._store = S3PayloadStore(
                s3_client or get_s3_client(config.region, config.s3_endpoint_url)
            )

        self._events = EventEmitter()
        self._state = ConsumerState.IDLE
        self._state_lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def config(self) -> ConsumerConfig:
        return self._config

    @property
    def state(self) -> ConsumerState:
        with self._state_lock:
            return self._state

    def on(self, event: ConsumerEvents | str, listener: Listener) -> None:
        """Register a listener for an event."""
        self._events.on(event, listener)

    def off(self, event: ConsumerEvents | str, listener: Listener) -> None:
        """Remove a previously registered listener."""
        self._events.off(event, listener)

    def start(self) -> None:
        """Start polling on a background thread.

        Calling start() on a consumer that is already polling does nothing.
        """
        with self._state_lock:
            if self._state != ConsumerState.IDLE:
                logger.warning(
                    "Consumer already running",
                    extra={"state": self._state.value},
                )
                return
            self._state = ConsumerState.POLLING
            self._stop_requested.clear()
            self._thread = threading.Thread(
                target=self._poll_loop, name="sqs-consumer", daemon=True
            )

        logger.info(
            "Consumer started",
            extra={
                "queue_url": self._config.queue_url,
                "batch_size": self._config.batch_size,
                "wait_time_seconds": self._config.wait_time_seconds,
            },
        )
        self._events.emit(ConsumerEvents.STARTED)
        self._thread.start()

    def stop(self) -> None:
        """Ask the poll loop to stop before its next receive call.

        In-flight messages are not interrupted. Use wait() to block until
        the loop has exited.
        """
        with self._state_lock:
            if self._state != ConsumerState.POLLING:
                return
            self._state = ConsumerState.STOPPING
        self._stop_requested.set()
        logger.info("Consumer stop requested", extra={"queue_url": self._config.queue_url})

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the poll thread exits. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def run_once(self) -> BatchSummary | None:
        """Run one receive-and-process cycle on the calling thread.

        Returns:
            BatchSummary of the batch, or None if the receive call failed
            (the failure is reported through events)
        """
        summary, _ = self._poll_cycle()
        return summary

    def process_message(
        self, raw: dict[str, Any], delete_after_processing: bool = True
    ) -> ProcessedMessage | None:
        """Run the per-message pipeline on one message without polling.

        Args:
            raw: Message in receive_message shape (see
                raw_message_from_lambda_record for Lambda events)
            delete_after_processing: Delete the message from the queue after
                the handler succeeds. Lambda event source mappings delete on
                their own, so pass False there.

        Returns:
            The ProcessedMessage if the handler succeeded, else None (the
            failure is reported through events)
        """
        processed = self._prepare_safely(raw)
        if processed is None:
            return None
        if not self._deliver([processed], acknowledge=delete_after_processing):
            return None
        return processed

    # Poll loop

    def _poll_loop(self) -> None:
        try:
            while not self._stop_requested.is_set():
                _, error = self._poll_cycle()
                if error is None:
                    continue
                if is_fatal_error(error):
                    logger.error(
                        "Queue unavailable, stopping consumer",
                        extra={"queue_url": self._config.queue_url},
                    )
                    self._stop_requested.set()
                elif is_connection_error(error):
                    # Pauses are interruptible by stop()
                    self._stop_requested.wait(
                        self._config.connection_error_timeout_seconds
                    )
                else:
                    self._stop_requested.wait(self._config.poll_error_timeout_seconds)
        finally:
            with self._state_lock:
                self._state = ConsumerState.IDLE
            logger.info("Consumer stopped", extra={"queue_url": self._config.queue_url})
            self._events.emit(ConsumerEvents.STOPPED)

    def _poll_cycle(self) -> tuple[BatchSummary | None, Exception | None]:
        try:
            try:
                messages = self._receive()
            except Exception as e:
                self._report_poll_error(e)
                return None, e

            summary = self._process_batch(messages)
            if summary.received:
                self._events.emit(ConsumerEvents.BATCH_PROCESSED, summary)
            return summary, None
        finally:
            self._events.emit(ConsumerEvents.POLL_ENDED)

    def _receive(self) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "QueueUrl": self._config.queue_url,
            "MaxNumberOfMessages": self._config.batch_size,
            "WaitTimeSeconds": self._config.wait_time_seconds,
            "MessageAttributeNames": ["All"],
        }
        if self._config.visibility_timeout is not None:
            params["VisibilityTimeout"] = self._config.visibility_timeout

        response = self._sqs.receive_message(**params)
        messages = response.get("Messages", [])
        logger.debug("Batch received", extra={"count": len(messages)})
        return messages

    def _report_poll_error(self, error: Exception) -> None:
        if is_connection_error(error):
            logger.warning(
                "Queue connection failed",
                extra={
                    "queue_url": self._config.queue_url,
                    "retry_in_seconds": self._config.connection_error_timeout_seconds,
                    **get_safe_error_info(error),
                },
            )
            connection_error = TransportConnectionError(
                f"Cannot reach queue {self._config.queue_url}: {error}"
            )
            connection_error.__cause__ = error
            self._events.emit(ConsumerEvents.CONNECTION_ERROR, connection_error)
            return

        logger.error(
            "Polling failed",
            extra={"queue_url": self._config.queue_url, **get_safe_error_info(error)},
        )
        self._events.emit(ConsumerEvents.ERROR, error)

    # Batch processing

    def _process_batch(self, messages: list[dict[str, Any]]) -> BatchSummary:
        tracker = BatchTracker(len(messages))
        if not messages:
            return tracker.summary()

        workers = min(len(messages), self._config.batch_size)
        # (future, messages it covers); the executor drains all of them on exit
        work: list[tuple[Future, list[dict[str, Any]]]] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            if self._handle_batch is None:
                for raw in messages:
                    future = executor.submit(self._process_one, raw, tracker)
                    work.append((future, [raw]))
            else:
                prepared = [
                    (executor.submit(self._prepare_safely, raw), [raw])
                    for raw in messages
                ]
                work.extend(prepared)
                ready = []
                for future, _ in prepared:
                    if future.exception() is not None:
                        continue
                    if future.result() is None:
                        tracker.failed()
                    else:
                        ready.append(future.result())
                if ready:
                    delivery = executor.submit(self._deliver, ready, True, tracker)
                    work.append((delivery, [p.message for p in ready]))

        for future, covered in work:
            error = future.exception()
            if error is None:
                continue
            for raw in covered:
                self._report_message_error(
                    ConsumerEvents.PROCESSING_ERROR,
                    ProcessingError(f"Message worker crashed: {error!r}"),
                    raw,
                    cause=error,
                )
        tracker.fail_outstanding()

        summary = tracker.summary()
        logger.info(
            "Batch processed",
            extra={
                "received": summary.received,
                "processed": summary.processed,
                "failed": summary.failed,
            },
        )
        return summary

    def _process_one(self, raw: dict[str, Any], tracker: BatchTracker) -> None:
        processed = self._prepare_safely(raw)
        if processed is None:
            tracker.failed()
            return
        self._deliver([processed], acknowledge=True, tracker=tracker)

    def _prepare_safely(self, raw: dict[str, Any]) -> ProcessedMessage | None:
        try:
            return self._prepare(raw)
        except Exception as e:
            # Worker threads must always report a terminal outcome
            self._report_message_error(
                ConsumerEvents.PROCESSING_ERROR,
                ProcessingError(f"Unexpected pipeline failure: {e}"),
                raw,
                cause=e,
            )
            return None

    # Per-message stages

    def _prepare(self, raw: dict[str, Any]) -> ProcessedMessage | None:
        """Decode, resolve and parse one message.

        Returns None after reporting the failure when any stage fails.
        """
        self._events.emit(ConsumerEvents.MESSAGE_RECEIVED, raw)
        message_id = raw.get("MessageId")

        body = raw.get("Body", "")
        if self._transform is not None:
            try:
                body = self._transform(body)
            except Exception as e:
                self._report_message_error(
                    ConsumerEvents.PROCESSING_ERROR,
                    ProcessingError(f"Message body transform failed: {e}"),
                    raw,
                    cause=e,
                )
                return None

        self._log_stage(MessageStage.DECODING, message_id)
        attributes = raw.get("MessageAttributes") or {}
        try:
            detected = detect_envelope(
                body,
                compatibility=self._config.extended_library_compatibility,
                has_size_attribute=LARGE_PAYLOAD_SIZE_ATTRIBUTE in attributes,
            )
        except MalformedEnvelopeError as e:
            event = (
                ConsumerEvents.S3_EXTENDED_PAYLOAD_ERROR
                if isinstance(e, (MalformedArrayShapeError, MissingRequiredFieldsError))
                else ConsumerEvents.S3_PAYLOAD_ERROR
            )
            logger.warning(
                "Malformed payload envelope",
                extra={
                    "message_id": message_id,
                    "body_preview": body_preview(body),
                    "attributes": redact_message_attributes(attributes),
                    **get_safe_error_info(e),
                },
            )
            self._events.emit(event, MessageErrorEvent(error=e, message=e.parsed))
            return None

        reference = detected.reference
        effective_body: str | bytes = body
        if reference is not None:
            if self._store is None:
                processed = ProcessedMessage(message=raw, s3_payload_meta=reference)
                self._events.emit(ConsumerEvents.MESSAGE_PARSED, processed)
                return processed

            self._log_stage(MessageStage.RESOLVING, message_id)
            try:
                effective_body = self._store.get(reference.bucket, reference.key)
            except PayloadFetchError as e:
                self._report_message_error(ConsumerEvents.S3_PAYLOAD_ERROR, e, raw)
                return None

        self._log_stage(MessageStage.PARSING, message_id)
        try:
            if isinstance(effective_body, bytes):
                effective_body = effective_body.decode("utf-8")
            payload = self._parse_payload(effective_body)
        except Exception as e:
            self._report_message_error(
                ConsumerEvents.PAYLOAD_PARSE_ERROR,
                PayloadParseError(f"Failed to parse message payload: {e}"),
                raw,
                cause=e,
            )
            return None

        processed = ProcessedMessage(
            message=raw, payload=payload, s3_payload_meta=reference
        )
        self._events.emit(ConsumerEvents.MESSAGE_PARSED, processed)
        return processed

    def _deliver(
        self,
        batch: list[ProcessedMessage],
        acknowledge: bool,
        tracker: BatchTracker | None = None,
    ) -> bool:
        """Run the handler on parsed messages, then acknowledge them.

        Returns True when every message was handled and acknowledged.
        """
        for processed in batch:
            self._log_stage(MessageStage.HANDLING, processed.message_id)
        try:
            if self._handle_batch is not None:
                self._handle_batch(batch)
            else:
                for processed in batch:
                    self._handle_message(processed)
        except Exception as e:
            for processed in batch:
                self._report_message_error(
                    ConsumerEvents.PROCESSING_ERROR,
                    ProcessingError(f"Message handler failed: {e}"),
                    processed.message,
                    cause=e,
                )
                if tracker is not None:
                    tracker.failed()
            return False

        all_acknowledged = True
        for processed in batch:
            if acknowledge and not self._acknowledge(processed):
                all_acknowledged = False
                if tracker is not None:
                    tracker.failed()
                continue
            self._events.emit(ConsumerEvents.MESSAGE_PROCESSED, processed)
            if tracker is not None:
                tracker.succeeded()
        return all_acknowledged

    def _acknowledge(self, processed: ProcessedMessage) -> bool:
        self._log_stage(MessageStage.ACKNOWLEDGING, processed.message_id)
        try:
            self._sqs.delete_message(
                QueueUrl=self._config.queue_url,
                ReceiptHandle=processed.receipt_handle,
            )
        except Exception as e:
            self._report_message_error(
                ConsumerEvents.PROCESSING_ERROR,
                ProcessingError(f"Failed to delete message: {e}"),
                processed.message,
                cause=e,
            )
            return False
        return True

    def _report_message_error(
        self,
        event: ConsumerEvents,
        error: Exception,
        raw: dict[str, Any],
        cause: BaseException | None = None,
    ) -> None:
        if cause is not None:
            error.__cause__ = cause
        logger.warning(
            "Message processing failed",
            extra={
                "event": event.value,
                "message_id": raw.get("MessageId"),
                **get_safe_error_info(error),
            },
        )
        self._events.emit(event, MessageErrorEvent(error=error, message=raw))

    @staticmethod
    def _log_stage(stage: MessageStage, message_id: str | None) -> None:
        logger.debug(
            "Message stage", extra={"stage": stage.value, "message_id": message_id}
        )


def create_sqs_consumer(
    config: ConsumerConfig | None = None,
    handle_message: MessageHandler | None = None,
    **kwargs: Any,
) -> SqsConsumer:
    """Factory function to create an SqsConsumer.

    Falls back to environment configuration when config is omitted.
    """
    return SqsConsumer(
        config or get_consumer_config(), handle_message=handle_message, **kwargs
    )
