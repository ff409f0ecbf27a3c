"""Publishing and consuming process messages over a RabbitMQ queue."""

from __future__ import annotations

import json
import logging
import ssl
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pika
from pika.exceptions import AMQPError

from procflow.model import Message

logger = logging.getLogger(__name__)

MAX_MESSAGE_RETRIES = 3
RETRY_DELAY = 2.0
RECONNECT_BACKOFF = 30.0
CONSUME_POLL_INTERVAL = 1.0


class RabbitMQError(Exception):
    """Raised when talking to the broker fails."""


@dataclass(frozen=True)
class TLSConfig:
    """Files for a mutually authenticated TLS connection."""

    ca_file: str
    cert_file: str
    key_file: str


def _settle(action: Callable[[], object], what: str) -> None:
    try:
        action()
    except Exception as err:
        logger.error("failed to %s message: %s", what, err)


def deliver(
    body: bytes | str,
    callback: Callable[[Message], object],
    ack: Callable[[], object],
    nack: Callable[[], object],
    sleep: Callable[[float], object] = time.sleep,
) -> bool:
    """Decode ``body`` and hand it to ``callback``, retrying failures.

    Acknowledges the delivery on success and rejects it (towards the dead-letter
    queue) when the body is malformed or every attempt failed. Returns whether
    the message was acknowledged.
    """
    try:
        message = Message.from_dict(json.loads(body))
    except (ValueError, TypeError) as err:
        logger.error("invalid message: %s", err)
        _settle(nack, "nack")
        return False

    for attempt in range(1, MAX_MESSAGE_RETRIES + 1):
        try:
            callback(message)
        except Exception as err:
            logger.error(
                "cb failed (attempt %d/%d): %s", attempt, MAX_MESSAGE_RETRIES, err
            )
            if attempt == MAX_MESSAGE_RETRIES:
                logger.error("max retries reached, discarding message")
                _settle(nack, "nack")
                return False
            sleep(attempt * RETRY_DELAY)
            continue
        _settle(ack, "ack")
        return True
    return False


class RabbitMQClient:
    """A connection to one durable queue with its dead-letter queue."""

    def __init__(self, url: str, queue: str, tls_config: TLSConfig | None = None) -> None:
        self.url = url
        self.queue = queue
        self.tls_config = tls_config
        self._lock = threading.Lock()
        self._connection = None
        self._channel = None
        self._connect()

    def _ssl_options(self) -> pika.SSLOptions:
        assert self.tls_config is not None
        try:
            ca_data = Path(self.tls_config.ca_file).read_text(encoding="utf-8")
        except OSError as err:
            raise RabbitMQError(f"failed to read CA certificate: {err}") from err

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            context.load_cert_chain(self.tls_config.cert_file, self.tls_config.key_file)
        except (OSError, ssl.SSLError) as err:
            raise RabbitMQError(f"failed to load certificate and key: {err}") from err
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        try:
            context.load_verify_locations(cadata=ca_data)
        except (ssl.SSLError, ValueError):
            logger.warning("no usable CA certificates in %s", self.tls_config.ca_file)
        return pika.SSLOptions(context)

    def _connect(self) -> None:
        with self._lock:
            params = pika.URLParameters(self.url)
            if self.tls_config is not None:
                params.ssl_options = self._ssl_options()
                failure = "failed to connect to RabbitMQ over TLS"
            else:
                failure = "failed to connect to RabbitMQ"
            try:
                connection = pika.BlockingConnection(params)
            except (AMQPError, OSError) as err:
                raise RabbitMQError(f"{failure}: {err}") from err

            dlq = f"{self.queue}.dlq"
            step = "failed to open channel"
            try:
                channel = connection.channel()
                step = "failed to declare queue"
                channel.queue_declare(
                    self.queue,
                    durable=True,
                    arguments={
                        "x-dead-letter-exchange": "",
                        "x-dead-letter-routing-key": dlq,
                    },
                )
                step = "failed to declare DLQ"
                channel.queue_declare(dlq, durable=True)
            except AMQPError as err:
                try:
                    connection.close()
                except AMQPError as close_err:
                    raise RabbitMQError(f"{step}: {err}; {close_err}") from err
                raise RabbitMQError(f"{step}: {err}") from err

            self._connection = connection
            self._channel = channel

    def publish(self, message: Message) -> None:
        """Send ``message`` as JSON to the queue."""
        try:
            body = json.dumps(message.to_dict())
        except (TypeError, ValueError) as err:
            raise RabbitMQError(f"failed to marshal notification: {err}") from err
        with self._lock:
            try:
                self._channel.basic_publish(
                    exchange="",
                    routing_key=self.queue,
                    body=body,
                    properties=pika.BasicProperties(content_type="application/json"),
                )
            except AMQPError as err:
                raise RabbitMQError(f"failed to publish message: {err}") from err

    def consume(
        self,
        callback: Callable[[Message], object],
        stop_event: threading.Event | None = None,
    ) -> None:
        """Feed queued messages to ``callback`` until ``stop_event`` is set."""
        stop_event = stop_event if stop_event is not None else threading.Event()
        with self._lock:
            try:
                deliveries = self._channel.consume(
                    self.queue,
                    auto_ack=False,
                    inactivity_timeout=CONSUME_POLL_INTERVAL,
                )
            except AMQPError as err:
                raise RabbitMQError(f"failed to start consumer: {err}") from err

        channel = self._channel
        try:
            for method, _properties, body in deliveries:
                if stop_event.is_set():
                    logger.info("stopping RabbitMQ consumer")
                    channel.cancel()
                    return
                if method is None:
                    continue
                tag = method.delivery_tag
                deliver(
                    body,
                    callback,
                    ack=lambda: channel.basic_ack(tag),
                    nack=lambda: channel.basic_nack(tag, requeue=False),
                )
        except AMQPError as err:
            raise RabbitMQError(f"channel closed: {err}") from err
        raise RabbitMQError("channel closed")

    def close(self) -> None:
        """Close the channel and then the connection."""
        error: RabbitMQError | None = None
        try:
            self._channel.close()
        except AMQPError as err:
            error = RabbitMQError(f"failed to close channel: {err}")
        try:
            self._connection.close()
        except AMQPError as err:
            if error is None:
                error = RabbitMQError(f"failed to close connection: {err}")
        if error is not None:
            raise error