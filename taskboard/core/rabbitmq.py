import json
import logging
import threading
from typing import Any, Dict, Optional
import pika
import pika.exceptions

from .config import settings

logger = logging.getLogger(__name__)


class RabbitMQPublisher:
    """RabbitMQ publisher for domain events.

    Publishing is best effort: a disabled or unreachable broker is logged
    and reported through the return value, never raised to the caller.
    Sync endpoints run on a threadpool and pika's BlockingConnection is not
    thread-safe, so connect, publish and close all hold ``self._lock``.
    """

    def __init__(self, url: str, exchange: str, enabled: bool = True):
        self.url = url
        self.exchange = exchange
        self.enabled = enabled
        self.connection = None
        self.channel = None
        self._lock = threading.Lock()

    def connect(self) -> bool:
        """Establish connection to RabbitMQ"""
        with self._lock:
            return self._connect()

    def _connect(self) -> bool:
        try:
            parameters = pika.URLParameters(self.url)
            parameters.heartbeat = 600
            parameters.blocked_connection_timeout = 300

            self.connection = pika.BlockingConnection(parameters)
            self.channel = self.connection.channel()

            # Declare exchange
            self.channel.exchange_declare(
                exchange=self.exchange,
                exchange_type='topic',
                durable=True
            )

            logger.info(f"Connected to RabbitMQ exchange '{self.exchange}'")
            return True

        except pika.exceptions.AMQPError as e:
            logger.warning(f"Could not connect to RabbitMQ: {e}")
            self.connection = None
            self.channel = None
            return False

    def publish_event(self, event_type: str, data: Dict[str, Any]) -> bool:
        """Publish event to RabbitMQ, routed by its type"""
        if not self.enabled:
            logger.debug(f"RabbitMQ disabled, dropping {event_type} event")
            return False

        message = {
            'event_type': event_type,
            'data': data
        }

        with self._lock:
            if not self.connection or self.connection.is_closed:
                if not self._connect():
                    logger.warning(f"Failed to publish {event_type} event - no connection")
                    return False

            try:
                self.channel.basic_publish(
                    exchange=self.exchange,
                    routing_key=event_type,
                    body=json.dumps(message, default=str),
                    properties=pika.BasicProperties(
                        delivery_mode=2,  # Persistent
                        content_type='application/json'
                    )
                )
            except pika.exceptions.AMQPError as e:
                logger.error(f"Error publishing {event_type} event: {e}")
                self.connection = None
                self.channel = None
                return False

        logger.info(f"Published {event_type} event to RabbitMQ")
        return True

    def close(self):
        """Close connection"""
        with self._lock:
            try:
                if self.connection and not self.connection.is_closed:
                    self.connection.close()
                    logger.info("RabbitMQ connection closed")
            except pika.exceptions.AMQPError as e:
                logger.error(f"Error closing connection: {e}")
            finally:
                self.connection = None
                self.channel = None


_publisher: Optional[RabbitMQPublisher] = None
_publisher_lock = threading.Lock()


def get_event_publisher() -> RabbitMQPublisher:
    """Publisher dependency; one connection is shared by the process."""
    global _publisher
    if _publisher is None:
        with _publisher_lock:
            if _publisher is None:
                _publisher = RabbitMQPublisher(
                    url=settings.rabbitmq_url,
                    exchange=settings.rabbitmq_exchange,
                    enabled=settings.rabbitmq_enabled,
                )
    return _publisher
