"""
Stream Module - Kafka Publishing and Consumption of Calendar Events

Publishing is best-effort and never blocks the caller: a message is handed
to the producer's queue once, delivery reports arrive through a callback,
and every failure is logged and reported as ``False`` instead of raised.
Only ``close()`` waits (at most the configured timeout) for pending messages.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, Optional

from confluent_kafka import Consumer, KafkaError, KafkaException, Producer

logger = logging.getLogger(__name__)


class KafkaEventPublisher:
    """
    Publishes JSON payloads to Kafka topics.

    The underlying producer is created lazily, once, so the application can
    start while the broker is down.
    """

    def __init__(self, bootstrap_servers: str, client_id: str = "react-calendar-agent",
                 timeout: float = 5.0, producer_factory: Callable[[Dict[str, Any]], Any] = Producer):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.timeout = timeout
        self._producer_factory = producer_factory
        self._producer = None
        self._lock = threading.Lock()

        self.stats = {
            'delivered': 0,
            'failed': 0
        }

    @property
    def producer(self):
        with self._lock:
            if self._producer is None:
                self._producer = self._producer_factory({
                    'bootstrap.servers': self.bootstrap_servers,
                    'client.id': self.client_id,
                    'message.timeout.ms': int(self.timeout * 1000),
                })
                logger.info(f"Kafka producer created for {self.bootstrap_servers}")
        return self._producer

    def _on_delivery(self, topic: str, key: str, errors: list):
        def callback(err, msg):
            with self._lock:
                if err is not None:
                    self.stats['failed'] += 1
                else:
                    self.stats['delivered'] += 1
            if err is not None:
                errors.append(err)
                logger.warning(f"Kafka delivery to {topic} failed for key {key}: {err}")
        return callback

    def publish(self, topic: str, key: str, payload: Dict[str, Any]) -> bool:
        """
        Queue one message without waiting for the broker.

        Returns:
            False if the message could not be queued or a delivery failure
            was already reported for it, True otherwise
        """
        errors = []

        try:
            value = json.dumps(payload).encode('utf-8')
            producer = self.producer
            producer.produce(topic, key=key.encode('utf-8'), value=value,
                             on_delivery=self._on_delivery(topic, key, errors))
            producer.poll(0)
        except (KafkaException, BufferError, TypeError, ValueError) as e:
            logger.warning(f"Kafka publish to {topic} failed for key {key}: {e}")
            return False

        if errors:
            return False

        logger.debug(f"Queued message {key} for {topic}")
        return True

    def close(self) -> int:
        """
        Flush pending messages before shutdown.

        Returns:
            Number of messages still undelivered after the timeout
        """
        if self._producer is None:
            return 0
        try:
            remaining = self._producer.flush(self.timeout)
        except KafkaException as e:
            logger.error(f"Error flushing producer: {e}")
            return -1
        if remaining > 0:
            logger.warning(f"{remaining} messages failed to flush before shutdown")
        return remaining


class EventStreamConsumer:
    """Reads calendar events back from the stream and hands them to a callback."""

    def __init__(self, bootstrap_servers: str, group_id: str, topic: str,
                 on_event: Optional[Callable[[Dict[str, Any]], None]] = None,
                 consumer_factory: Callable[[Dict[str, Any]], Any] = Consumer):
        self.topic = topic
        self.on_event = on_event or self._log_event
        self.consumer = consumer_factory({
            'bootstrap.servers': bootstrap_servers,
            'group.id': group_id,
            'auto.offset.reset': 'earliest',
        })

    @staticmethod
    def _log_event(event: Dict[str, Any]) -> None:
        logger.info(f"Received event from Kafka: {event}")

    def run(self, max_messages: Optional[int] = None, poll_timeout: float = 1.0) -> int:
        """
        Poll until ``max_messages`` have been handled (forever if None).

        Returns:
            Number of messages handled
        """
        handled = 0
        self.consumer.subscribe([self.topic])
        try:
            while max_messages is None or handled < max_messages:
                msg = self.consumer.poll(poll_timeout)
                if msg is None:
                    continue
                if msg.error():
                    if msg.error().code() == KafkaError._PARTITION_EOF:
                        continue
                    raise KafkaException(msg.error())

                try:
                    event = json.loads(msg.value().decode('utf-8'))
                except (UnicodeDecodeError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping undecodable message on {self.topic}: {e}")
                    continue

                self.on_event(event)
                handled += 1
        finally:
            self.consumer.close()
        return handled
