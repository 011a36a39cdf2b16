"""
Best-effort change notifications over Redis pub/sub.

This module provides:
- A broker abstraction with a Redis implementation
- A publisher that serializes views as pretty-printed JSON and never lets
  a serialization or transport failure reach the caller
"""

import asyncio
from contextlib import nullcontext
from typing import Callable, ContextManager, Optional, Protocol

import redis.asyncio as redis
import structlog
from pydantic import BaseModel

from utilities.config import BffConfig
from utilities.metrics import MetricsRecorder

logger = structlog.get_logger(__name__)

SpanHook = Callable[..., ContextManager]

PUBLISHER_OPERATION = "NotificationPublisher"


class MessageBroker(Protocol):
    """Transport used by the publisher."""

    async def publish(self, channel: str, message: str) -> int:
        ...

    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        ...


class RedisBroker:
    """Redis pub/sub transport."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_config(cls, config: BffConfig) -> "RedisBroker":
        client = redis.Redis.from_url(
            config.redis_url,
            socket_timeout=config.notification_timeout,
            socket_connect_timeout=config.notification_timeout,
            decode_responses=True,
        )
        return cls(client)

    async def publish(self, channel: str, message: str) -> int:
        """
        Publish a message to a channel.

        Returns:
            Number of subscribers that received the message
        """
        return await self.client.publish(channel, message)

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()


class NotificationPublisher:
    """Fire-and-forget publisher for resource change events."""

    def __init__(
        self,
        broker: MessageBroker,
        metrics: MetricsRecorder,
        timeout: float = 2.0,
        span_hook: Optional[SpanHook] = None,
    ):
        """
        Initialize the publisher.

        Args:
            broker: Message transport
            metrics: Recorder that receives an error count on failure
            timeout: Seconds a publish may take before it counts as failed
            span_hook: Optional context manager factory wrapped around each
                publish, called as ``span_hook(name, topic=...)``
        """
        self.broker = broker
        self.metrics = metrics
        self.timeout = timeout
        self.span_hook = span_hook
        self.logger = logger.bind(component="notification_publisher")

    async def publish(
        self,
        topic: str,
        payload: BaseModel,
        operation: Optional[str] = None,
    ) -> bool:
        """
        Serialize ``payload`` and send it to ``topic``.

        Failures are logged and counted against ``operation`` but never
        raised.

        Args:
            topic: Broker channel name
            payload: View to publish
            operation: Operation name charged with the error count on failure

        Returns:
            True if the broker accepted the message, False otherwise
        """
        try:
            span = self.span_hook("redisPushNotification", topic=topic) if self.span_hook else nullcontext()
            with span:
                message = payload.model_dump_json(by_alias=True, indent=2)
                receivers = await asyncio.wait_for(
                    self.broker.publish(topic, message), timeout=self.timeout
                )
        except Exception as e:
            self.metrics.record_error(operation or PUBLISHER_OPERATION)
            self.logger.error(
                "Push Notification Error",
                topic=topic,
                operation=operation,
                error_type=type(e).__name__,
                error=str(e)
            )
            return False

        self.logger.debug("Notification published", topic=topic, receivers=receivers)
        return True
