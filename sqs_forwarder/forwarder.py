# Copyright 2025 Loopper-AI
# Poll-forward cycle: SQS → HTTP target, failures → error URL
#
# Polling and Delaying alternate forever:
#   receive up to MAX_MESSAGES → forward each in order → sleep POLL_DELAY ms
#
# Non-2xx and transport failures on the forward request are recorded and,
# when ERROR_URL is set, reported there. Every other error propagates.

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from .clients import DeliveryError, HttpClient
from .config import Settings
from .models import ErrorMessage, QueueMessage, WebResult
from .utils import load_headers, reserialize, to_compact_json

logger = logging.getLogger(__name__)


class InvalidMessageError(ValueError):
    """Message body is not valid JSON."""

    def __init__(self, message_id: str, reason: str):
        self.message_id = message_id
        super().__init__(f"Message {message_id or '<unknown>'} is not valid JSON: {reason}")


class MessageQueue(Protocol):
    def receive_messages(self, max_messages: int) -> list[QueueMessage]: ...

    def delete_message(self, receipt_handle: str) -> None: ...


class Forwarder:
    """Forwards queue messages to the configured HTTP endpoint."""

    def __init__(
        self,
        settings: Settings,
        queue: MessageQueue,
        http_client: HttpClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.queue = queue
        self.http = http_client or HttpClient()
        self._sleep = sleep

    def run(self, max_cycles: int | None = None) -> None:
        """Poll, forward and delay until killed, or for max_cycles iterations."""
        logger.info("Running. Poll delay: %d", self.settings.poll_delay)
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.poll_once()
            self.delay()
            cycles += 1

    def poll_once(self) -> int:
        """Receive one batch and forward every message in it. Returns the batch size."""
        messages = self.queue.receive_messages(self.settings.max_messages)
        if messages:
            logger.info("Messages discovered: %d", len(messages))

        for message in messages:
            self.process_message(message)
        return len(messages)

    def delay(self) -> None:
        logger.info("Delaying %d", self.settings.poll_delay)
        self._sleep(self.settings.poll_delay / 1000)

    def process_message(self, message: QueueMessage) -> WebResult | None:
        """Forward one message, escalate on failure, then apply the ack policy.

        Returns None when an invalid message is skipped.
        """
        try:
            body = reserialize(message.body)
        except ValueError as e:
            if not self.settings.skip_invalid_messages:
                raise InvalidMessageError(message.message_id, str(e)) from e
            logger.warning("Skipping invalid message: message_id=%s error=%s", message.message_id, e)
            return None

        result = self.forward(body)
        logger.info("%s", to_compact_json(result.to_dict()))

        if not result.success and self.settings.escalation_enabled:
            self.escalate(result)

        self._acknowledge(message, result)
        return result

    def forward(self, body: str | None) -> WebResult:
        """Send body to HTTP_URL. Transport failures become a result with status 0."""
        settings = self.settings
        headers = load_headers(settings.header_file)
        try:
            return self.http.send(settings.http_url, body, method=settings.http_method, headers=headers)
        except DeliveryError as e:
            logger.warning("Forward failed: url=%s error=%s", e.url, e.reason)
            return WebResult(
                url=settings.http_url,
                request_time=e.request_time,
                response_time=e.response_time,
                status_code=0,
                request_body=body,
                response_body=e.reason,
            )

    def escalate(self, result: WebResult) -> WebResult:
        """POST a failure notice for result to ERROR_URL. The outcome is only logged."""
        headers = load_headers(self.settings.header_error_file)
        payload = to_compact_json(ErrorMessage(self.settings.app_name, result).to_dict())

        logger.info("Sending failure notice:")
        logger.info("%s", payload)

        notice = self.http.send(self.settings.error_url, payload, method="POST", headers=headers)
        logger.debug("Failure notice status=%s", notice.status_code)
        return notice

    def _acknowledge(self, message: QueueMessage, result: WebResult) -> None:
        policy = self.settings.ack_policy
        if policy == "never":
            return
        if policy == "on_success" and not result.success:
            return
        self.queue.delete_message(message.receipt_handle)
