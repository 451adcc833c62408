# Copyright 2025 Loopper-AI
# Data models for the SQS forwarder

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

AckPolicy = Literal["never", "on_success", "always"]


@dataclass(frozen=True)
class QueueMessage:
    """Single message received from SQS."""

    message_id: str
    receipt_handle: str
    body: str

    @classmethod
    def from_sqs_message(cls, raw: dict[str, Any]) -> QueueMessage:
        return cls(
            message_id=raw.get("MessageId") or "",
            receipt_handle=raw.get("ReceiptHandle") or "",
            body=raw.get("Body") or "",
        )


@dataclass(frozen=True)
class WebResult:
    """Outcome of one outbound HTTP request."""

    url: str
    request_time: int
    response_time: int
    status_code: int
    request_body: str | None = None
    response_body: str = ""

    @property
    def success(self) -> bool:
        return 200 <= self.status_code <= 299

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "requestTime": self.request_time,
            "responseTime": self.response_time,
            "statusCode": self.status_code,
            "requestBody": self.request_body,
            "responseBody": self.response_body,
            "isSuccess": self.success,
        }


@dataclass(frozen=True)
class ErrorMessage:
    """Failure notice sent to the error URL."""

    application_name: str
    result: WebResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "applicationName": self.application_name,
            "result": self.result.to_dict(),
        }
