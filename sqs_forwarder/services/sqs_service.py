# Copyright 2025 Loopper-AI
# SQS queue service

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings
from ..models import QueueMessage

logger = logging.getLogger(__name__)


class SQSService:
    """SQS receive/delete operations for a single queue.

    Errors are logged and re-raised; the forwarder does not recover from
    queue failures.
    """

    def __init__(self, queue_url: str, client=None):
        self.queue_url = queue_url
        self._client = client if client is not None else boto3.client("sqs")

    @classmethod
    def from_settings(cls, settings: Settings) -> SQSService:
        client = boto3.client(
            "sqs",
            aws_access_key_id=settings.sqs_access_key_id,
            aws_secret_access_key=settings.sqs_secret_access_key,
            region_name=settings.sqs_region,
            endpoint_url=settings.sqs_endpoint_url,
        )
        return cls(settings.sqs_queue_url, client)

    def receive_messages(self, max_messages: int) -> list[QueueMessage]:
        """Receive up to max_messages. Returns an empty list when the queue is idle."""
        try:
            response = self._client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=max_messages,
            )
        except ClientError as e:
            logger.error("SQS receive error [%s]: %s", e.response.get("Error", {}).get("Code"), e)
            raise
        except BotoCoreError as e:
            logger.error("SQS receive failed: %s", e)
            raise

        messages = [QueueMessage.from_sqs_message(m) for m in response.get("Messages") or []]
        logger.debug("SQS received: count=%d", len(messages))
        return messages

    def delete_message(self, receipt_handle: str) -> None:
        try:
            self._client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=receipt_handle)
        except ClientError as e:
            logger.error("SQS delete error [%s]: %s", e.response.get("Error", {}).get("Code"), e)
            raise
        except BotoCoreError as e:
            logger.error("SQS delete failed: %s", e)
            raise
        logger.debug("SQS deleted: receipt_handle=%s", receipt_handle[:16])
