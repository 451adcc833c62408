# Copyright 2025 Loopper-AI
# Service modules for AWS resources

from .sqs_service import SQSService

__all__ = ["SQSService"]
