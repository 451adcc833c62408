# Copyright 2025 Loopper-AI
# SQS → HTTP forwarder

from .config import ConfigurationError, MissingConfigurationError, Settings
from .forwarder import Forwarder, InvalidMessageError
from .models import ErrorMessage, QueueMessage, WebResult

__all__ = [
    "ConfigurationError",
    "ErrorMessage",
    "Forwarder",
    "InvalidMessageError",
    "MissingConfigurationError",
    "QueueMessage",
    "Settings",
    "WebResult",
]
