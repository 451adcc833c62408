# Copyright 2025 Loopper-AI
# Client modules for external services

from .http_client import DeliveryError, HttpClient

__all__ = ["DeliveryError", "HttpClient"]
