# Copyright 2025 Loopper-AI
# Utility modules

from .headers import HeaderFileError, load_headers
from .json_utils import reserialize, to_compact_json

__all__ = ["HeaderFileError", "load_headers", "reserialize", "to_compact_json"]
