# Copyright 2025 Loopper-AI
# Configuration management for the SQS forwarder
#
# Settings are resolved from an ordered list of sources. Later sources
# override earlier ones: the JSON settings file first, then the environment.

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from .models import AckPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "appsettings.json"
CONFIG_FILE_ENV = "SQS_FORWARDER_CONFIG"

DEFAULT_APP_NAME = "SQS to HTTP"
DEFAULT_POLL_DELAY = 60000
DEFAULT_MAX_MESSAGES = 5
DEFAULT_HTTP_METHOD = "POST"
DEFAULT_HEADER_FILE = "config/headers.json"
DEFAULT_HEADER_ERROR_FILE = "config/headers_error.json"
DEFAULT_ACK_POLICY: AckPolicy = "never"

ACK_POLICIES: tuple[AckPolicy, ...] = ("never", "on_success", "always")

# Numeric keys use -1 to mean "no default".
NO_DEFAULT = -1

_SQS_HOST_RE = re.compile(r"^sqs[.-]([a-z0-9-]+)\.amazonaws\.com", re.IGNORECASE)
_INT_RE = re.compile(r"[+-]?[0-9]+")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class ConfigurationError(ValueError):
    """Configuration could not be loaded."""


class MissingConfigurationError(ConfigurationError):
    """A required key has no value in any source and no default."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing required configuration: {key}")


class ConfigSource(Protocol):
    def get(self, key: str) -> str | None: ...


class EnvironmentSource:
    """Process environment. Keys match case-insensitively."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        environ = os.environ if environ is None else environ
        self._values = {k.upper(): v for k, v in environ.items()}

    def get(self, key: str) -> str | None:
        return self._values.get(key.upper())


class JsonFileSource:
    """Top-level keys of a JSON settings file.

    Nested objects are flattened with ``:`` between key segments and scalar
    values are kept as strings, so ``{"POLL_DELAY": 100}`` reads as ``"100"``.
    A missing file is an empty source.
    """

    def __init__(self, path: str):
        self.path = path
        self._values = _load_json_settings(path)

    def get(self, key: str) -> str | None:
        return self._values.get(key.upper())


def _load_json_settings(path: str) -> dict[str, str]:
    try:
        with open(path, encoding="utf-8") as fh:
            raw = fh.read()
    except FileNotFoundError:
        logger.warning("Settings file not found, using environment only: path=%s", path)
        return {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc

    if not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in settings file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")

    values: dict[str, str] = {}
    _flatten(data, "", values)
    return values


def _flatten(data: dict[str, Any], prefix: str, out: dict[str, str]) -> None:
    for key, value in data.items():
        name = f"{prefix}{key}".upper()
        if isinstance(value, dict):
            _flatten(value, f"{name}:", out)
        elif isinstance(value, str):
            out[name] = value
        elif value is not None:
            out[name] = json.dumps(value)


def _parse_int32(raw: str) -> int | None:
    """Parse a signed 32-bit integer of ASCII digits, allowing surrounding whitespace."""
    text = raw.strip()
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        return None
    return value


class ConfigResolver:
    """Looks keys up in an ordered list of sources; the last hit wins."""

    def __init__(self, sources: Sequence[ConfigSource]):
        self.sources = list(sources)

    def _lookup(self, key: str) -> str | None:
        found = None
        for source in self.sources:
            value = source.get(key)
            if value is not None:
                found = value
        return found

    def resolve(self, key: str, required: bool = False, default: str | None = None) -> str | None:
        value = self._lookup(key)
        if value is not None:
            return value
        if required and not default:
            raise MissingConfigurationError(key)
        return default

    def resolve_int(
        self,
        key: str,
        required: bool = False,
        default: int = NO_DEFAULT,
        minimum: int | None = None,
    ) -> int:
        """Resolve an integer. Unparsable or out-of-range values count as absent."""
        raw = self._lookup(key)
        if raw is not None:
            value = _parse_int32(raw)
            if value is None:
                logger.warning("Ignoring non-numeric value for %s: %r", key, raw)
            elif minimum is None or value >= minimum:
                return value
            else:
                logger.warning("Ignoring %s=%d below minimum %d", key, value, minimum)

        if required and default == NO_DEFAULT:
            raise MissingConfigurationError(key)
        return default

    def resolve_bool(self, key: str, default: bool = False) -> bool:
        raw = self._lookup(key)
        if raw is None:
            return default
        return raw.strip().lower() in ("1", "true", "yes")


def region_from_queue_url(queue_url: str) -> str | None:
    """Extract the AWS region from an SQS queue URL host, if it has one."""
    host = re.sub(r"^[a-z]+://", "", queue_url.strip(), flags=re.IGNORECASE)
    match = _SQS_HOST_RE.match(host)
    return match.group(1).lower() if match else None


@dataclass(frozen=True)
class Settings:
    """Immutable settings snapshot, resolved once at start-up."""

    app_name: str
    sqs_access_key_id: str
    sqs_secret_access_key: str
    sqs_queue_url: str
    http_url: str
    poll_delay: int = DEFAULT_POLL_DELAY
    max_messages: int = DEFAULT_MAX_MESSAGES
    http_method: str = DEFAULT_HTTP_METHOD
    error_url: str | None = None
    header_file: str = DEFAULT_HEADER_FILE
    header_error_file: str = DEFAULT_HEADER_ERROR_FILE
    sqs_region: str | None = None
    sqs_endpoint_url: str | None = None
    ack_policy: AckPolicy = DEFAULT_ACK_POLICY
    skip_invalid_messages: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> Settings:
        queue_url = resolver.resolve("SQS_QUEUE_URL", True)

        ack_policy = (resolver.resolve("ACK_POLICY") or DEFAULT_ACK_POLICY).strip().lower()
        if ack_policy not in ACK_POLICIES:
            raise ConfigurationError(f"ACK_POLICY must be one of {', '.join(ACK_POLICIES)}, got {ack_policy!r}")

        return cls(
            app_name=resolver.resolve("APP_NAME", True, DEFAULT_APP_NAME),
            sqs_access_key_id=resolver.resolve("SQS_ACCESS_KEY_ID", True),
            sqs_secret_access_key=resolver.resolve("SQS_SECRET_ACCESS_KEY", True),
            sqs_queue_url=queue_url,
            poll_delay=resolver.resolve_int("POLL_DELAY", False, DEFAULT_POLL_DELAY, minimum=0),
            max_messages=resolver.resolve_int("MAX_MESSAGES", False, DEFAULT_MAX_MESSAGES, minimum=1),
            http_url=resolver.resolve("HTTP_URL", True),
            http_method=(resolver.resolve("HTTP_METHOD") or DEFAULT_HTTP_METHOD).upper(),
            error_url=resolver.resolve("ERROR_URL"),
            header_file=resolver.resolve("HEADER_FILE", False, DEFAULT_HEADER_FILE),
            header_error_file=resolver.resolve("HEADER_ERROR_FILE", False, DEFAULT_HEADER_ERROR_FILE),
            sqs_region=resolver.resolve("SQS_REGION") or region_from_queue_url(queue_url),
            sqs_endpoint_url=resolver.resolve("SQS_ENDPOINT_URL") or None,
            ack_policy=ack_policy,
            skip_invalid_messages=resolver.resolve_bool("SKIP_INVALID_MESSAGES"),
            log_level=(resolver.resolve("LOG_LEVEL") or "INFO").upper(),
        )

    @classmethod
    def load(cls, config_file: str | None = None, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from the JSON settings file overlaid by the environment."""
        env = EnvironmentSource(environ)
        path = config_file or env.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE
        return cls.from_resolver(ConfigResolver([JsonFileSource(path), env]))

    @property
    def escalation_enabled(self) -> bool:
        return bool(self.error_url)
