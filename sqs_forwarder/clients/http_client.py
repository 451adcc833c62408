# Copyright 2025 Loopper-AI
# HTTP client for forwarding messages to the target and error URLs

from __future__ import annotations

import http.client
import logging
import ssl
import time
import urllib.error
import urllib.request
from typing import Mapping

from ..models import WebResult

logger = logging.getLogger(__name__)

# Fixed, not configurable.
REQUEST_TIMEOUT = 100
JSON_CONTENT_TYPE = "application/json"


class DeliveryError(Exception):
    """The request never produced an HTTP response (DNS, refused, timeout...)."""

    def __init__(self, url: str, reason: str, request_time: int, response_time: int):
        self.url = url
        self.reason = reason
        self.request_time = request_time
        self.response_time = response_time
        super().__init__(f"{url}: {reason}")


def _now_ms() -> int:
    return int(time.time() * 1000)


class HttpClient:
    """Blocking HTTP client that records every response as a WebResult."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT):
        self.timeout = timeout
        self._ssl_ctx = ssl.create_default_context()

    def send(
        self,
        url: str,
        body: str | None = None,
        method: str = "POST",
        headers: Mapping[str, str] | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> WebResult:
        """Send one request. Returns a WebResult for any HTTP status.

        urllib raises HTTPError for non-2xx responses; those are turned into
        a WebResult too. Only transport failures raise DeliveryError.
        """
        request_headers = dict(headers or {})
        if not any(name.lower() == "content-type" for name in request_headers):
            request_headers["Content-Type"] = content_type

        req = urllib.request.Request(
            url,
            data=body.encode("utf-8") if body is not None else None,
            headers=request_headers,
            method=method,
        )

        request_time = _now_ms()
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_ctx) as resp:
                code = resp.getcode()
                response_body = resp.read().decode("utf-8", errors="replace")

        except urllib.error.HTTPError as exc:
            response_body = exc.read().decode("utf-8", errors="replace")
            code = exc.code
            logger.debug("HTTPError: url=%s code=%s", url, code)

        except urllib.error.URLError as exc:
            logger.error("URLError: url=%s reason=%s", url, exc.reason)
            raise DeliveryError(url, f"URLError: {exc.reason}", request_time, _now_ms()) from exc

        except (http.client.HTTPException, OSError) as exc:
            logger.error("Transport error: url=%s error=%s", url, exc)
            raise DeliveryError(url, f"{type(exc).__name__}: {exc}", request_time, _now_ms()) from exc

        return WebResult(
            url=url,
            request_time=request_time,
            response_time=_now_ms(),
            status_code=code,
            request_body=body,
            response_body=response_body,
        )
