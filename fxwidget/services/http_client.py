from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the only outbound call is a single JSON GET per refresh.
Non-2xx responses are handed back to the caller (status + parsed body) so rate
providers can tell an explicit provider error from a malformed response. Only
transport failures are retried and raised.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


class HttpError(Exception):
    pass


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: Any  # parsed JSON, or None when the payload was not JSON


def _parse_body(raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError:  # includes JSONDecodeError and UnicodeDecodeError
        return None


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 2, backoff: float = 0.5
) -> HttpResponse:
    last_err: Optional[Exception] = None
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                return HttpResponse(status=resp.status, body=_parse_body(resp.read()))
        except urllib.error.HTTPError as e:
            # Server answered; not a transport failure, do not retry
            body = _parse_body(e.read() or b"")
            return HttpResponse(status=e.code, body=body)
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            last_err = e
            logger.warning("GET %s failed (attempt %d): %s", url, attempt + 1, e)
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
