"""HTTP access for registry lookups.

``fetch_json`` does not raise on transport problems. It returns a
``JsonResponse`` saying whether the registry answered, with which status, and
what JSON it sent back. The registry client turns that into ``RegistryError``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


@dataclass
class JsonResponse:
    """Outcome of one registry GET.

    ``status_code`` is 0 when no HTTP response arrived; ``error`` then says why.
    ``data`` is only set for a 2xx response whose body decoded as JSON.
    """

    status_code: int = 0
    data: Optional[Any] = None
    error: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.status_code != 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _get_once(url: str, headers: Optional[Dict[str, str]]) -> JsonResponse:
    response = requests.get(url, headers=headers, timeout=Constants.REQUEST_TIMEOUT)
    if not 200 <= response.status_code < 300:
        return JsonResponse(status_code=response.status_code)
    try:
        return JsonResponse(status_code=response.status_code, data=response.json())
    except ValueError:
        return JsonResponse(status_code=response.status_code, error="response body is not JSON")


def fetch_json(url: str, headers: Optional[Dict[str, str]] = None) -> JsonResponse:
    """GET ``url`` and decode its JSON body.

    Transport failures (timeouts, refused connections) are attempted up to
    ``Constants.HTTP_RETRY_MAX`` times. Any HTTP response ends the loop,
    error statuses included.
    """
    attempts = max(1, int(Constants.HTTP_RETRY_MAX))
    outcome = JsonResponse()

    for attempt in range(1, attempts + 1):
        with Timer() as timer:
            try:
                outcome = _get_once(url, headers)
            except requests.Timeout:
                outcome = JsonResponse(error="timeout")
            except requests.RequestException as exc:  # includes ConnectionError
                outcome = JsonResponse(error=str(exc))

        if is_debug_enabled(logger):
            logger.debug(
                "GET %s",
                safe_url(url),
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    attempt=attempt,
                    status_code=outcome.status_code or None,
                    outcome=outcome.error,
                    duration_ms=timer.duration_ms(),
                ),
            )
        if outcome.reachable:
            return outcome

    outcome.error = f"request failed after {attempts} attempt(s): {outcome.error}"
    return outcome
