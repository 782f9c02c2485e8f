"""Shared HTTP helpers used by the bucket listing client.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Failures are raised as NetworkError rather than
terminating the process, so the CLI decides how to report them.
"""
from __future__ import annotations

import logging
from typing import Any

import requests

from constants import Constants
from errors import NetworkError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "s3").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object (2xx only).

    Raises:
        NetworkError: On timeout, connection failure or a non-2xx status.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise NetworkError(
                f"{context} request timed out after {Constants.REQUEST_TIMEOUT} seconds",
                url=safe_target,
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise NetworkError(f"{context} connection error: {exc}", url=safe_target) from exc

    if not 200 <= res.status_code < 300:
        logger.warning(
            "HTTP non-2xx response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="non_2xx",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
        raise NetworkError(
            res.reason or f"{context} request failed",
            url=safe_target,
            status=res.status_code,
        )

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
    return res
