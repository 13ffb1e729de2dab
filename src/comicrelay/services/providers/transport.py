# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the outbound provider transport so every relay call shares timeout and error mapping.

"""Single outbound POST used by every provider adapter.

Maps httpx failures and provider error bodies onto the relay error taxonomy:

- timeout                      -> UpstreamTimeoutError (504)
- connection reset / refused   -> UpstreamConnectionLostError (503)
- status >= 400                -> UpstreamError (provider status)
- 2xx with a non-JSON body     -> UpstreamError (502)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import httpx

from comicrelay.core.errors import (
    RelayError,
    UpstreamConnectionLostError,
    UpstreamError,
    UpstreamTimeoutError,
)
from comicrelay.services.providers.llm_logs import (
    add_llm_log,
    create_log_entry,
    finish_log_entry,
)

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


def build_timeout(timeout_s: float | None) -> httpx.Timeout:
    if not timeout_s:
        return httpx.Timeout(None)
    return httpx.Timeout(float(timeout_s))


def upstream_error_message(data: Any, label: str) -> str:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return f"{label} API error"


async def post_json(
    *,
    url: str,
    headers: Dict[str, str],
    body: Dict[str, Any],
    timeout_s: float | None,
    label: str,
    debug: bool = False,
) -> Any:
    """POST ``body`` to ``url`` and return the decoded JSON response."""
    log_entry = create_log_entry(url, "POST", headers, body, provider=label)
    add_llm_log(log_entry)

    if debug:
        logger.debug(
            "%s request: url=%s headers=%s body=%s",
            label,
            url,
            log_entry["request"]["headers"],
            log_entry["request"]["body"],
        )

    async with httpx.AsyncClient(timeout=build_timeout(timeout_s)) as client:
        try:
            # One deadline for the whole exchange; httpx.Timeout only bounds each phase.
            r = await asyncio.wait_for(
                client.post(url, headers=headers, json=body), timeout=timeout_s or None
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            finish_log_entry(log_entry, error=str(exc) or "timeout")
            logger.error("%s request timed out (%ss exceeded)", label, timeout_s)
            bound = f" (>{timeout_s:g}s)" if timeout_s else ""
            raise UpstreamTimeoutError(
                f"Request timeout. {label} API took too long to respond{bound}."
            ) from exc
        except _CONNECTION_ERRORS as exc:
            finish_log_entry(log_entry, error=str(exc))
            logger.error("Connection lost with %s API: %s", label, exc)
            raise UpstreamConnectionLostError(
                f"Connection lost with {label} API. Please try again."
            ) from exc
        except httpx.HTTPError as exc:
            finish_log_entry(log_entry, error=str(exc))
            logger.error("%s request failed: %s", label, exc)
            raise RelayError(str(exc) or f"{label} request failed", 500) from exc

    status = r.status_code
    try:
        data = r.json()
    except ValueError:
        data = None

    finish_log_entry(log_entry, status_code=status, body=data)
    if debug:
        logger.debug("%s response: status=%s body=%s", label, status, data)

    if status >= 400:
        logger.error("%s API error (%s): %s", label, status, data)
        if data is None:
            raise UpstreamError(f"{label} API error: {r.reason_phrase}", status)
        raise UpstreamError(upstream_error_message(data, label), status)

    if data is None:
        logger.error("Failed to parse %s response (status %s)", label, status)
        raise UpstreamError(
            f"Invalid JSON response from {label} API. Response may be truncated.",
            502,
        )
    return data
