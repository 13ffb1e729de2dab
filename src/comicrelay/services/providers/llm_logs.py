# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""In-memory log of recent provider exchanges, served by the debug API."""

from __future__ import annotations

import datetime
import uuid
from typing import Any, Dict, List

MAX_LOG_ENTRIES = 100
# Inline image payloads are clipped to this many characters in the log.
MAX_LOGGED_STRING = 2000

_REDACTED_HEADERS = ("authorization", "x-goog-api-key")

# Global list to store provider communication logs for the current process
llm_logs: List[Dict[str, Any]] = []


def add_llm_log(log_entry: Dict[str, Any]):
    """Add a log entry to the global list, keeping only the last 100 entries."""
    llm_logs.append(log_entry)
    if len(llm_logs) > MAX_LOG_ENTRIES:
        llm_logs.pop(0)


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        k: ("***" if k.lower() in _REDACTED_HEADERS else v) for k, v in headers.items()
    }


def clip_payload(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_LOGGED_STRING:
        return f"{value[:MAX_LOGGED_STRING]}... ({len(value)} chars)"
    if isinstance(value, dict):
        return {k: clip_payload(v) for k, v in value.items()}
    if isinstance(value, list):
        return [clip_payload(v) for v in value]
    return value


def create_log_entry(
    url: str, method: str, headers: Dict[str, str], body: Any, provider: str = ""
) -> Dict[str, Any]:
    """Create a new log entry structure."""
    return {
        "id": str(uuid.uuid4()),
        "provider": provider,
        "timestamp_start": datetime.datetime.now().isoformat(),
        "timestamp_end": None,
        "request": {
            "url": url,
            "method": method,
            "headers": redact_headers(headers),
            "body": clip_payload(body),
        },
        "response": {
            "status_code": None,
            "body": None,
            "error": None,
        },
    }


def finish_log_entry(log_entry: Dict[str, Any], **response: Any) -> None:
    log_entry["timestamp_end"] = datetime.datetime.now().isoformat()
    log_entry["response"].update(clip_payload(response))
