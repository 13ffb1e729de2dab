# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from comicrelay.core.errors import BadRequestError, RelayError

logger = logging.getLogger(__name__)


async def parse_json_body(request: Request) -> dict:
    try:
        payload = await request.json()
    except Exception as exc:
        raise BadRequestError("Invalid JSON body") from exc
    return payload if isinstance(payload, dict) else {}


def ok_json(content: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content)


def error_json(detail: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": detail})


def validation_detail(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


def map_relay_exception(exc: Exception) -> JSONResponse:
    if isinstance(exc, RelayError):
        return error_json(exc.detail, exc.status_code)
    if isinstance(exc, ValidationError):
        return error_json(validation_detail(exc), 400)
    logger.exception("Unhandled relay error")
    return error_json(str(exc), 500)
