# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the generation relay routes so provider calls never leave the server.

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from comicrelay.api.v1.common import map_relay_exception, ok_json, parse_json_body
from comicrelay.core.config import RelayConfig, get_config
from comicrelay.services.providers.image_provider import GeminiImageProvider
from comicrelay.services.providers.models import (
    ImageGenerationRequest,
    TextGenerationRequest,
)
from comicrelay.services.providers.text_providers import build_text_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generation"])


async def _relay_text(request: Request, provider_name: str, config: RelayConfig) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        # Credentials are checked before the body so nothing goes out without a key.
        provider = build_text_provider(provider_name, config, api_key=payload.get("apiKey"))
        req = TextGenerationRequest.model_validate(payload)
        params = req.params()

        logger.info(
            "%s request received: temperature=%s max_tokens=%s messages=%d",
            provider.label,
            params.temperature,
            provider.max_tokens(params),
            len(req.messages),
        )
        if req.messages:
            logger.info(
                "  first message length=%d last message length=%d",
                len(req.messages[0].content),
                len(req.messages[-1].content),
            )

        data = await provider.generate(req.messages, params)
        return ok_json(data)
    except Exception as exc:
        logger.error("%s relay failed: %s", provider_name, exc)
        return map_relay_exception(exc)


@router.post("/api/deepseek")
async def api_deepseek(
    request: Request, config: RelayConfig = Depends(get_config)
) -> JSONResponse:
    return await _relay_text(request, "deepseek", config)


@router.post("/api/gemini-text")
async def api_gemini_text(
    request: Request, config: RelayConfig = Depends(get_config)
) -> JSONResponse:
    return await _relay_text(request, "gemini-text", config)


@router.post("/api/gemini")
async def api_gemini_image(
    request: Request, config: RelayConfig = Depends(get_config)
) -> JSONResponse:
    try:
        payload = await parse_json_body(request)
        provider = GeminiImageProvider(config, api_key=payload.get("apiKey"))
        req = ImageGenerationRequest.model_validate(payload)

        logger.info(
            "Gemini image request received: prompt_length=%d reference_image=%s",
            len(req.prompt),
            "yes" if req.referenceImage else "no",
        )
        data = await provider.generate(req.prompt, req.referenceImage)
        return ok_json(data)
    except Exception as exc:
        logger.error("Gemini image relay failed: %s", exc)
        return map_relay_exception(exc)
