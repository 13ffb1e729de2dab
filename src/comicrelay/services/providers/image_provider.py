# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
from typing import Any, Dict, List

from comicrelay.core.config import RelayConfig
from comicrelay.core.errors import (
    InvalidReferenceImageError,
    MissingCredentialError,
    NoImageGeneratedError,
)
from comicrelay.services.providers.gemini_format import (
    find_image_part,
    parse_data_url,
    to_data_url,
)
from comicrelay.services.providers.transport import post_json

logger = logging.getLogger(__name__)


class GeminiImageProvider:
    label = "Gemini"

    def __init__(self, config: RelayConfig, api_key: str | None = None):
        self.config = config
        self.api_key = api_key or config.gemini_api_key
        if not self.api_key:
            raise MissingCredentialError()

    def build_parts(
        self, prompt: str, reference_image: str | None
    ) -> List[Dict[str, Any]]:
        """Text prompt first, then the reference image when it parses."""
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if not reference_image:
            return parts
        try:
            mime_type, data = parse_data_url(reference_image)
        except InvalidReferenceImageError:
            if self.config.strict_reference_image:
                raise
            logger.warning("Reference image is not a base64 data URL; sending prompt only")
            return parts
        logger.info("Adding reference image: %s", mime_type)
        parts.append({"inlineData": {"mimeType": mime_type, "data": data}})
        return parts

    async def generate(self, prompt: str, reference_image: str | None = None) -> Dict[str, Any]:
        base = self.config.gemini_base_url.rstrip("/")
        url = f"{base}/models/{self.config.gemini_image_model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        body = {
            "contents": [{"parts": self.build_parts(prompt, reference_image)}],
            "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
        }

        data = await post_json(
            url=url,
            headers=headers,
            body=body,
            timeout_s=self.config.gemini_timeout_s,
            label=self.label,
            debug=self.config.llm_debug,
        )

        inline = find_image_part(data)
        if inline is None:
            logger.error("No image found in Gemini response")
            raise NoImageGeneratedError()

        mime_type = inline["mimeType"]
        payload = inline.get("data") or ""
        logger.info(
            "Gemini image generated: mime=%s data_length=%d", mime_type, len(payload)
        )
        return {"success": True, "imageData": to_data_url(mime_type, payload)}
