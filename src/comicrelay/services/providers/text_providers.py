# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Text-generation adapters.

Each adapter turns the generic ``(messages, params)`` pair into its provider's
native request and returns the chat-completion envelope::

    {"choices": [{"message": {"content": str}, "finish_reason": str}],
     "usage": {"total_tokens": int}}

Adapters are looked up by name in ``TEXT_PROVIDERS``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Type

from comicrelay.core.config import RelayConfig
from comicrelay.core.errors import MissingCredentialError
from comicrelay.services.providers.gemini_format import (
    gemini_generation_config,
    gemini_text_to_envelope,
    to_gemini_contents,
)
from comicrelay.services.providers.models import ChatMessage, GenerationParams
from comicrelay.services.providers.transport import post_json

logger = logging.getLogger(__name__)


class TextProvider:
    name: str = ""
    label: str = ""
    default_max_tokens: int = 4000

    def __init__(self, config: RelayConfig, api_key: str | None = None):
        self.config = config
        self.api_key = api_key or self.configured_key()
        if not self.api_key:
            raise MissingCredentialError()

    def configured_key(self) -> str | None:
        return None

    def max_tokens(self, params: GenerationParams) -> int:
        return params.max_tokens or self.default_max_tokens

    async def generate(
        self, messages: Sequence[ChatMessage], params: GenerationParams
    ) -> Dict[str, Any]:
        raise NotImplementedError


class DeepSeekProvider(TextProvider):
    """OpenAI-compatible chat completions; messages are sent unchanged."""

    name = "deepseek"
    label = "DeepSeek"
    default_max_tokens = 4000

    def configured_key(self) -> str | None:
        return self.config.deepseek_api_key

    async def generate(
        self, messages: Sequence[ChatMessage], params: GenerationParams
    ) -> Dict[str, Any]:
        url = self.config.deepseek_base_url.rstrip("/") + "/chat/completions"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        body = {
            "model": self.config.deepseek_model,
            "messages": [m.model_dump() for m in messages],
            "temperature": params.temperature,
            "max_tokens": self.max_tokens(params),
            "stream": False,
        }

        data = await post_json(
            url=url,
            headers=headers,
            body=body,
            timeout_s=self.config.deepseek_timeout_s,
            label=self.label,
            debug=self.config.llm_debug,
        )

        choices = data.get("choices") if isinstance(data, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else None
        if not isinstance(choice, dict):
            choice = {}
        message = choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        usage = data.get("usage") if isinstance(data, dict) else None
        if not isinstance(usage, dict):
            usage = {}
        logger.info(
            "DeepSeek response received: length=%d tokens=%s finish_reason=%s",
            len(content) if isinstance(content, str) else 0,
            usage.get("total_tokens", "N/A"),
            choice.get("finish_reason", "N/A"),
        )
        if choice.get("finish_reason") == "length":
            logger.warning("DeepSeek response was truncated by the max_tokens limit")
        return data


class GeminiTextProvider(TextProvider):
    name = "gemini-text"
    label = "Gemini"
    default_max_tokens = 8000

    def configured_key(self) -> str | None:
        return self.config.gemini_api_key

    async def generate(
        self, messages: Sequence[ChatMessage], params: GenerationParams
    ) -> Dict[str, Any]:
        base = self.config.gemini_base_url.rstrip("/")
        url = f"{base}/models/{self.config.gemini_text_model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        body = {
            "contents": to_gemini_contents(messages),
            "generationConfig": gemini_generation_config(
                params, self.max_tokens(params)
            ),
        }

        data = await post_json(
            url=url,
            headers=headers,
            body=body,
            timeout_s=self.config.gemini_timeout_s,
            label=self.label,
            debug=self.config.llm_debug,
        )

        envelope = gemini_text_to_envelope(data)
        choice = envelope["choices"][0]
        logger.info(
            "Gemini response received: length=%d finish_reason=%s",
            len(choice["message"]["content"]),
            choice["finish_reason"],
        )
        return envelope


TEXT_PROVIDERS: Dict[str, Type[TextProvider]] = {
    DeepSeekProvider.name: DeepSeekProvider,
    GeminiTextProvider.name: GeminiTextProvider,
}


def build_text_provider(
    name: str, config: RelayConfig, api_key: str | None = None
) -> TextProvider:
    try:
        provider_cls = TEXT_PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown text provider: {name}") from None
    return provider_cls(config, api_key=api_key)
