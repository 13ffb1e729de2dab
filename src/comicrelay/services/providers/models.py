# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_TEMPERATURE = 0.8


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class GenerationParams(BaseModel):
    temperature: float = DEFAULT_TEMPERATURE
    # None lets each provider apply its own default.
    max_tokens: Optional[int] = Field(default=None, gt=0)


class TextGenerationRequest(BaseModel):
    """Body of ``/api/deepseek`` and ``/api/gemini-text`` (after the key check)."""

    messages: List[ChatMessage]
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: Optional[int] = Field(default=None, gt=0)

    def params(self) -> GenerationParams:
        return GenerationParams(temperature=self.temperature, max_tokens=self.max_tokens)


class ImageGenerationRequest(BaseModel):
    prompt: str
    referenceImage: Optional[str] = None
