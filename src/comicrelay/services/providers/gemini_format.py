# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the Gemini wire-format conversions so adapters stay free of shape details.

"""Conversions between the generic chat shape and Gemini ``generateContent``.

Gemini has no ``system`` role and calls the assistant ``model``. A leading
system prompt is folded into the first user turn; any other system message
is sent as a plain user turn.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence, Tuple

from comicrelay.core.errors import EmptyGenerationError, InvalidReferenceImageError
from comicrelay.services.providers.models import ChatMessage, GenerationParams

GEMINI_TOP_P = 0.95
GEMINI_TOP_K = 40

_ROLE_MAP = {"system": "user", "user": "user", "assistant": "model"}

DATA_URL_RE = re.compile(r"data:([^;]+);base64,(.+)")


def to_gemini_contents(messages: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
    contents = [
        {"role": _ROLE_MAP[m.role], "parts": [{"text": m.content}]} for m in messages
    ]
    if (
        len(messages) >= 2
        and messages[0].role == "system"
        and messages[1].role == "user"
    ):
        merged = f"{messages[0].content}\n\n{messages[1].content}"
        contents[0:2] = [{"role": "user", "parts": [{"text": merged}]}]
    return contents


def gemini_generation_config(params: GenerationParams, max_tokens: int) -> Dict[str, Any]:
    return {
        "temperature": params.temperature,
        "maxOutputTokens": max_tokens,
        "topP": GEMINI_TOP_P,
        "topK": GEMINI_TOP_K,
    }


def _first_candidate(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return {}
    return candidates[0]


def _candidate_parts(candidate: Dict[str, Any]) -> List[Dict[str, Any]]:
    content = candidate.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    return [p for p in parts or [] if isinstance(p, dict)]


def gemini_text_to_envelope(data: Any) -> Dict[str, Any]:
    """Unwrap ``candidates[0].content.parts[0].text`` into the chat-completion envelope."""
    candidate = _first_candidate(data)
    parts = _candidate_parts(candidate)
    text = parts[0].get("text") if parts else None
    if not text:
        raise EmptyGenerationError()

    usage = data.get("usageMetadata") or {}
    return {
        "choices": [
            {
                "message": {"content": text},
                "finish_reason": (
                    "stop" if candidate.get("finishReason") == "STOP" else "length"
                ),
            }
        ],
        "usage": {"total_tokens": usage.get("totalTokenCount") or 0},
    }


def parse_data_url(value: str) -> Tuple[str, str]:
    """Split ``data:<mime>;base64,<data>`` into ``(mime, data)``."""
    match = DATA_URL_RE.fullmatch(value or "")
    if not match:
        raise InvalidReferenceImageError()
    return match.group(1), match.group(2)


def find_image_part(data: Any) -> Dict[str, Any] | None:
    """Return the first ``inlineData`` whose MIME type is ``image/*``."""
    for part in _candidate_parts(_first_candidate(data)):
        inline = part.get("inlineData") or {}
        if str(inline.get("mimeType") or "").startswith("image/"):
            return inline
    return None


def to_data_url(mime_type: str, data: str) -> str:
    return f"data:{mime_type};base64,{data}"
