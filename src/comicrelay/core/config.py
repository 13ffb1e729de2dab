# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the relay configuration so ports, paths and provider settings resolve in one place.

"""Relay configuration.

Settings are resolved in three layers, later layers winning:

1. Built-in defaults on :class:`RelayConfig`.
2. An optional JSON file (``config/relay.json`` or ``$COMICRELAY_CONFIG``).
3. Environment variables (``PORT``, ``DEEPSEEK_*``, ``GEMINI_*``, ``COMICRELAY_*``).
"""

from __future__ import annotations

import json as _json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[3]
CONFIG_DIR = BASE_DIR / "config"

_TRUE_VALUES = ("1", "true", "yes", "on")

# env var -> (field name, type)
_ENV_FIELDS: Dict[str, tuple[str, type]] = {
    "HOST": ("host", str),
    "PORT": ("port", int),
    "COMICRELAY_DATA_DIR": ("data_dir", Path),
    "COMICRELAY_STATIC_DIR": ("static_dir", Path),
    "COMICRELAY_LOG_LEVEL": ("log_level", str),
    "COMICRELAY_LLM_DEBUG": ("llm_debug", bool),
    "COMICRELAY_STRICT_REFERENCE_IMAGE": ("strict_reference_image", bool),
    "DEEPSEEK_BASE_URL": ("deepseek_base_url", str),
    "DEEPSEEK_MODEL": ("deepseek_model", str),
    "DEEPSEEK_TIMEOUT_S": ("deepseek_timeout_s", float),
    "DEEPSEEK_API_KEY": ("deepseek_api_key", str),
    "GEMINI_BASE_URL": ("gemini_base_url", str),
    "GEMINI_TEXT_MODEL": ("gemini_text_model", str),
    "GEMINI_IMAGE_MODEL": ("gemini_image_model", str),
    "GEMINI_TIMEOUT_S": ("gemini_timeout_s", float),
    "GEMINI_API_KEY": ("gemini_api_key", str),
}


class RelayConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3002
    data_dir: Path = BASE_DIR / "data"
    static_dir: Path = BASE_DIR / "public"
    log_level: str = "INFO"
    llm_debug: bool = False
    strict_reference_image: bool = False

    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"
    deepseek_timeout_s: float | None = 120.0
    deepseek_api_key: str | None = None

    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_text_model: str = "gemini-3-pro-preview"
    gemini_image_model: str = "nano-banana-pro-preview"
    # No timeout unless configured.
    gemini_timeout_s: float | None = None
    gemini_api_key: str | None = None

    @property
    def stories_file(self) -> Path:
        return self.data_dir / "stories.json"


def load_json_config(path: Path | None) -> Dict[str, Any]:
    """Load a JSON object from ``path``; missing or malformed files yield ``{}``."""
    if path is None or not path.exists():
        return {}
    try:
        data = _json.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_env(raw: str, typ: type) -> Any:
    if typ is bool:
        return raw.strip().lower() in _TRUE_VALUES
    if typ is float and raw.strip().lower() in ("", "none", "0"):
        return None
    return typ(raw)


def env_overrides(environ: Dict[str, str] | None = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for key, (field, typ) in _ENV_FIELDS.items():
        raw = environ.get(key)
        if raw is None:
            continue
        try:
            overrides[field] = _coerce_env(raw, typ)
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", key, raw)
    return overrides


def load_relay_config(
    path: Path | None = None, environ: Dict[str, str] | None = None
) -> RelayConfig:
    environ = os.environ if environ is None else environ
    if path is None:
        env_path = environ.get("COMICRELAY_CONFIG")
        path = Path(env_path) if env_path else CONFIG_DIR / "relay.json"

    values: Dict[str, Any] = {}
    values.update(load_json_config(path))
    values.update(env_overrides(environ))
    return RelayConfig(**values)


@lru_cache(maxsize=1)
def get_config() -> RelayConfig:
    """Process-wide config; FastAPI routes receive it through ``Depends``."""
    return load_relay_config()
