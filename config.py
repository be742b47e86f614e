# config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}

DEFAULT_API_URL = "http://127.0.0.1:3000"


def _secret(name: str) -> Optional[str]:
    # st.secrets raises when no secrets.toml exists; treat that as "not set"
    try:
        value = _secrets.get(name)
    except Exception:
        return None
    return None if value is None else str(value)


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    return _secret(name) or os.getenv(name) or default


def _int_setting(name: str, default: int) -> int:
    raw = get_setting(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_setting(name: str, default: float) -> float:
    raw = get_setting(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    page_size: int = 10
    picker_page_size: int = 5
    relation_fetch_limit: int = 1000
    http_timeout: float = 30.0
    http_retries: int = 2
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Resolve settings from st.secrets, then the environment, then defaults."""
    return Settings(
        api_url=get_setting("API_URL", DEFAULT_API_URL).rstrip("/"),
        api_token=get_setting("API_TOKEN"),
        page_size=_int_setting("PAGE_SIZE", 10),
        picker_page_size=_int_setting("PICKER_PAGE_SIZE", 5),
        relation_fetch_limit=_int_setting("RELATION_FETCH_LIMIT", 1000),
        http_timeout=_float_setting("HTTP_TIMEOUT", 30.0),
        http_retries=_int_setting("HTTP_RETRIES", 2),
        log_level=(get_setting("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
