# Single config layer: Streamlit secrets first, then env, then defaults.

import os

import constants

_TRUE_VALUES = ("1", "true", "yes", "on")


def _get_secrets():
    try:
        import streamlit as st
        return getattr(st, "secrets", None) or {}
    except Exception:
        return {}


def _lookup(secrets, key: str, default: str) -> str:
    try:
        value = secrets.get(key)
    except Exception:
        # st.secrets raises when no secrets.toml exists (e.g. plain CLI runs)
        value = None
    if value:
        return str(value)
    return os.environ.get(key, "").strip() or default


def _as_bool(value) -> bool:
    return str(value).strip().lower() in _TRUE_VALUES


def get_config():
    """Return converter config: st.secrets > env vars > defaults."""
    s = _get_secrets()
    return {
        "cloze_color": _lookup(s, "DECKCONV_COLOR", constants.DEFAULT_CLOZE_COLOR),
        "raw_dir": _lookup(s, "DECKCONV_RAW_DIR", constants.DEFAULT_RAW_DIR),
        "processed_dir": _lookup(s, "DECKCONV_PROCESSED_DIR", constants.DEFAULT_PROCESSED_DIR),
        "media_dir": _lookup(s, "DECKCONV_MEDIA_DIR", ""),
        "overwrite_media": _as_bool(_lookup(s, "DECKCONV_OVERWRITE_MEDIA", "")),
    }
