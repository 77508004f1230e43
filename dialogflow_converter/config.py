"""Configuration constants, platform markers, and .env loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. Platform markers (built-in prefix, vendor key, welcome event)
are plain data — not buried in the conversion logic — so both directions
of the converter read the same values.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings and compiled patterns. resolve_locale() gives a
clear error when no locale is configured.

RULES:
- MODEL_KEY is the vendor key of the escape hatch in the canonical model
- BUILTIN_PREFIX marks Dialogflow system entities ("@sys.number")
- Custom entity types are referenced as CUSTOM_TYPE_PREFIX + name ("@city")
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
import re

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Platform markers
# ---------------------------------------------------------------------------

MODEL_KEY = "dialogflow"
"""Vendor key under which Dialogflow-only data lives in the canonical model."""

BUILTIN_PREFIX = "@sys."
CUSTOM_TYPE_PREFIX = "@"

WELCOME_EVENT = "WELCOME"
"""Event name that marks the built-in Default Welcome Intent."""

CURRENT_MODEL_VERSION = "4.0"

# Characters kept when an entity value is copied into a synonym list.
# Everything outside 0-9, A-Z, a-z, U+00C0-U+00FF, "-", "_", "'" and space
# is stripped.
ENTRY_SYNONYM_PATTERN = re.compile(r"[^0-9A-Za-zÀ-ÿ\-_' ]")

# ---------------------------------------------------------------------------
# Native file naming
# ---------------------------------------------------------------------------

INTENTS_DIR = "intents"
ENTITIES_DIR = "entities"
USERSAYS_MARKER = "_usersays_"
ENTRIES_MARKER = "_entries_"

# ---------------------------------------------------------------------------
# CLI defaults
# ---------------------------------------------------------------------------

DEFAULT_LOCALE = os.getenv("DIALOGFLOW_DEFAULT_LOCALE", "en")
LOG_LEVEL = os.getenv("DIALOGFLOW_CONVERTER_LOG_LEVEL", "WARNING").upper()


def resolve_locale(locale: str | None = None) -> str:
    """Return the explicit locale, or the configured default.

    WHY: Every conversion is per-locale, and the companion file names embed
    the locale string verbatim. An empty locale would silently produce
    files like "city_entries_.json".

    RULES:
    - An explicit non-empty locale wins
    - Otherwise DIALOGFLOW_DEFAULT_LOCALE (via .env) is used
    - Raises ValueError if the result is empty
    """
    resolved = (locale or DEFAULT_LOCALE or "").strip()
    if not resolved:
        raise ValueError(
            "No locale configured. Pass --locale or set "
            "DIALOGFLOW_DEFAULT_LOCALE in the .env file."
        )
    return resolved
