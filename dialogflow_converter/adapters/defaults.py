"""Dialogflow default-value tables.

WHY: Dialogflow writes every field of an intent or entity into its agent
files, even when nothing was changed. Copying all of them into the
canonical model would bury the handful of settings a user actually made.
These two tables say what "unchanged" means, for both directions.

HOW: The importer compares each native field against DEFAULT_INTENT /
DEFAULT_ENTITY and keeps only deviations in the "dialogflow" escape hatch.
The exporter seeds new records from the same tables, so a record that
round-trips with default values produces no escape-hatch data at all.

RULES:
- Single source of truth for both adapters — never duplicate these values
- webhookUsed defaults to True: that is what the exporter writes, so an
  imported False is the deviation worth keeping
- Callers must copy before mutating (copy_default_entity)
"""

from __future__ import annotations

import copy
from typing import Any

DEFAULT_INTENT: dict[str, Any] = {
    "auto": True,
    "contexts": [],
    "responses": [
        {
            "resetContexts": False,
            "affectedContexts": [],
            "parameters": [],
            "defaultResponsePlatforms": {},
            "speech": [],
        }
    ],
    "priority": 500000,
    "webhookUsed": True,
    "webhookForSlotFilling": False,
    "fallbackIntent": False,
    "events": [],
}

DEFAULT_ENTITY: dict[str, Any] = {
    "isOverridable": True,
    "isEnum": False,
    "automatedExpansion": False,
    "isRegexp": False,
    "allowFuzzyExtraction": False,
}

# Scalar intent fields compared one by one, in file order.
INTENT_SCALAR_FIELDS = ("priority", "webhookUsed", "webhookForSlotFilling", "fallbackIntent")

# Fields of responses[0] kept when they differ from the default response.
RESPONSE_FIELDS = ("resetContexts", "affectedContexts", "defaultResponsePlatforms")

ENTITY_FLAGS = tuple(DEFAULT_ENTITY)


def default_response() -> dict[str, Any]:
    return DEFAULT_INTENT["responses"][0]


def copy_default_entity() -> dict[str, Any]:
    return copy.deepcopy(DEFAULT_ENTITY)
