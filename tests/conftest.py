"""Shared test fixtures for the dialogflow_converter test suite.

WHY: Importer, exporter, validation, and CLI tests all need the same
small agent and the same canonical models. Centralizing them here keeps
the expected values in one place.

HOW: Pytest fixtures provide a native file set shaped like an unpacked
Dialogflow agent export (locale "en"), a current (v4) canonical model
dict, a legacy (v3) model dict, and a helper that writes the agent to
disk. fixed_ids makes exporter ids deterministic.

RULES:
- Native records carry every field Dialogflow writes, defaults included.
- Fixtures return fresh copies; tests may mutate them freely.
"""

import copy
import itertools
import json
from typing import Any, Dict, List

import pytest

from dialogflow_converter.adapters import exporter
from dialogflow_converter.core.native import NativeFile


def _response(**overrides: Any) -> Dict[str, Any]:
    response = {
        "resetContexts": False,
        "affectedContexts": [],
        "parameters": [],
        "messages": [{"type": 0, "lang": "en", "speech": []}],
        "defaultResponsePlatforms": {},
        "speech": [],
    }
    response.update(overrides)
    return response


def _intent(name: str, **overrides: Any) -> Dict[str, Any]:
    intent = {
        "id": "id-" + name,
        "name": name,
        "auto": True,
        "contexts": [],
        "responses": [_response()],
        "priority": 500000,
        "webhookUsed": True,
        "webhookForSlotFilling": False,
        "fallbackIntent": False,
        "events": [],
    }
    intent.update(overrides)
    return intent


def _entity(name: str, **overrides: Any) -> Dict[str, Any]:
    entity = {
        "id": "id-" + name,
        "name": name,
        "isOverridable": True,
        "isEnum": False,
        "isRegexp": False,
        "automatedExpansion": False,
        "allowFuzzyExtraction": False,
    }
    entity.update(overrides)
    return entity


# ---------------------------------------------------------------------------
# Sample agent (locale "en")
# ---------------------------------------------------------------------------

SAMPLE_AGENT: List[Dict[str, Any]] = [
    {
        "path": ["intents", "BookFlight.json"],
        "content": _intent("BookFlight", responses=[_response(parameters=[
            {"id": "p-city", "required": False, "dataType": "@city",
             "name": "city", "value": "$city", "isList": False},
            {"id": "p-date", "required": False, "dataType": "@sys.date",
             "name": "date", "value": "$date", "isList": False},
        ])]),
    },
    {
        "path": ["intents", "BookFlight_usersays_en.json"],
        "content": [
            {
                "id": "u1",
                "data": [
                    {"text": "book a flight to ", "userDefined": False},
                    {"text": "Berlin", "alias": "city", "meta": "@city", "userDefined": True},
                    {"text": " on ", "userDefined": False},
                    {"text": "monday", "alias": "date", "meta": "@sys.date", "userDefined": True},
                ],
                "isTemplate": False,
                "count": 0,
                "lang": "en",
            },
            {
                "id": "u2",
                "data": [
                    {"text": "fly to ", "userDefined": False},
                    {"text": "Paris", "alias": "city", "meta": "@city", "userDefined": True},
                ],
                "isTemplate": False,
                "count": 0,
                "lang": "en",
            },
        ],
    },
    {
        "path": ["intents", "BookFlight_usersays_de.json"],
        "content": [
            {"id": "u3", "data": [{"text": "flug buchen", "userDefined": False}], "lang": "de"},
        ],
    },
    {
        "path": ["intents", "Cancel.json"],
        "content": _intent(
            "Cancel",
            priority=250000,
            webhookUsed=False,
            responses=[_response(
                resetContexts=True,
                messages=[
                    {"type": 0, "lang": "en", "speech": "Okay, cancelled."},
                    {"type": 0, "lang": "de", "speech": "Ok."},
                    {"type": 0, "lang": "en", "speech": ""},
                ],
            )],
        ),
    },
    {
        "path": ["intents", "Cancel_usersays_en.json"],
        "content": [
            {"id": "u4", "data": [{"text": "cancel", "userDefined": False}], "lang": "en"},
        ],
    },
    {
        "path": ["intents", "Default Fallback Intent.json"],
        "content": _intent(
            "Default Fallback Intent",
            webhookUsed=False,
            fallbackIntent=True,
            responses=[_response(
                action="input.unknown",
                messages=[{"type": 0, "lang": "en", "speech": ["Sorry?"]}],
            )],
        ),
    },
    {
        "path": ["intents", "Default Welcome Intent.json"],
        "content": _intent(
            "Default Welcome Intent",
            events=[{"name": "WELCOME"}],
            responses=[_response(messages=[])],
        ),
    },
    {
        "path": ["intents", "Default Welcome Intent_usersays_en.json"],
        "content": [
            {"id": "u5", "data": [{"text": "hello", "userDefined": False}], "lang": "en"},
        ],
    },
    {
        "path": ["entities", "city.json"],
        "content": _entity("city"),
    },
    {
        "path": ["entities", "city_entries_en.json"],
        "content": [
            {"value": "Berlin", "synonyms": ["Berlin", "Berlin City"]},
            {"value": "Paris", "synonyms": ["Paris"]},
        ],
    },
    {
        "path": ["entities", "size.json"],
        "content": _entity("size", isEnum=True, automatedExpansion=True),
    },
    {
        "path": ["entities", "size_entries_en.json"],
        "content": [
            {"value": "small", "synonyms": ["small", "tiny"]},
        ],
    },
]


# ---------------------------------------------------------------------------
# Canonical models
# ---------------------------------------------------------------------------

V4_MODEL: Dict[str, Any] = {
    "version": "4.0",
    "invocation": "flight demo",
    "intents": {
        "BookFlight": {
            "phrases": ["book a flight to {city} on {date}", "fly to {city}"],
            "entities": {
                "city": {"type": "city", "text": "Berlin"},
                "date": {"type": {"dialogflow": "@sys.date"}},
            },
        },
        "HelloWorld": {
            "phrases": ["hello", "hi there"],
            "dialogflow": {"priority": 250000},
        },
    },
    "entityTypes": {
        "city": {
            "values": [
                {"value": "Berlin", "synonyms": ["Berlin City"]},
                "Paris",
            ],
        },
    },
}

V3_MODEL: Dict[str, Any] = {
    "invocation": "flight demo",
    "intents": [
        {
            "name": "BookFlight",
            "phrases": ["fly to {city}"],
            "inputs": [{"name": "city", "type": "city"}],
        },
    ],
    "inputTypes": [
        {
            "name": "city",
            "values": [{"value": "Berlin"}, "Paris"],
            "dialogflow": {"automatedExpansion": True},
        },
    ],
}


@pytest.fixture
def sample_agent_files():
    """The sample agent as NativeFile records, in export-directory order."""
    return [NativeFile.coerce(copy.deepcopy(item)) for item in SAMPLE_AGENT]


@pytest.fixture
def sample_agent_dicts():
    """The sample agent as plain {"path", "content"} dicts."""
    return copy.deepcopy(SAMPLE_AGENT)


@pytest.fixture
def v4_model():
    """A current (v4) canonical model dict with a custom and a built-in type."""
    return copy.deepcopy(V4_MODEL)


@pytest.fixture
def v3_model():
    """A legacy (v3) canonical model dict."""
    return copy.deepcopy(V3_MODEL)


@pytest.fixture
def agent_dir(tmp_path):
    """The sample agent written to tmp_path/agent."""
    root = tmp_path / "agent"
    for item in SAMPLE_AGENT:
        path = root.joinpath(*item["path"])
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(item["content"]), encoding="utf-8")
    return root


@pytest.fixture
def fixed_ids(monkeypatch):
    """Make exporter ids deterministic: "id-1", "id-2", ..."""
    counter = itertools.count(1)
    monkeypatch.setattr(exporter, "_new_id", lambda: "id-{}".format(next(counter)))
