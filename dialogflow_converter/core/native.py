"""Native Dialogflow file records, field shapes, and path conventions.

WHY: A Dialogflow agent is a directory of JSON files whose names encode
what they hold: intents/<name>.json, intents/<name>_usersays_<locale>.json,
entities/<name>.json, entities/<name>_entries_<locale>.json. Both adapters
need the same naming rules and the same view of a file set.

HOW: NativeFile bundles path segments with parsed JSON content (like a
formatter output bundles a suffix with its content). The TypedDicts
document the field shapes of each record kind; they are never enforced at
runtime — content stays a plain dict so unknown fields survive untouched.
build_file_index() maps (directory, filename) to content once per call so
companion files are found by key instead of by scanning.

RULES:
- path is exactly two segments for agent files: [directory, filename]
- content is the parsed JSON value, passed through verbatim
- Companion filenames embed the locale verbatim ("en-US", not "en_us")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple, TypedDict, Union

from dialogflow_converter.config import (
    ENTITIES_DIR,
    ENTRIES_MARKER,
    INTENTS_DIR,
    USERSAYS_MARKER,
)

# ---------------------------------------------------------------------------
# Field shapes
# ---------------------------------------------------------------------------


class DialogflowParameter(TypedDict, total=False):
    isList: bool
    name: str
    value: str
    dataType: str


class DialogflowResponse(TypedDict, total=False):
    resetContexts: bool
    affectedContexts: List[Any]
    parameters: List[DialogflowParameter]
    messages: List[Dict[str, Any]]
    defaultResponsePlatforms: Dict[str, Any]
    speech: List[Any]


class DialogflowIntent(TypedDict, total=False):
    id: str
    name: str
    auto: bool
    contexts: List[Any]
    responses: List[DialogflowResponse]
    priority: int
    webhookUsed: bool
    webhookForSlotFilling: bool
    fallbackIntent: bool
    events: List[Dict[str, str]]


class DialogflowUserSaysData(TypedDict, total=False):
    text: str
    userDefined: bool
    alias: str
    meta: str


class DialogflowUserSays(TypedDict, total=False):
    id: str
    data: List[DialogflowUserSaysData]
    isTemplate: bool
    count: int
    lang: str


class DialogflowEntity(TypedDict, total=False):
    id: str
    name: str
    isOverridable: bool
    isEnum: bool
    automatedExpansion: bool
    isRegexp: bool
    allowFuzzyExtraction: bool


class DialogflowEntry(TypedDict, total=False):
    value: str
    synonyms: List[str]


# ---------------------------------------------------------------------------
# File records
# ---------------------------------------------------------------------------


@dataclass
class NativeFile:
    """One file of a Dialogflow agent.

    Attributes:
        path: Path segments relative to the agent root,
              e.g. ``["intents", "BookFlight.json"]``.
        content: Parsed JSON content (dict for intents/entities,
                 list for user-says and entries files).
    """

    path: list[str]
    content: Any = field(default=None)

    @classmethod
    def coerce(cls, item: Union[NativeFile, Dict[str, Any]]) -> NativeFile:
        """Accept either a NativeFile or a ``{"path": ..., "content": ...}`` dict."""
        if isinstance(item, NativeFile):
            return item
        return cls(path=list(item.get("path") or []), content=item.get("content"))

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "content": self.content}

    @property
    def directory(self) -> str:
        return self.path[0] if self.path else ""

    @property
    def filename(self) -> str:
        return self.path[1] if len(self.path) > 1 else ""

    @property
    def is_companion(self) -> bool:
        """True for user-says and entries files (looked up by name, not iterated)."""
        return self.kind in ("usersays", "entries")

    @property
    def kind(self) -> str:
        """One of "intent", "usersays", "entity", "entries", or "" for other files."""
        if self.directory == INTENTS_DIR:
            return "usersays" if USERSAYS_MARKER in self.filename else "intent"
        if self.directory == ENTITIES_DIR:
            return "entries" if ENTRIES_MARKER in self.filename else "entity"
        return ""


# ---------------------------------------------------------------------------
# Path conventions
# ---------------------------------------------------------------------------


def intent_path(name: str) -> list[str]:
    return [INTENTS_DIR, f"{name}.json"]


def usersays_path(name: str, locale: str) -> list[str]:
    return [INTENTS_DIR, f"{name}{USERSAYS_MARKER}{locale}.json"]


def entity_path(name: str) -> list[str]:
    return [ENTITIES_DIR, f"{name}.json"]


def entries_path(name: str, locale: str) -> list[str]:
    return [ENTITIES_DIR, f"{name}{ENTRIES_MARKER}{locale}.json"]


def strip_json_suffix(filename: str) -> str:
    return filename[: -len(".json")] if filename.endswith(".json") else filename


FileIndex = Dict[Tuple[str, str], Any]


def build_file_index(files: Iterable[NativeFile]) -> FileIndex:
    """Map (directory, filename) to content for constant-time companion lookup.

    RULES:
    - Files with fewer than two path segments are not indexed
    - On duplicate paths the later file wins (same as writing them to disk)
    """
    index: FileIndex = {}
    for native_file in files:
        if len(native_file.path) < 2:
            continue
        index[(native_file.path[0], native_file.path[1])] = native_file.content
    return index


def lookup(index: FileIndex, path: list[str]) -> Any:
    """Return the content indexed under a two-segment path, or None."""
    return index.get((path[0], path[1]))
