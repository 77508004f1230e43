"""Importer: Dialogflow agent files -> canonical model.

WHY: Users start from an agent built in the Dialogflow console. To bring
it under version control in the canonical model they need phrases,
entities, and entity-type values back in canonical form — plus every
setting that Dialogflow can express but the canonical model cannot.

HOW: The file set is indexed once by (directory, filename). Primary
intent files are turned into canonical Intents: each platform field is
diffed against DEFAULT_INTENT and only deviations go to the "dialogflow"
escape hatch; parameters of the first response become entities; the
<name>_usersays_<locale>.json companion becomes phrases. Primary entity
files become EntityTypes the same way, with values from the
<name>_entries_<locale>.json companion.

RULES:
- Import never raises: missing or malformed optional structure is
  treated as empty, absent companion files are skipped
- Fallback intents (fallbackIntent: true) and welcome intents (first event
  "WELCOME") are platform-managed: they go to model-level
  dialogflow.intents, tagged with their name, never to model.intents
- Built-in parameter types ("@sys.*") become {"dialogflow": dataType};
  custom types lose their "@" prefix
- An entity's exemplar text is the first surface text seen for its alias
  that differs from the alias itself
- Synonyms are kept only for entities that are neither enum nor regexp,
  never include the value itself, and are omitted when empty
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Union

from dialogflow_converter.adapters.defaults import (
    DEFAULT_ENTITY,
    DEFAULT_INTENT,
    ENTITY_FLAGS,
    INTENT_SCALAR_FIELDS,
    RESPONSE_FIELDS,
    default_response,
)
from dialogflow_converter.config import (
    BUILTIN_PREFIX,
    CURRENT_MODEL_VERSION,
    CUSTOM_TYPE_PREFIX,
    ENTITIES_DIR,
    INTENTS_DIR,
    MODEL_KEY,
    WELCOME_EVENT,
)
from dialogflow_converter.core.ir import (
    CanonicalModel,
    EntityType,
    EntityTypeValue,
    Intent,
    IntentEntity,
)
from dialogflow_converter.core.native import (
    FileIndex,
    NativeFile,
    build_file_index,
    entries_path,
    lookup,
    strip_json_suffix,
    usersays_path,
)

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _first_response(df_intent: dict[str, Any]) -> dict[str, Any]:
    responses = _as_list(df_intent.get("responses"))
    return _as_dict(responses[0]) if responses else {}


def diff_intent_defaults(df_intent: dict[str, Any], locale: str) -> dict[str, Any]:
    """Return the Dialogflow intent fields that differ from DEFAULT_INTENT.

    WHY: Only deviations are worth keeping in the canonical model; the
    exporter restores defaults on its own.

    HOW: Scalars are compared directly. List fields are kept when they
    contain an element the default list lacks. responses[0] is inspected
    field by field, but only when the whole responses list differs from
    the default — a list equal to the default short-circuits every
    per-response check, including messages.

    RULES:
    - Absent fields are never reported
    - messages keep only entries for this locale with non-empty speech
    - parameters are not reported here (they become entities)

    Returns:
        The escape-hatch sub-tree; empty when everything is at default.
    """
    vendor: dict[str, Any] = {}

    if "auto" in df_intent and df_intent["auto"] != DEFAULT_INTENT["auto"]:
        vendor["auto"] = df_intent["auto"]

    if _has_extra_items(df_intent.get("contexts"), DEFAULT_INTENT["contexts"]):
        vendor["contexts"] = df_intent["contexts"]

    for key in INTENT_SCALAR_FIELDS:
        if key in df_intent and df_intent[key] != DEFAULT_INTENT[key]:
            vendor[key] = df_intent[key]

    if _has_extra_items(df_intent.get("events"), DEFAULT_INTENT["events"]):
        vendor["events"] = df_intent["events"]

    responses = df_intent.get("responses")
    if responses and responses != DEFAULT_INTENT["responses"]:
        response = _diff_response_defaults(_first_response(df_intent), locale)
        if response:
            vendor["responses"] = [response]

    return vendor


def _has_extra_items(value: Any, default: list) -> bool:
    return any(item not in default for item in _as_list(value))


def _diff_response_defaults(response: dict[str, Any], locale: str) -> dict[str, Any]:
    default = default_response()
    diff: dict[str, Any] = {}

    for key in RESPONSE_FIELDS:
        if key in response and response[key] != default[key]:
            diff[key] = response[key]

    messages = response.get("messages")
    if messages != default.get("messages"):
        kept = [
            message
            for message in _as_list(messages)
            if isinstance(message, dict)
            and message.get("lang") == locale
            and _has_speech(message.get("speech"))
        ]
        if kept:
            diff["messages"] = kept

    if "speech" in response and response["speech"] != default["speech"]:
        diff["speech"] = response["speech"]

    return diff


def _has_speech(speech: Any) -> bool:
    return isinstance(speech, (str, list)) and len(speech) > 0


def diff_entity_defaults(df_entity: dict[str, Any]) -> dict[str, Any]:
    """Return the entity behaviour flags that differ from DEFAULT_ENTITY."""
    return {
        flag: df_entity[flag]
        for flag in ENTITY_FLAGS
        if flag in df_entity and df_entity[flag] != DEFAULT_ENTITY[flag]
    }


def is_platform_intent(df_intent: dict[str, Any]) -> bool:
    """True for the built-in fallback intent and the welcome intent."""
    if df_intent.get("fallbackIntent") is True:
        return True
    events = _as_list(df_intent.get("events"))
    return bool(events) and _as_dict(events[0]).get("name") == WELCOME_EVENT


def _entities_from_parameters(df_intent: dict[str, Any]) -> dict[str, IntentEntity]:
    entities: dict[str, IntentEntity] = {}
    for parameter in _as_list(_first_response(df_intent).get("parameters")):
        parameter = _as_dict(parameter)
        data_type = parameter.get("dataType")
        name = parameter.get("name")
        if not isinstance(data_type, str) or not data_type:
            continue
        if not isinstance(name, str) or not name:
            continue
        if data_type.startswith(BUILTIN_PREFIX):
            entities[name] = IntentEntity(type={MODEL_KEY: data_type})
        elif data_type.startswith(CUSTOM_TYPE_PREFIX):
            entities[name] = IntentEntity(type=data_type[len(CUSTOM_TYPE_PREFIX):])
        else:
            entities[name] = IntentEntity(type=data_type)
    return entities


def _phrases_from_usersays(usersays: Any, entities: dict[str, IntentEntity]) -> list[str]:
    phrases: list[str] = []
    for record in _as_list(usersays):
        phrase = ""
        for segment in _as_list(_as_dict(record).get("data")):
            segment = _as_dict(segment)
            text = segment.get("text")
            text = text if isinstance(text, str) else ""
            alias = segment.get("alias")
            if not isinstance(alias, str) or not alias:
                phrase += text
                continue
            phrase += "{" + alias + "}"
            entity = entities.get(alias)
            if entity is not None and entity.text is None and text != alias:
                entity.text = text
        phrases.append(phrase)
    return phrases


def _import_intent(
    df_intent: dict[str, Any],
    name: str,
    index: FileIndex,
    locale: str,
    model: CanonicalModel,
) -> None:
    vendor = diff_intent_defaults(df_intent, locale)

    if is_platform_intent(df_intent):
        logger.debug("Routing platform intent %r to %s.intents", name, MODEL_KEY)
        platform_intents = model.extra.setdefault(MODEL_KEY, {}).setdefault("intents", [])
        platform_intents.append({"name": name, **vendor})
        return

    intent = Intent(extra={MODEL_KEY: vendor} if vendor else {})
    intent.entities = _entities_from_parameters(df_intent)

    usersays = lookup(index, usersays_path(name, locale))
    if usersays is None:
        logger.debug("No user-says file for intent %r (%s)", name, locale)
    intent.phrases = _phrases_from_usersays(usersays, intent.entities)

    model.intents[name] = intent


def _import_entity(
    df_entity: dict[str, Any],
    name: str,
    index: FileIndex,
    locale: str,
    model: CanonicalModel,
) -> None:
    vendor = diff_entity_defaults(df_entity)
    entity_type = EntityType(extra={MODEL_KEY: vendor} if vendor else {})

    keep_synonyms = not df_entity.get("isEnum") and not df_entity.get("isRegexp")
    entries = lookup(index, entries_path(name, locale))
    if entries is None:
        logger.debug("No entries file for entity %r (%s)", name, locale)

    for entry in _as_list(entries):
        entry = _as_dict(entry)
        if "value" not in entry:
            continue
        synonyms = _as_list(entry.get("synonyms")) if keep_synonyms else []
        entity_type.values.append(EntityTypeValue(value=entry["value"], synonyms=list(synonyms)))

    model.entity_types[name] = entity_type


def import_model(
    files: Iterable[Union[NativeFile, dict]],
    locale: str,
) -> CanonicalModel:
    """Convert a Dialogflow native file set into a canonical model.

    Args:
        files: The agent's files as NativeFile records (or
               ``{"path": [...], "content": ...}`` dicts), in any order.
        locale: Locale whose companion files are read, e.g. "en-US".

    Returns:
        A CanonicalModel (version "4.0") with intents keyed by Dialogflow
        intent name and entity types keyed by Dialogflow entity name.
    """
    native_files = [NativeFile.coerce(f) for f in files]
    index = build_file_index(native_files)
    model = CanonicalModel(version=CURRENT_MODEL_VERSION, invocation="")

    for directory, handler in ((INTENTS_DIR, _import_intent), (ENTITIES_DIR, _import_entity)):
        for native_file in native_files:
            if native_file.directory != directory:
                continue
            if native_file.is_companion:
                logger.debug("Skipping companion file %s", "/".join(native_file.path))
                continue
            if not isinstance(native_file.content, dict):
                logger.debug("Skipping non-object file %s", "/".join(native_file.path))
                continue
            name = native_file.content.get("name")
            if not isinstance(name, str) or not name:
                name = strip_json_suffix(native_file.filename)
            handler(native_file.content, name, index, locale, model)

    logger.debug(
        "Imported %d intents and %d entity types (%s)",
        len(model.intents), len(model.entity_types), locale,
    )
    return model
