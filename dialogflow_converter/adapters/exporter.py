"""Exporter: canonical model -> Dialogflow agent files.

WHY: Dialogflow only accepts its own agent layout — one JSON file per
intent and entity plus per-locale companion files for sample phrases and
entity entries. The exporter produces that layout from a canonical model
so the model can be deployed to Dialogflow unchanged.

HOW: For each intent a base record is built (fresh id, name, and the
auto/webhookUsed defaults). Each intent entity becomes a response
parameter; custom entity types are resolved against the model and emit
an entity file plus an entries file. Escape-hatch overrides are merged on
top, then every phrase is tokenized at ``{placeholder}`` markers into a
user-says record. Finally, platform-managed records kept in the model's
own "dialogflow" sub-tree are emitted verbatim.

RULES:
- Works on v3 and v4 models alike (through core.accessor)
- Unresolved or malformed entity types raise immediately; nothing is
  returned for a failed call
- Built-in types ("@sys.*") pass through and emit no entity files
- Custom types are referenced as "@<name>"; each is emitted once per call
- Entry synonyms start with the sanitized value unless the entity is
  enum or regexp typed
- Inline "userSays" / "entries" of model-level records are split into
  companion files and deleted from the caller's tree
"""

from __future__ import annotations

import copy
import logging
import re
import uuid
from typing import Any, Union

from dialogflow_converter.adapters.defaults import DEFAULT_INTENT, copy_default_entity
from dialogflow_converter.config import (
    BUILTIN_PREFIX,
    CUSTOM_TYPE_PREFIX,
    ENTRY_SYNONYM_PATTERN,
    MODEL_KEY,
)
from dialogflow_converter.core.accessor import ModelAccessor, ModelInput, get_accessor
from dialogflow_converter.core.ir import EntityType, Intent, IntentEntity
from dialogflow_converter.core.merge import deep_merge
from dialogflow_converter.core.native import (
    NativeFile,
    entity_path,
    entries_path,
    intent_path,
    usersays_path,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(.*?)\}")


class EntityTypeError(ValueError):
    """Base for entity-type resolution failures during export.

    Carries the intent and entity that failed so callers can point the
    user at the exact spot in the model.
    """

    def __init__(self, message: str, intent_name: str, entity_name: str) -> None:
        self.intent_name = intent_name
        self.entity_name = entity_name
        super().__init__(
            '{} (intent "{}", entity "{}")'.format(message, intent_name, entity_name)
        )


class EntityTypeNotDefinedError(EntityTypeError):
    """A custom entity type is referenced but not declared in the model."""


class InvalidEntityTypeError(EntityTypeError):
    """An entity has no type, or a type object without a "dialogflow" key."""


def _new_id() -> str:
    return str(uuid.uuid4())


def sanitize_synonym(text: str) -> str:
    """Strip characters Dialogflow rejects in entity synonyms."""
    return ENTRY_SYNONYM_PATTERN.sub("", text)


# ---------------------------------------------------------------------------
# Entity types
# ---------------------------------------------------------------------------


def _resolve_data_type(intent_name: str, entity_name: str, entity: IntentEntity) -> str:
    """Return the Dialogflow data type named by an intent entity, unprefixed for custom types."""
    if not entity.type:
        raise InvalidEntityTypeError(
            'Invalid entity type in intent "{}"'.format(intent_name),
            intent_name, entity_name,
        )
    if isinstance(entity.type, dict):
        data_type = entity.type.get(MODEL_KEY)
        if not data_type:
            raise InvalidEntityTypeError(
                'Please add a {} property for entity "{}"'.format(MODEL_KEY, entity_name),
                intent_name, entity_name,
            )
        return data_type
    return entity.type


def _lookup_entity_type(
    accessor: ModelAccessor,
    type_name: str,
    intent_name: str,
    entity_name: str,
) -> EntityType:
    """Find a custom entity type, failing with version-specific wording.

    RULES:
    - No entity types declared at all, any version:
      'Input type "<t>" must be defined in entityTypes'
    - Declared but missing, v3: 'Input type "<t>" must be defined in inputTypes'
    - Declared but missing, v4: 'Entity type "<t>" must be defined in entityTypes'
    """
    if not accessor.has_entity_types():
        raise EntityTypeNotDefinedError(
            'Input type "{}" must be defined in entityTypes'.format(type_name),
            intent_name, entity_name,
        )

    entity_type = accessor.get_entity_type(type_name)
    if entity_type is None:
        if accessor.is_legacy:
            message = 'Input type "{}" must be defined in inputTypes'.format(type_name)
        else:
            message = 'Entity type "{}" must be defined in entityTypes'.format(type_name)
        raise EntityTypeNotDefinedError(message, intent_name, entity_name)
    return entity_type


def build_entity_record(type_name: str, entity_type: EntityType) -> dict[str, Any]:
    """Build the entities/<name>.json record for a custom entity type.

    The record starts from DEFAULT_ENTITY. Vendor data given as a string
    renames the native entity; given as an object it is deep-merged on top.
    """
    record: dict[str, Any] = {"id": _new_id(), "name": type_name}
    record.update(copy_default_entity())

    vendor = entity_type.vendor_data()
    if isinstance(vendor, str):
        record["name"] = vendor
    elif isinstance(vendor, dict):
        deep_merge(record, vendor)
    return record


def build_entries(entity_type: EntityType, entity_record: dict[str, Any]) -> list[dict[str, Any]]:
    """Build the entities/<name>_entries_<locale>.json content."""
    with_synonyms = not entity_record.get("isEnum") and not entity_record.get("isRegexp")
    entries: list[dict[str, Any]] = []
    for value in entity_type.values:
        entry: dict[str, Any] = {"value": value.value}
        if with_synonyms:
            entry["synonyms"] = [sanitize_synonym(value.value)] + [
                sanitize_synonym(synonym) for synonym in value.synonyms
            ]
        entries.append(entry)
    return entries


def _entity_type_files(
    type_name: str,
    entity_type: EntityType,
    locale: str,
) -> list[NativeFile]:
    record = build_entity_record(type_name, entity_type)
    files = [NativeFile(path=entity_path(type_name), content=record)]
    if entity_type.values:
        files.append(NativeFile(
            path=entries_path(type_name, locale),
            content=build_entries(entity_type, record),
        ))
    return files


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


def _merge_intent_overrides(record: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Deep-merge intent vendor data, merging responses position by position.

    The generated responses[0] holds the parameters; an override such as
    {"responses": [{"resetContexts": true}]} must extend it, not replace it.
    """
    overrides = dict(overrides)
    response_overrides = overrides.pop("responses", None)
    deep_merge(record, overrides)

    if not isinstance(response_overrides, list):
        if response_overrides is not None:
            record["responses"] = copy.deepcopy(response_overrides)
        return

    responses = record.setdefault("responses", [])
    for position, override in enumerate(response_overrides):
        if position < len(responses) and isinstance(responses[position], dict) and isinstance(override, dict):
            deep_merge(responses[position], override)
        else:
            responses.append(copy.deepcopy(override))


def _emitted_parameters(record: dict[str, Any]) -> list[dict[str, Any]]:
    """Parameters of the final intent record, after vendor overrides."""
    responses = record.get("responses")
    if not isinstance(responses, list) or not responses or not isinstance(responses[0], dict):
        return []
    parameters = responses[0].get("parameters")
    if not isinstance(parameters, list):
        return []
    return [p for p in parameters if isinstance(p, dict)]


def build_usersays_data(
    phrase: str,
    entities: dict[str, IntentEntity],
    parameters: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Split a phrase at ``{placeholder}`` markers into user-says data segments.

    WHY: Dialogflow stores a sample phrase as a list of segments, where
    entity segments carry the parameter alias and data type.

    HOW: Markers are scanned left to right. Literal text before each
    marker becomes a plain segment, the marker becomes an entity segment.
    Text after the last marker becomes a final plain segment.

    RULES:
    - Empty literal text is dropped only before the first marker
    - Entity segment text is the entity's exemplar text, else the
      placeholder name
    - alias/meta come from the parameter of the same name, when there is one
    - A phrase without markers is one plain segment (even when empty)
    """
    data: list[dict[str, Any]] = []
    position = 0

    for match in _PLACEHOLDER_RE.finditer(phrase):
        text = phrase[position:match.start()]
        if text or position > 0:
            data.append({"text": text, "userDefined": False})

        placeholder = match.group(1)
        segment: dict[str, Any] = {"text": placeholder, "userDefined": True}
        entity = entities.get(placeholder)
        if entity is not None and entity.text:
            segment["text"] = entity.text
        for parameter in parameters:
            if parameter.get("name") == placeholder:
                segment["alias"] = parameter["name"]
                segment["meta"] = parameter.get("dataType")
        data.append(segment)
        position = match.end()

    if position < len(phrase):
        data.append({"text": phrase[position:], "userDefined": False})

    if not data:
        data = [{"text": phrase, "userDefined": False}]
    return data


def _export_intent(
    accessor: ModelAccessor,
    intent_name: str,
    intent: Intent,
    locale: str,
    emitted_types: set[str],
) -> list[NativeFile]:
    files: list[NativeFile] = []
    record: dict[str, Any] = {
        "id": _new_id(),
        "name": intent_name,
        "auto": DEFAULT_INTENT["auto"],
        "webhookUsed": DEFAULT_INTENT["webhookUsed"],
    }

    parameters: list[dict[str, Any]] = []
    entities = accessor.get_entities(intent_name)
    if entities:
        record["responses"] = [{"parameters": parameters}]

    for entity_name, entity in entities.items():
        data_type = _resolve_data_type(intent_name, entity_name, entity)

        if not data_type.startswith(BUILTIN_PREFIX):
            entity_type = _lookup_entity_type(accessor, data_type, intent_name, entity_name)
            if data_type not in emitted_types:
                emitted_types.add(data_type)
                files.extend(_entity_type_files(data_type, entity_type, locale))
                logger.debug("Emitted entity type %r for intent %r", data_type, intent_name)
            data_type = CUSTOM_TYPE_PREFIX + data_type

        parameter: dict[str, Any] = {
            "isList": False,
            "name": entity_name,
            "value": "$" + entity_name,
            "dataType": data_type,
        }
        vendor = entity.vendor_data()
        if isinstance(vendor, dict):
            deep_merge(parameter, vendor)
        parameters.append(parameter)

    vendor = intent.vendor_data()
    if isinstance(vendor, dict):
        _merge_intent_overrides(record, vendor)

    files.append(NativeFile(path=intent_path(intent_name), content=record))

    parameters = _emitted_parameters(record)
    usersays = [
        {
            "id": _new_id(),
            "data": build_usersays_data(phrase, entities, parameters),
            "isTemplate": False,
            "count": 0,
            "lang": locale,
        }
        for phrase in intent.phrases
    ]
    if usersays:
        files.append(NativeFile(path=usersays_path(intent_name, locale), content=usersays))
    return files


def _export_platform_records(accessor: ModelAccessor, locale: str) -> list[NativeFile]:
    """Emit intents/entities kept verbatim in the model-level "dialogflow" sub-tree.

    Inline "userSays" and "entries" are moved into companion files and
    deleted from the records, which belong to the caller.
    """
    vendor = accessor.get_vendor_data()
    if not isinstance(vendor, dict):
        return []

    files: list[NativeFile] = []
    for record in vendor.get("intents") or []:
        if "userSays" in record:
            usersays = record.pop("userSays")
            files.append(NativeFile(path=usersays_path(record["name"], locale), content=usersays))
        files.append(NativeFile(path=intent_path(record["name"]), content=record))

    for record in vendor.get("entities") or []:
        if "entries" in record:
            entries = record.pop("entries")
            files.append(NativeFile(path=entries_path(record["name"], locale), content=entries))
        files.append(NativeFile(path=entity_path(record["name"]), content=record))
    return files


def export_model(model: Union[ModelInput, ModelAccessor], locale: str) -> list[NativeFile]:
    """Convert a canonical model into a Dialogflow native file set.

    Args:
        model: A CanonicalModel, a raw v4 or v3 model dict, or an accessor.
        locale: Locale written into companion file names and user-says
                records, e.g. "en-US".

    Returns:
        NativeFile records in emission order: per intent its entity files,
        the intent file, and its user-says file; then platform records.

    Raises:
        EntityTypeNotDefinedError: A custom entity type is not declared.
        InvalidEntityTypeError: An entity type is missing or has no
            "dialogflow" key.
    """
    accessor = model if isinstance(model, ModelAccessor) else get_accessor(model)
    files: list[NativeFile] = []
    emitted_types: set[str] = set()

    for intent_name, intent in accessor.get_intents().items():
        files.extend(_export_intent(accessor, intent_name, intent, locale, emitted_types))

    files.extend(_export_platform_records(accessor, locale))

    logger.info(
        "Exported %d intents and %d entity types to %d files (%s)",
        len(accessor.get_intents()), len(emitted_types), len(files), locale,
    )
    return files
