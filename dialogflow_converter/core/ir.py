"""Canonical model dataclasses — the vendor-neutral NLU training data.

WHY: Dialogflow agent files and the canonical model describe the same
training data with very different structure. The IR gives both adapters
one well-typed form to read from and write to, so the importer and the
exporter never talk to each other directly.

HOW: Five dataclasses form a hierarchy:
  EntityTypeValue — one value of an entity type plus its synonyms
  EntityType      — a named set of values
  IntentEntity    — a placeholder inside an intent's phrases and its type
  Intent          — sample phrases plus the entities they reference
  CanonicalModel  — intents, entity types, and model-level metadata
Every level except EntityTypeValue carries an ``extra`` dict keyed by
vendor name ("dialogflow", "alexa", ...) that holds data the canonical
schema has no field for. from_dict/to_dict map the current (v4) JSON shape.

RULES:
- extra is passed through verbatim; keys other than the known fields land there
- EntityTypeValue.synonyms never contains the value itself
- to_dict omits empty optional fields (no "synonyms": [], no "entities": {})
- Legacy (v3) JSON is not parsed here — see core.accessor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from dialogflow_converter.config import CURRENT_MODEL_VERSION, MODEL_KEY

# A bare entity-type name ("city") or a vendor-qualified descriptor
# ({"dialogflow": "@sys.number"}).
EntityTypeRef = Union[str, Dict[str, str]]


class _VendorDataMixin:
    """Accessors for the vendor-keyed ``extra`` dict."""

    extra: dict[str, Any]

    def vendor_data(self, key: str = MODEL_KEY) -> Any:
        """Return the payload stored under a vendor key, or None."""
        return self.extra.get(key)

    def set_vendor_data(self, value: Any, key: str = MODEL_KEY) -> None:
        self.extra[key] = value


def _split_extra(data: dict[str, Any], known: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


@dataclass
class EntityTypeValue:
    """One value of an entity type.

    RULES:
    - value: canonical surface form
    - synonyms: alternate surface forms, in order, excluding value
    """

    value: str
    synonyms: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.synonyms = [s for s in self.synonyms if s != self.value]

    @classmethod
    def from_dict(cls, data: str | dict[str, Any]) -> EntityTypeValue:
        """Parse a value given either as a bare string or as an object."""
        if isinstance(data, str):
            return cls(value=data)
        return cls(value=data["value"], synonyms=list(data.get("synonyms") or []))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"value": self.value}
        if self.synonyms:
            result["synonyms"] = list(self.synonyms)
        return result


@dataclass
class EntityType(_VendorDataMixin):
    """A named set of values (the name is the key in CanonicalModel.entity_types).

    Dialogflow behaviour flags (isEnum, isRegexp, allowFuzzyExtraction, ...)
    have no canonical field and only live in extra["dialogflow"].
    """

    values: list[EntityTypeValue] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntityType:
        return cls(
            values=[EntityTypeValue.from_dict(v) for v in data.get("values") or []],
            extra=_split_extra(data, ("values",)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"values": [v.to_dict() for v in self.values]}
        result.update(self.extra)
        return result


@dataclass
class IntentEntity(_VendorDataMixin):
    """A placeholder used in an intent's phrases.

    RULES:
    - type: bare custom type name, or {vendor: native type string} for
      built-in types; None only for malformed input
    - text: exemplar surface text used when writing sample phrases
    """

    type: Optional[EntityTypeRef] = None
    text: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IntentEntity:
        return cls(
            type=data.get("type"),
            text=data.get("text"),
            extra=_split_extra(data, ("type", "text")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.type is not None:
            result["type"] = self.type
        if self.text is not None:
            result["text"] = self.text
        result.update(self.extra)
        return result


@dataclass
class Intent(_VendorDataMixin):
    """Sample phrases with ``{placeholder}`` markers plus their entities."""

    phrases: list[str] = field(default_factory=list)
    entities: dict[str, IntentEntity] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Intent:
        return cls(
            phrases=list(data.get("phrases") or []),
            entities={
                name: IntentEntity.from_dict(entity)
                for name, entity in (data.get("entities") or {}).items()
            },
            extra=_split_extra(data, ("phrases", "entities")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"phrases": list(self.phrases)}
        if self.entities:
            result["entities"] = {
                name: entity.to_dict() for name, entity in self.entities.items()
            }
        result.update(self.extra)
        return result


@dataclass
class CanonicalModel(_VendorDataMixin):
    """The complete canonical model for one locale.

    WHY: This is what the importer returns and what the exporter consumes
    (through core.accessor). It mirrors the current (v4) JSON shape.

    RULES:
    - intents / entity_types are keyed by their unique names, in insertion order
    - extra["dialogflow"] may hold {"intents": [...], "entities": [...]} with
      platform-managed records (fallback/welcome intents) emitted verbatim
    """

    version: str = CURRENT_MODEL_VERSION
    invocation: Any = ""
    intents: dict[str, Intent] = field(default_factory=dict)
    entity_types: dict[str, EntityType] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CanonicalModel:
        return cls(
            version=str(data.get("version", CURRENT_MODEL_VERSION)),
            invocation=data.get("invocation", ""),
            intents={
                name: Intent.from_dict(intent)
                for name, intent in (data.get("intents") or {}).items()
            },
            entity_types={
                name: EntityType.from_dict(entity_type)
                for name, entity_type in (data.get("entityTypes") or {}).items()
            },
            extra=_split_extra(data, ("version", "invocation", "intents", "entityTypes")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "version": self.version,
            "invocation": self.invocation,
            "intents": {name: intent.to_dict() for name, intent in self.intents.items()},
            "entityTypes": {
                name: entity_type.to_dict()
                for name, entity_type in self.entity_types.items()
            },
        }
        result.update(self.extra)
        return result
