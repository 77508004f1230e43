"""Version-independent read access to canonical models.

WHY: The exporter must accept both the current (v4) canonical model and
the legacy (v3) JSON shape, where intents are a list with "inputs" and
entity types live in an "inputTypes" list. Sniffing the shape inside the
conversion logic would scatter version checks everywhere; instead every
lookup goes through one capability interface.

HOW: ModelAccessor is an ABC exposing intent/entity lookup, existence
checks, vendor data, and version discrimination. CurrentModelAccessor
wraps a CanonicalModel; LegacyModelAccessor wraps a raw v3 dict and
converts its records to IR objects on construction. get_accessor() picks
the right adapter once, at the start of a conversion.

RULES:
- Intents and entity types come back as IR objects, in model order
- get_vendor_data() returns the caller's own object, not a copy (the
  exporter strips inline companion data from it)
- A model is legacy when its intents are a list or it has "inputTypes"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Union

from dialogflow_converter.config import MODEL_KEY
from dialogflow_converter.core.ir import (
    CanonicalModel,
    EntityType,
    Intent,
    IntentEntity,
)

ModelInput = Union[CanonicalModel, dict]


class ModelAccessor(ABC):
    """Capability interface over one canonical model, whatever its version."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Model version string, e.g. "4.0" or "3.0"."""

    @property
    @abstractmethod
    def is_legacy(self) -> bool:
        """True for v3 models (inputs / inputTypes terminology)."""

    @abstractmethod
    def get_intents(self) -> dict[str, Intent]:
        """All intents keyed by name, in model order."""

    @abstractmethod
    def has_entity_types(self) -> bool:
        """True when the model declares at least one entity type."""

    @abstractmethod
    def get_entity_type(self, name: str) -> EntityType | None:
        """The entity type with this name, or None."""

    @abstractmethod
    def get_vendor_data(self, key: str = MODEL_KEY) -> Any:
        """Model-level vendor payload (the caller's object), or None."""

    def get_intent(self, name: str) -> Intent | None:
        return self.get_intents().get(name)

    def get_entities(self, intent_name: str) -> dict[str, IntentEntity]:
        intent = self.get_intent(intent_name)
        return intent.entities if intent is not None else {}

    def has_entities(self, intent_name: str) -> bool:
        return bool(self.get_entities(intent_name))


class CurrentModelAccessor(ModelAccessor):
    """Accessor for a v4 CanonicalModel."""

    def __init__(self, model: CanonicalModel) -> None:
        self._model = model

    @property
    def version(self) -> str:
        return self._model.version

    @property
    def is_legacy(self) -> bool:
        return False

    def get_intents(self) -> dict[str, Intent]:
        return self._model.intents

    def has_entity_types(self) -> bool:
        return bool(self._model.entity_types)

    def get_entity_type(self, name: str) -> EntityType | None:
        return self._model.entity_types.get(name)

    def get_vendor_data(self, key: str = MODEL_KEY) -> Any:
        return self._model.vendor_data(key)


class LegacyModelAccessor(ModelAccessor):
    """Accessor for a v3 model dict.

    v3 shape::

        {"intents": [{"name": ..., "phrases": [...],
                      "inputs": [{"name": ..., "type": ..., "text": ...}]}],
         "inputTypes": [{"name": ..., "values": [...], "dialogflow": {...}}]}
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data
        self._intents: dict[str, Intent] = {}
        for raw in data.get("intents") or []:
            self._intents[raw["name"]] = _legacy_intent(raw)
        self._entity_types: dict[str, EntityType] = {}
        for raw in data.get("inputTypes") or []:
            fields = {k: v for k, v in raw.items() if k != "name"}
            self._entity_types[raw["name"]] = EntityType.from_dict(fields)

    @property
    def version(self) -> str:
        return str(self._data.get("version", "3.0"))

    @property
    def is_legacy(self) -> bool:
        return True

    def get_intents(self) -> dict[str, Intent]:
        return self._intents

    def has_entity_types(self) -> bool:
        return bool(self._data.get("inputTypes"))

    def get_entity_type(self, name: str) -> EntityType | None:
        return self._entity_types.get(name)

    def get_vendor_data(self, key: str = MODEL_KEY) -> Any:
        return self._data.get(key)


def _legacy_intent(raw: dict[str, Any]) -> Intent:
    entities: dict[str, IntentEntity] = {}
    for item in raw.get("inputs") or []:
        fields = {k: v for k, v in item.items() if k != "name"}
        entities[item["name"]] = IntentEntity.from_dict(fields)
    return Intent(
        phrases=list(raw.get("phrases") or []),
        entities=entities,
        extra={k: v for k, v in raw.items() if k not in ("name", "phrases", "inputs")},
    )


def is_legacy_model(data: dict[str, Any]) -> bool:
    return isinstance(data.get("intents"), list) or "inputTypes" in data


def get_accessor(model: ModelInput) -> ModelAccessor:
    """Return the accessor matching the model's version.

    Args:
        model: A CanonicalModel, or a raw model dict in either the v4 or
               the v3 JSON shape.

    Returns:
        A ModelAccessor. Raw v4 dicts are parsed into a CanonicalModel
        first; their vendor sub-trees are the caller's objects.

    Raises:
        TypeError: If model is neither a CanonicalModel nor a dict.
    """
    if isinstance(model, CanonicalModel):
        return CurrentModelAccessor(model)
    if isinstance(model, dict):
        if is_legacy_model(model):
            return LegacyModelAccessor(model)
        return CurrentModelAccessor(CanonicalModel.from_dict(model))
    raise TypeError(
        "Expected a CanonicalModel or a model dict, got {}".format(type(model).__name__)
    )
