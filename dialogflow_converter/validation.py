"""JSON-schema validation for canonical models and Dialogflow file sets.

WHY: The adapters trust their input shape. A typo in a hand-edited model
("entites", a phrase given as a number) would otherwise surface as a
confusing KeyError deep inside the exporter, or as an agent Dialogflow
refuses to restore. Validating at the boundary gives one clear message.

HOW: Two schemas ship as package data in schemas/ and are loaded once,
then cached at module level. The canonical schema covers the v4 shape;
the agent schema has one definition per native file kind (intent,
usersays, entity, entries), picked from each file's path.

RULES:
- Legacy (v3) models are accepted without schema validation
- validate_* raise jsonschema.ValidationError on the first problem;
  native-file errors are prefixed with the file path
- iter_* yield every problem and never raise
- Files outside intents/ and entities/ are not validated
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

import jsonschema

from dialogflow_converter.core.accessor import is_legacy_model
from dialogflow_converter.core.ir import CanonicalModel
from dialogflow_converter.core.native import NativeFile

logger = logging.getLogger(__name__)

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
_MODEL_SCHEMA_PATH = _SCHEMA_DIR / "canonical-model.schema.json"
_AGENT_SCHEMA_PATH = _SCHEMA_DIR / "dialogflow-agent.schema.json"

_CACHED_MODEL_SCHEMA: Optional[dict] = None
_CACHED_AGENT_SCHEMA: Optional[dict] = None
_FILE_VALIDATORS: dict[str, jsonschema.Draft7Validator] = {}


def _load_schema(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def get_model_schema() -> dict[str, Any]:
    """Load and cache the canonical model schema."""
    global _CACHED_MODEL_SCHEMA
    if _CACHED_MODEL_SCHEMA is None:
        _CACHED_MODEL_SCHEMA = _load_schema(_MODEL_SCHEMA_PATH)
    return _CACHED_MODEL_SCHEMA


def get_agent_schema() -> dict[str, Any]:
    """Load and cache the Dialogflow agent schema."""
    global _CACHED_AGENT_SCHEMA
    if _CACHED_AGENT_SCHEMA is None:
        _CACHED_AGENT_SCHEMA = _load_schema(_AGENT_SCHEMA_PATH)
    return _CACHED_AGENT_SCHEMA


def _file_validator(kind: str) -> jsonschema.Draft7Validator:
    validator = _FILE_VALIDATORS.get(kind)
    if validator is None:
        agent_schema = get_agent_schema()
        validator = jsonschema.Draft7Validator({
            "$schema": agent_schema["$schema"],
            "definitions": agent_schema["definitions"],
            "allOf": [{"$ref": "#/definitions/{}".format(kind)}],
        })
        _FILE_VALIDATORS[kind] = validator
    return validator


def _model_data(model: Union[CanonicalModel, dict]) -> dict[str, Any]:
    return model.to_dict() if isinstance(model, CanonicalModel) else model


def iter_model_errors(model: Union[CanonicalModel, dict]) -> Iterator[jsonschema.ValidationError]:
    """Yield every schema violation of a v4 model (nothing for v3 models)."""
    data = _model_data(model)
    if isinstance(data, dict) and is_legacy_model(data):
        return
    yield from jsonschema.Draft7Validator(get_model_schema()).iter_errors(data)


def validate_model(model: Union[CanonicalModel, dict]) -> None:
    """Validate a canonical model against the v4 schema.

    Raises:
        jsonschema.ValidationError: If the model does not conform.
    """
    data = _model_data(model)
    if isinstance(data, dict) and is_legacy_model(data):
        logger.debug("Skipping schema validation for legacy model")
        return
    jsonschema.validate(instance=data, schema=get_model_schema())


def iter_native_file_errors(
    files: Iterable[Union[NativeFile, dict]],
) -> Iterator[Tuple[str, jsonschema.ValidationError]]:
    """Yield (file path, error) for every schema violation in a file set."""
    for item in files:
        native_file = NativeFile.coerce(item)
        kind = native_file.kind
        if not kind:
            continue
        for error in _file_validator(kind).iter_errors(native_file.content):
            yield "/".join(native_file.path), error


def validate_native_files(files: Iterable[Union[NativeFile, dict]]) -> None:
    """Validate every file of a native file set against its kind's schema.

    Raises:
        jsonschema.ValidationError: For the first non-conforming file; the
            message starts with the file's path.
    """
    for path, error in iter_native_file_errors(files):
        raise jsonschema.ValidationError("{}: {}".format(path, error.message))
