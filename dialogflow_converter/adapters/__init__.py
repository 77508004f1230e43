"""Adapters between the canonical model and Dialogflow agent files.

WHY: The canonical model and Dialogflow's agent layout differ in shape
(nested dicts vs. one file per record), in defaults (Dialogflow writes
every field), and in what they can express. Adapters bridge these
representations so each side can evolve independently.

HOW: importer.py turns a native file set into a CanonicalModel,
exporter.py turns a CanonicalModel back into a native file set, and
defaults.py holds the Dialogflow default values both of them consult.

RULES:
- Adapters are pure data transformations — no I/O
- The exporter only mutates the model-level "dialogflow" sub-tree
  (inline userSays/entries are moved into companion files)
"""

from dialogflow_converter.adapters.exporter import (
    EntityTypeError,
    EntityTypeNotDefinedError,
    InvalidEntityTypeError,
    export_model,
)
from dialogflow_converter.adapters.importer import import_model

__all__ = [
    "EntityTypeError",
    "EntityTypeNotDefinedError",
    "InvalidEntityTypeError",
    "export_model",
    "import_model",
]
