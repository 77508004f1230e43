"""Dialogflow Model Converter — canonical NLU model <-> Dialogflow agent files.

WHY: Conversational projects keep their training data (intents, sample
phrases, entity types) in one vendor-neutral model, but Dialogflow only
accepts its own agent file layout. This package translates between the two
in both directions without losing Dialogflow-only settings.

HOW: Two pure adapters sit on a shared canonical IR. The importer reads a
native file set (intents/*.json, entities/*.json and their per-locale
companions) into a CanonicalModel; the exporter turns a CanonicalModel (or
a legacy v3 model dict) back into a native file set. Default-value tables
decide which Dialogflow fields are worth keeping in the "dialogflow" escape
hatch.

RULES:
- Adapters never touch the file system — core.files does the I/O
- Fields at their Dialogflow default are never copied into the escape hatch
- Export fails fast on unresolved entity types; import never fails
"""

from dialogflow_converter.adapters.exporter import export_model
from dialogflow_converter.adapters.importer import import_model

__version__ = "0.1.0"

__all__ = ["export_model", "import_model"]
