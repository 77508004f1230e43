"""Reading and writing agent directories and canonical model files.

WHY: The adapters work on in-memory file sets only. Something still has
to walk a Dialogflow agent directory, parse each JSON file, and later
write an exported file set back to disk; keeping that here keeps the
adapters pure and testable without a file system.

HOW: load_native_files() lists intents/*.json and entities/*.json in
sorted order and returns NativeFile records with two-segment paths.
write_native_files() recreates the directories and writes each record.
load_model() / save_model() handle the canonical model JSON file.

RULES:
- Only the intents/ and entities/ sub-directories are read
- Files are read and written as UTF-8, written with indent=2
- A directory with neither sub-directory is rejected with ValueError
- Corrupt JSON raises json.JSONDecodeError (a ValueError) with the file name
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Union

from dialogflow_converter.config import ENTITIES_DIR, INTENTS_DIR
from dialogflow_converter.core.ir import CanonicalModel
from dialogflow_converter.core.native import NativeFile

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise json.JSONDecodeError(
            "{} in {}".format(exc.msg, path), exc.doc, exc.pos
        ) from exc


def load_native_files(agent_dir: Union[str, Path]) -> List[NativeFile]:
    """Read every intent and entity file of an agent directory.

    Args:
        agent_dir: Root of an unpacked Dialogflow agent (the directory that
                   contains intents/ and entities/).

    Returns:
        NativeFile records, intents first, each directory in filename order.

    Raises:
        ValueError: If agent_dir has neither an intents/ nor an entities/
                    sub-directory.
    """
    root = Path(agent_dir)
    subdirs = [root / INTENTS_DIR, root / ENTITIES_DIR]
    if not any(d.is_dir() for d in subdirs):
        raise ValueError(
            "Not a Dialogflow agent directory (no {}/ or {}/ found): {}".format(
                INTENTS_DIR, ENTITIES_DIR, root
            )
        )

    files: List[NativeFile] = []
    for directory in subdirs:
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*.json")):
            files.append(NativeFile(path=[directory.name, path.name], content=_read_json(path)))
    logger.debug("Loaded %d native files from %s", len(files), root)
    return files


def write_native_files(files: Iterable[NativeFile], out_dir: Union[str, Path]) -> List[Path]:
    """Write a native file set below out_dir and return the written paths.

    Existing files with the same name are overwritten.
    """
    root = Path(out_dir)
    written: List[Path] = []
    for native_file in files:
        path = root.joinpath(*native_file.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(native_file.content, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        written.append(path)
    logger.debug("Wrote %d native files to %s", len(written), root)
    return written


def load_model(path: Union[str, Path]) -> dict:
    """Load a canonical model JSON file as a plain dict (v3 or v4 shape)."""
    data = _read_json(Path(path))
    if not isinstance(data, dict):
        raise ValueError("Model file must contain a JSON object: {}".format(path))
    return data


def save_model(model: Union[CanonicalModel, dict], path: Union[str, Path]) -> Path:
    """Write a canonical model to a JSON file and return its path."""
    data = model.to_dict() if isinstance(model, CanonicalModel) else model
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return out
