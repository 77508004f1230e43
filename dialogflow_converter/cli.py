"""Command-line interface for the Dialogflow Model Converter.

WHY: Users need a simple way to turn an unpacked Dialogflow agent into a
canonical model file and back from the terminal. The CLI wires together
the pipeline — file loading, schema validation, the import/export
adapters, and file saving — behind two sub-commands.

HOW: Uses argparse with "import" and "export" sub-commands. Each loads
its input via core.files, validates it (unless --no-validate), runs the
adapter, validates the result, and writes it out. Status messages go to
stderr; the imported model goes to stdout when no --output is given.

RULES:
- import AGENT_DIR [--locale L] [--output MODEL.json]
- export MODEL.json --output AGENT_DIR [--locale L]
- Locale defaults to DIALOGFLOW_DEFAULT_LOCALE (see config)
- Status output goes to stderr (not stdout)
- ValueError / ValidationError / OSError -> "Error: ..." on stderr, exit 1
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import jsonschema

from dialogflow_converter.adapters.exporter import export_model
from dialogflow_converter.adapters.importer import import_model
from dialogflow_converter.config import LOG_LEVEL, resolve_locale
from dialogflow_converter.core.files import (
    load_model,
    load_native_files,
    save_model,
    write_native_files,
)
from dialogflow_converter.validation import validate_model, validate_native_files

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the imported model can
    be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _run_import(args: argparse.Namespace) -> None:
    locale = resolve_locale(args.locale)

    _status("Loading agent files from {}...".format(args.agent_dir))
    files = load_native_files(args.agent_dir)
    _status("  {} files".format(len(files)))

    if args.validate:
        validate_native_files(files)

    model = import_model(files, locale)
    _status("  Imported {} intents, {} entity types ({})".format(
        len(model.intents), len(model.entity_types), locale,
    ))

    data = model.to_dict()
    if args.validate:
        validate_model(data)

    if args.output:
        path = save_model(data, args.output)
        _status("Saved: {}".format(path))
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))


def _run_export(args: argparse.Namespace) -> None:
    locale = resolve_locale(args.locale)

    _status("Loading model {}...".format(args.model))
    data = load_model(args.model)

    if args.validate:
        validate_model(data)

    files = export_model(data, locale)
    if args.validate:
        validate_native_files(files)

    written = write_native_files(files, args.output)
    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(written), args.output))
    for path in written:
        _status("  {}".format(path))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="dialogflow_converter",
        description="Convert between a canonical NLU model and Dialogflow agent files.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-l", "--locale",
        default=None,
        help="Locale of the companion files, e.g. en-US "
             "(default: DIALOGFLOW_DEFAULT_LOCALE or 'en').",
    )
    common.add_argument(
        "--validate",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Validate input and output against the JSON schemas (default: %(default)s).",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    import_parser = commands.add_parser(
        "import",
        parents=[common],
        help="Dialogflow agent directory -> canonical model JSON.",
    )
    import_parser.add_argument(
        "agent_dir",
        help="Unpacked agent directory containing intents/ and entities/.",
    )
    import_parser.add_argument(
        "-o", "--output",
        default=None,
        help="Model file to write (default: print to stdout).",
    )
    import_parser.set_defaults(handler=_run_import)

    export_parser = commands.add_parser(
        "export",
        parents=[common],
        help="Canonical model JSON -> Dialogflow agent directory.",
    )
    export_parser.add_argument(
        "model",
        help="Canonical model file (v4, or legacy v3).",
    )
    export_parser.add_argument(
        "-o", "--output",
        required=True,
        help="Agent directory to write intents/ and entities/ into.",
    )
    export_parser.set_defaults(handler=_run_export)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        args.handler(args)
    except jsonschema.ValidationError as e:
        print("Error: invalid input: {}".format(e.message), file=sys.stderr)
        sys.exit(1)
    except (ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
