"""Tests for the command-line interface and locale configuration.

WHY: The CLI is how users run the converter. Its argument defaults, the
stdout/stderr split, and the exit codes are part of the contract scripts
rely on.

HOW: Call main() with explicit argv against the sample agent on disk and
model files in tmp_path; capture output with capsys.

RULES:
- Status output is checked on stderr; model JSON on stdout.
- Failures must exit with code 1 and a one-line "Error: ..." message.
"""

import json

import pytest

from dialogflow_converter import config
from dialogflow_converter.cli import build_parser, main


class TestBuildParser:

    def test_import_defaults(self):
        args = build_parser().parse_args(["import", "agent"])
        assert args.command == "import"
        assert args.agent_dir == "agent"
        assert args.locale is None
        assert args.output is None
        assert args.validate is True

    def test_no_validate(self):
        args = build_parser().parse_args(["export", "m.json", "-o", "out", "--no-validate", "-l", "de"])
        assert args.validate is False
        assert args.locale == "de"

    def test_export_requires_output(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "m.json"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestImportCommand:

    def test_prints_model_to_stdout(self, agent_dir, capsys):
        main(["import", str(agent_dir), "-l", "en"])
        captured = capsys.readouterr()
        model = json.loads(captured.out)
        assert list(model["intents"]) == ["BookFlight", "Cancel"]
        assert "Imported 2 intents, 2 entity types (en)" in captured.err

    def test_writes_output_file(self, agent_dir, tmp_path, capsys):
        out = tmp_path / "model.json"
        main(["import", str(agent_dir), "-l", "en", "-o", str(out)])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved:" in captured.err
        model = json.loads(out.read_text(encoding="utf-8"))
        assert model["intents"]["BookFlight"]["phrases"][1] == "fly to {city}"

    def test_default_locale_from_config(self, agent_dir, monkeypatch, capsys):
        monkeypatch.setattr(config, "DEFAULT_LOCALE", "de")
        main(["import", str(agent_dir)])
        model = json.loads(capsys.readouterr().out)
        assert model["intents"]["BookFlight"]["phrases"] == ["flug buchen"]

    def test_missing_agent_dir_fails(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as info:
            main(["import", str(tmp_path / "nowhere")])
        assert info.value.code == 1
        assert "Error: Not a Dialogflow agent directory" in capsys.readouterr().err


class TestExportCommand:

    def _write(self, tmp_path, model):
        path = tmp_path / "model.json"
        path.write_text(json.dumps(model), encoding="utf-8")
        return path

    def test_writes_agent_files(self, tmp_path, v4_model, capsys):
        out = tmp_path / "agent"
        main(["export", str(self._write(tmp_path, v4_model)), "-l", "en-US", "-o", str(out)])
        assert (out / "intents" / "BookFlight.json").is_file()
        assert (out / "intents" / "BookFlight_usersays_en-US.json").is_file()
        assert (out / "entities" / "city_entries_en-US.json").is_file()
        assert "Done! Saved 6 file(s)" in capsys.readouterr().err

    def test_legacy_model(self, tmp_path, v3_model):
        out = tmp_path / "agent"
        main(["export", str(self._write(tmp_path, v3_model)), "-l", "en", "-o", str(out)])
        entity = json.loads((out / "entities" / "city.json").read_text(encoding="utf-8"))
        assert entity["automatedExpansion"] is True

    def test_undefined_entity_type_fails(self, tmp_path, v4_model, capsys):
        v4_model["intents"]["HelloWorld"]["entities"] = {"a": {"type": "airport"}}
        v4_model["intents"]["HelloWorld"]["phrases"] = ["to {a}"]
        with pytest.raises(SystemExit) as info:
            main(["export", str(self._write(tmp_path, v4_model)), "-o", str(tmp_path / "out")])
        assert info.value.code == 1
        err = capsys.readouterr().err
        assert 'Error: Entity type "airport" must be defined in entityTypes' in err
        assert 'intent "HelloWorld", entity "a"' in err

    def test_invalid_model_fails_validation(self, tmp_path, v4_model, capsys):
        v4_model["entityTypes"]["city"]["dialogflow"] = 5
        with pytest.raises(SystemExit) as info:
            main(["export", str(self._write(tmp_path, v4_model)), "-o", str(tmp_path / "out")])
        assert info.value.code == 1
        assert "Error: invalid input:" in capsys.readouterr().err

    def test_no_validate_skips_schema(self, tmp_path, v4_model):
        v4_model["entityTypes"]["city"]["dialogflow"] = 5
        out = tmp_path / "out"
        main(["export", str(self._write(tmp_path, v4_model)), "-o", str(out), "--no-validate"])
        assert (out / "entities" / "city.json").is_file()


class TestResolveLocale:

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_LOCALE", "en")
        assert config.resolve_locale("pt-BR") == "pt-BR"

    def test_falls_back_to_default(self, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_LOCALE", "fr")
        assert config.resolve_locale() == "fr"

    def test_empty_raises(self, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_LOCALE", "")
        with pytest.raises(ValueError, match="No locale configured"):
            config.resolve_locale("  ")
