from __future__ import annotations

import json

from typer.testing import CliRunner

from link_builder.app import AppState, app
from link_builder.errors import ConfigError
from link_builder.orchestrator import Orchestrator
from link_builder.records import PreviewRecord


def make_state(config, fetcher=None) -> AppState:
    factory = (lambda: fetcher) if fetcher is not None else None
    return AppState(orchestrator=Orchestrator(config, fetcher_factory=factory))


def install_state(monkeypatch, state: AppState) -> list[tuple]:
    calls: list[tuple] = []

    def _build_state(verbose, config_path=None):
        calls.append((verbose, config_path))
        return state

    monkeypatch.setattr("link_builder.app.build_state", _build_state)
    return calls


def test_cli_import_prints_statistics(monkeypatch, sample_config, write_json, chat_export) -> None:
    write_json(
        "import/export.json",
        chat_export(("2025-05-01", [("link", "http://example.com"), ("link", "broken"), ("link", "https://skip.me")])),
    )
    calls = install_state(monkeypatch, make_state(sample_config))

    result = CliRunner().invoke(app, ["-v", "import", "--ignore", "skip"])

    assert result.exit_code == 0, result.stdout
    assert calls == [(True, None)]
    output = result.stdout
    assert "Total URLs read" in output
    assert "Ignored URLs" in output
    saved = json.loads(sample_config.imports.output_path.read_text(encoding="utf-8"))
    assert saved == [{"id": 1, "date": "2025-05-01", "url": "http://example.com"}]


def test_cli_import_missing_input_exits_with_error(monkeypatch, sample_config, tmp_path) -> None:
    install_state(monkeypatch, make_state(sample_config))

    result = CliRunner().invoke(app, ["import", "--input", str(tmp_path / "absent.json")])

    assert result.exit_code == 1
    assert "Import failed" in result.stdout


def test_cli_import_passes_config_path(monkeypatch, sample_config, write_json, chat_export, tmp_path) -> None:
    write_json("import/export.json", chat_export(("d", [("link", "http://example.com")])))
    calls = install_state(monkeypatch, make_state(sample_config))
    config_path = tmp_path / "custom.yaml"

    result = CliRunner().invoke(app, ["--config", str(config_path), "import"])

    assert result.exit_code == 0, result.stdout
    assert calls == [(False, config_path)]


def test_cli_reports_config_errors(monkeypatch) -> None:
    def _broken(verbose, config_path=None):
        raise ConfigError("invalid configuration")

    monkeypatch.setattr("link_builder.app.build_state", _broken)

    result = CliRunner().invoke(app, ["import"])

    assert result.exit_code == 1
    assert "invalid configuration" in result.stdout


def test_cli_previews_writes_output(monkeypatch, sample_config, write_json, fake_fetcher_factory) -> None:
    write_json(
        "dist/urls.json",
        [
            {"id": 1, "date": "d", "url": "http://example.com"},
            {"id": 2, "date": "d", "url": "https://example.org"},
        ],
    )
    fetcher = fake_fetcher_factory()
    install_state(monkeypatch, make_state(sample_config, fetcher))

    result = CliRunner().invoke(app, ["previews", "--no-progress"])

    assert result.exit_code == 0, result.stdout
    assert "Previews written" in result.stdout
    assert fetcher.calls == ["http://example.com", "https://example.org"]
    written = json.loads(sample_config.previews.output_path.read_text(encoding="utf-8"))
    assert [entry["id"] for entry in written] == [1, 2]


def test_cli_previews_fails_when_nothing_usable(monkeypatch, sample_config, write_json, fake_fetcher_factory) -> None:
    write_json("dist/urls.json", [{"id": 1, "date": "d", "url": "http://example.com"}])
    fetcher = fake_fetcher_factory({"http://example.com": PreviewRecord()})
    install_state(monkeypatch, make_state(sample_config, fetcher))

    result = CliRunner().invoke(app, ["previews", "--no-progress"])

    assert result.exit_code == 1
    assert "Preview generation failed" in result.stdout
