"""Shared fixtures for link-builder tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from link_builder.config import ConfigLocator, ConfigRepository, LinkBuilderConfig
from link_builder.errors import FetchError
from link_builder.records import PreviewRecord


class FakeFetcher:
    """Preview fetcher returning canned results and counting calls per URL."""

    def __init__(self, responses: dict[str, PreviewRecord | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []
        self.closed = False

    def fetch(self, url: str) -> PreviewRecord:
        self.calls.append(url)
        outcome = self.responses.get(url)
        if outcome is None:
            return PreviewRecord(title=f"Title of {url}", description="A page")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_fetcher_factory() -> Callable[..., FakeFetcher]:
    return FakeFetcher


@pytest.fixture
def failing_fetch() -> Callable[[str], FetchError]:
    return lambda url: FetchError(url, "connection refused")


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    def _writer(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _writer


@pytest.fixture
def chat_export() -> Callable[..., dict[str, Any]]:
    def _builder(*messages: tuple[str, list[tuple[str, str]]]) -> dict[str, Any]:
        return {
            "messages": [
                {
                    "date": date,
                    "text_entities": [{"type": kind, "text": text} for kind, text in entities],
                }
                for date, entities in messages
            ]
        }

    return _builder


@pytest.fixture
def sample_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> LinkBuilderConfig:
    monkeypatch.delenv("IMPORT_IGNORE", raising=False)
    return LinkBuilderConfig.model_validate(
        {
            "imports": {
                "input_path": str(tmp_path / "import" / "export.json"),
                "output_path": str(tmp_path / "dist" / "urls.json"),
            },
            "validation": {"workers": 4},
            "previews": {
                "input_path": str(tmp_path / "dist" / "urls.json"),
                "output_path": str(tmp_path / "dist" / "previews.json"),
                "show_progress": False,
            },
        }
    )


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigRepository:
    monkeypatch.setenv("LINK_BUILDER_HOME", str(tmp_path))
    return ConfigRepository(ConfigLocator())
