"""Configuration loading helpers for link-builder."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import LinkBuilderConfig

CONFIG_FILENAME = "link_builder.yaml"
HOME_ENV = "LINK_BUILDER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the project home and the paths derived from it."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def config_path(self) -> Path:
        return self.project_root / CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None, path: Path | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self.path = path or self.locator.config_path()
        self._cache: LinkBuilderConfig | None = None

    def load(self) -> LinkBuilderConfig:
        if self._cache is not None:
            return self._cache
        if self.path.exists():
            try:
                payload = _read_file(self.path)
                config = LinkBuilderConfig.model_validate(payload)
            except (OSError, ValueError, yaml.YAMLError) as exc:
                # ValidationError and JSONDecodeError are both ValueErrors
                raise ConfigError(f"cannot load configuration {self.path}: {exc}") from exc
        else:
            config = LinkBuilderConfig()
            self._write_defaults(config)
        self._cache = config
        return config

    def _write_defaults(self, config: LinkBuilderConfig) -> None:
        # the ignore pattern stays with IMPORT_IGNORE unless set in the file
        payload = config.model_dump(mode="json", exclude={"validation": {"ignore_pattern"}})
        try:
            _write_file(self.path, payload)
        except OSError as exc:
            raise ConfigError(f"cannot write default configuration {self.path}: {exc}") from exc


__all__ = ["CONFIG_FILENAME", "HOME_ENV", "ConfigLocator", "ConfigRepository"]
