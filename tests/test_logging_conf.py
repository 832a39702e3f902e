from __future__ import annotations

from pathlib import Path

from link_builder.logging_conf import build_logging_config


def test_logging_config_routes_app_logger_to_every_handler(tmp_path: Path) -> None:
    config = build_logging_config(tmp_path)

    assert config["loggers"]["link_builder"] == {
        "handlers": ["console", "app_file", "error_file"],
        "level": "INFO",
        "propagate": False,
    }
    assert config["handlers"]["app_file"]["filename"] == str(tmp_path / "link_builder.log")
    assert config["handlers"]["error_file"]["filename"] == str(tmp_path / "error.log")
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert config["formatters"]["json"]["()"] == "pythonjsonlogger.json.JsonFormatter"


def test_verbose_logging_lowers_level_except_error_log(tmp_path: Path) -> None:
    config = build_logging_config(tmp_path, verbose=True)

    assert config["loggers"]["link_builder"]["level"] == "DEBUG"
    assert config["handlers"]["console"]["level"] == "DEBUG"
    assert config["handlers"]["app_file"]["level"] == "DEBUG"
    assert config["handlers"]["error_file"]["level"] == "ERROR"
