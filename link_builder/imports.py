"""Chat export parsing: pull ``link`` entities out as numbered URL records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from .errors import InputError
from .infra import read_json_file
from .records import URLRecord

LINK_ENTITY_TYPE = "link"

logger = structlog.get_logger("link_builder.imports")


class TextEntity(BaseModel):
    type: str = ""
    text: str = ""


class ChatMessage(BaseModel):
    date: str = ""
    text_entities: list[TextEntity] = Field(default_factory=list)


class ChatExport(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)


def extract_link_records(document: Any) -> list[URLRecord]:
    """Number every ``link`` entity from 1 in document order."""

    try:
        export = ChatExport.model_validate(document)
    except ValidationError as exc:
        raise InputError(f"chat export does not match the expected schema: {exc}") from exc

    records: list[URLRecord] = []
    for message in export.messages:
        for entity in message.text_entities:
            logger.debug("entity_seen", type=entity.type, text=entity.text)
            if entity.type != LINK_ENTITY_TYPE:
                continue
            records.append(URLRecord(id=len(records) + 1, date=message.date, url=entity.text))
    return records


def load_chat_export(path: Path) -> list[URLRecord]:
    try:
        document = read_json_file(path)
    except OSError as exc:
        raise InputError(f"cannot read chat export {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"chat export {path} is not valid JSON: {exc}") from exc
    records = extract_link_records(document)
    logger.info("chat_export_loaded", path=str(path), links=len(records))
    return records


__all__ = ["ChatExport", "ChatMessage", "TextEntity", "extract_link_records", "load_chat_export"]
