"""Order-preserving deduplication of URL records."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Sequence

from ..records import URLRecord


def ensure_unique_urls(valid_urls: AbstractSet[str], records: Iterable[URLRecord]) -> set[str]:
    """Keep the valid URLs that are still referenced by at least one record."""

    return {record.url for record in records if record.url in valid_urls}


def filter_unique_records(
    survivors: AbstractSet[str], records: Sequence[URLRecord]
) -> list[URLRecord]:
    """Return the first record for every surviving URL, in input order."""

    seen: set[str] = set()
    unique: list[URLRecord] = []
    for record in records:
        if record.url not in survivors or record.url in seen:
            continue
        seen.add(record.url)
        unique.append(record)
    return unique


def deduplicate(valid_urls: AbstractSet[str], records: Sequence[URLRecord]) -> list[URLRecord]:
    return filter_unique_records(ensure_unique_urls(valid_urls, records), records)


__all__ = ["deduplicate", "ensure_unique_urls", "filter_unique_records"]
