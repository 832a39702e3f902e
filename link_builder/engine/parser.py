"""HTML metadata parsing for link previews."""

from __future__ import annotations

from selectolax.lexbor import LexborHTMLParser

from ..records import PreviewRecord

OG_PREFIX = "og:"
TWITTER_PREFIX = "twitter:"


class PreviewParser:
    """Extract title, description and social-card metas from an HTML page."""

    def parse(self, html: str) -> PreviewRecord:
        tree = LexborHTMLParser(html)
        og_meta: dict[str, str] = {}
        twitter_meta: dict[str, str] = {}
        description = ""
        for node in tree.css("meta"):
            attrs = node.attributes
            key = (attrs.get("property") or attrs.get("name") or "").strip().lower()
            content = (attrs.get("content") or "").strip()
            if not key or not content:
                continue
            if key.startswith(OG_PREFIX):
                # first og:image wins over later variants
                og_meta.setdefault(key[len(OG_PREFIX):], content)
            elif key.startswith(TWITTER_PREFIX):
                twitter_meta.setdefault(key[len(TWITTER_PREFIX):], content)
            elif key == "description" and not description:
                description = content
        return PreviewRecord(
            title=self._title(tree),
            description=description,
            og_meta=og_meta,
            twitter_meta=twitter_meta,
        )

    @staticmethod
    def _title(tree: LexborHTMLParser) -> str:
        node = tree.css_first("title")
        if node is None:
            return ""
        return node.text(separator=" ", strip=True)


__all__ = ["PreviewParser"]
