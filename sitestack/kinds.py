"""Recognised file kinds and how each one is handled by the two passes."""

from __future__ import annotations

import enum
from pathlib import Path, PurePosixPath
from typing import Optional


class ContentKind(enum.Enum):
    METADATA = "metadata"
    MARKDOWN = "markdown"
    HTML = "html"
    TEMPLATE = "template"
    ASSET = "asset"

    @property
    def is_page(self) -> bool:
        """Pages carry optional front matter and are rendered to HTML."""
        return self in (ContentKind.MARKDOWN, ContentKind.HTML)

    @property
    def target_suffix(self) -> Optional[str]:
        # None keeps the source suffix
        return ".html" if self is ContentKind.MARKDOWN else None


_KINDS_BY_SUFFIX = {
    ".json": ContentKind.METADATA,
    ".yaml": ContentKind.METADATA,
    ".yml": ContentKind.METADATA,
    ".md": ContentKind.MARKDOWN,
    ".markdown": ContentKind.MARKDOWN,
    ".html": ContentKind.HTML,
    ".htm": ContentKind.HTML,
    ".template": ContentKind.TEMPLATE,
    ".source": ContentKind.TEMPLATE,
    ".j2": ContentKind.TEMPLATE,
}


def classify(path: Path) -> ContentKind:
    return _KINDS_BY_SUFFIX.get(path.suffix.lower(), ContentKind.ASSET)


def target_relpath(source_rel: str, kind: ContentKind) -> str:
    """Map a source-relative path to its target-relative path."""
    rel = PurePosixPath(source_rel)
    if kind.target_suffix:
        rel = rel.with_suffix(kind.target_suffix)
    return rel.as_posix()
