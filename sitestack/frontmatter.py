"""
Front matter and metadata file parsing.

A content file is `<metadata block><delimiter><body>`. The block is JSON or
YAML and must decode to a mapping; the body is handed to the renderer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Tuple, Union

import yaml

from sitestack.errors import BuildIOError, MetadataParseError
from sitestack.store import Fragment

DEFAULT_DELIMITER = "---\n"

FORMATS = ("json", "yaml")

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def format_for_suffix(suffix: str) -> str:
    return _SUFFIX_FORMATS[suffix.lower()]


def split_front_matter(text: str, delimiter: str = DEFAULT_DELIMITER) -> Tuple[str, str]:
    """Split on the first line that is exactly `delimiter`.

    Returns (metadata_block, body). Without a delimiter line the block is empty
    and the body is the whole input. The block keeps its final newline.
    """
    if text.startswith(delimiter):
        return "", text[len(delimiter):]
    idx = text.find("\n" + delimiter)
    if idx < 0:
        return "", text
    return text[: idx + 1], text[idx + 1 + len(delimiter):]


def parse_fragment(text: str, fmt: str, source: Union[str, Path]) -> Fragment:
    """Decode a JSON or YAML metadata block into a mapping."""
    if not text.strip():
        return {}
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise MetadataParseError(f"unknown metadata format '{fmt}'", source)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MetadataParseError(f"malformed {fmt} metadata: {exc}", source) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MetadataParseError(
            f"{fmt} metadata must be a mapping, got {type(data).__name__}", source
        )
    return data


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildIOError(f"cannot read: {exc}", path) from exc


def load_metadata_file(path: Path) -> Fragment:
    """Parse a whole `.json`/`.yaml` file as one fragment."""
    return parse_fragment(read_text(path), format_for_suffix(path.suffix), path)


def load_front_matter(
    path: Path, delimiter: str = DEFAULT_DELIMITER, fmt: str = "json"
) -> Tuple[Fragment, str]:
    """Read a content file; returns (front matter fragment, body)."""
    block, body = split_front_matter(read_text(path), delimiter)
    return parse_fragment(block, fmt, path), body
