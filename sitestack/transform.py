"""
Second pass: render pages with their effective metadata and mirror the rest.

Only reads the store. Markdown pages are converted, stored under the content
key and poured into the template named by the template key; HTML pages are
templates themselves. Assets are copied byte for byte.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict

from markupsafe import Markup

from sitestack.config import BuildConfig
from sitestack.errors import BuildIOError, MissingKeyError, RenderError, StoreSealedError
from sitestack.frontmatter import load_front_matter
from sitestack.gather import walk_files
from sitestack.kinds import ContentKind, classify, target_relpath
from sitestack.render import TemplateRenderer, render_markdown
from sitestack.store import MetadataStore, scope_of

logger = logging.getLogger(__name__)


def resolve_page(
    config: BuildConfig, store: MetadataStore, path: Path, body: str
) -> Dict[str, Any]:
    """Effective metadata for a Markdown page, with its rendered body added."""
    metadata = store.get(scope_of(config.source, path))
    metadata[config.content_key] = Markup(render_markdown(body))
    if config.template_key not in metadata:
        raise MissingKeyError(config.template_key, path)
    return metadata


def _output_path(config: BuildConfig, path: Path, metadata: Dict[str, Any]) -> Path:
    target = metadata.get("target")
    if not isinstance(target, str) or not target.strip("/"):
        raise RenderError(f"invalid 'target' value {target!r}", path)
    dst = (config.target / target.lstrip("/")).resolve()
    if config.target != dst and config.target not in dst.parents:
        raise RenderError(f"target '{target}' escapes the target directory", path)
    return dst


def write_output(dst: Path, text: str, source: Path) -> None:
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise BuildIOError(f"cannot write {dst}: {exc}", source) from exc


def copy_verbatim(src: Path, dst: Path) -> None:
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
    except OSError as exc:
        raise BuildIOError(f"cannot copy to {dst}: {exc}", src) from exc


def transform(config: BuildConfig, store: MetadataStore) -> int:
    """Write the target tree. Returns the number of files written."""
    if not store.sealed:
        raise StoreSealedError("metadata store read before gathering completed")

    renderer = TemplateRenderer(config.source)
    written = 0

    for path in walk_files(config.source):
        rel = scope_of(config.source, path)
        kind = classify(path)

        if kind is ContentKind.MARKDOWN:
            _, body = load_front_matter(path, config.delimiter, config.front_matter_format)
            metadata = resolve_page(config, store, path, body)
            template_name = metadata[config.template_key]
            if not isinstance(template_name, str):
                raise RenderError(
                    f"'{config.template_key}' must name a template, got {template_name!r}", path
                )
            output = renderer.render_named(path, template_name, metadata)
            dst = _output_path(config, path, metadata)
            write_output(dst, output, path)
            logger.info("%s transformed to %s", rel, dst)

        elif kind is ContentKind.HTML:
            _, body = load_front_matter(path, config.delimiter, config.front_matter_format)
            metadata = store.get(rel)
            output = renderer.render_string(path, body, metadata)
            dst = _output_path(config, path, metadata)
            write_output(dst, output, path)
            logger.info("%s transformed to %s", rel, dst)

        elif kind in (ContentKind.METADATA, ContentKind.TEMPLATE):
            logger.info("%s ignored for transformation", rel)
            continue

        else:
            dst = config.target / target_relpath(rel, kind)
            copy_verbatim(path, dst)
            logger.info("%s transformed to %s verbatim", rel, dst)

        written += 1

    return written
