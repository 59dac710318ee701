"""
First pass: collect every metadata fragment into a MetadataStore.

Directory metadata files (`.json`/`.yaml`) apply to their whole directory.
Pages get a derived fragment (source, target, url) and, when they carry front
matter, a second fragment at the same file scope that overrides it. Once the
walk is done the global index of all pages is added at the root and the store
is sealed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from sitestack.config import BuildConfig
from sitestack.frontmatter import load_front_matter, load_metadata_file
from sitestack.kinds import ContentKind, classify, target_relpath
from sitestack.store import ROOT_SCOPE, Fragment, MetadataStore, scope_of

logger = logging.getLogger(__name__)


def walk_files(root: Path) -> Iterator[Path]:
    """Yield every file under root in a stable order. No directory is skipped."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fname in sorted(filenames):
            yield Path(dirpath) / fname


def derived_fragment(source_rel: str, kind: ContentKind) -> Fragment:
    target_rel = target_relpath(source_rel, kind)
    return {
        "source": source_rel,
        "target": target_rel,
        "url": "/" + target_rel,
    }


def gather(config: BuildConfig, store: Optional[MetadataStore] = None) -> MetadataStore:
    """Populate (and seal) a store from config.source."""
    if store is None:
        store = MetadataStore()
    pages: List[str] = []

    for path in walk_files(config.source):
        rel = scope_of(config.source, path)
        kind = classify(path)

        if kind is ContentKind.METADATA:
            fragment = load_metadata_file(path)
            store.add(scope_of(config.source, path.parent), fragment)
            logger.info("%s gathered (%d element(s))", rel, len(fragment))

        elif kind.is_page:
            store.add(rel, derived_fragment(rel, kind))
            front_matter, _ = load_front_matter(path, config.delimiter, config.front_matter_format)
            if front_matter:
                store.add(rel, front_matter)
            else:
                logger.info("%s has no front matter", rel)
            pages.append(rel)
            logger.info("%s gathered (%d element(s))", rel, len(store.get(rel)))

        else:
            logger.info("%s ignored for gathering", rel)

    # resolved only now so directory metadata found later in the walk still counts
    index: Dict[str, Fragment] = {rel: store.get(rel) for rel in pages}
    store.add(ROOT_SCOPE, {config.global_key: index})
    store.seal()
    logger.info("gathered %d page(s), %d fragment(s)", len(pages), len(store))
    return store
