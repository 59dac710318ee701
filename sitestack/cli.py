"""
Build a static site from a source tree.

Usage:
  sitestack --source ./src --target ./site
  python -m sitestack --source ./src --target ./site --global-key pages --front-matter-format yaml

Metadata in `.json`/`.yaml` files applies to its directory and everything
below it; front matter (the block before the first `---` line) applies to
its own file and wins over directory metadata.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from sitestack.config import BuildConfig
from sitestack.errors import BuildError, BuildIOError
from sitestack.frontmatter import FORMATS
from sitestack.gather import gather
from sitestack.store import MetadataStore
from sitestack.transform import transform

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sitestack",
        description="Render a source tree of Markdown/HTML pages and assets into a static site.",
    )
    parser.add_argument("--source", type=Path, default=Path("src"), help="path to site source (input)")
    parser.add_argument("--target", type=Path, default=Path("tgt"), help="path to site target (output)")
    parser.add_argument(
        "--global-key",
        default="files",
        help="template key under which every page's metadata is listed (default: files)",
    )
    parser.add_argument(
        "--template-key",
        default="template",
        help="metadata key naming the template for Markdown pages (default: template)",
    )
    parser.add_argument(
        "--content-key",
        default="content",
        help="metadata key receiving the rendered Markdown body (default: content)",
    )
    parser.add_argument(
        "--delimiter",
        default="---",
        help="line separating front matter from the body (default: ---)",
    )
    parser.add_argument(
        "--front-matter-format",
        choices=FORMATS,
        default="json",
        help="format of front matter blocks (default: json)",
    )
    parser.add_argument("--clean", action="store_true", help="remove the target directory first")
    parser.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    return BuildConfig(
        source=args.source,
        target=args.target,
        global_key=args.global_key,
        template_key=args.template_key,
        content_key=args.content_key,
        delimiter=args.delimiter + "\n" if args.delimiter else "",
        front_matter_format=args.front_matter_format,
        clean=args.clean,
    ).resolve()


def setup_logging(quiet: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger = logging.getLogger("sitestack")
    pkg_logger.handlers[:] = [handler]
    pkg_logger.setLevel(logging.WARNING if quiet else logging.INFO)


def prepare_target(config: BuildConfig) -> None:
    try:
        if config.clean and config.target.exists():
            shutil.rmtree(config.target)
        config.target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BuildIOError(f"cannot prepare target directory: {exc}", config.target) from exc


def build(config: BuildConfig) -> int:
    """Run both passes. Returns the number of files written."""
    config.validate()
    prepare_target(config)

    store = gather(config, MetadataStore())
    return transform(config, store)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.quiet)
    config = config_from_args(args)

    try:
        written = build(config)
    except BuildError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("site generated at %s (%d file(s))", config.target, written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
