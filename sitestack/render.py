"""
Markdown conversion and template rendering.

Templates are Jinja2. A page (or the template it names) can pull in another
template with `{% include %}`/`{% extends %}`; lookups go to the page's own
directory first, then the source root. Three helpers inline sibling files
without escaping: `importcss`, `importjs` and `importhtml`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict

import markdown
from jinja2 import Environment, FileSystemLoader, TemplateError
from markupsafe import Markup

from sitestack.errors import RenderError
from sitestack.frontmatter import read_text

MARKDOWN_EXTENSIONS = ["extra", "fenced_code", "tables", "smarty"]


def render_markdown(md_text: str) -> str:
    """Convert markdown to HTML (fenced code, tables, smart punctuation)."""
    return markdown.markdown(md_text, extensions=MARKDOWN_EXTENSIONS)


def _helpers(base_dir: Path) -> Dict[str, Callable[[str], Markup]]:
    """Inline helpers reading files relative to `base_dir`."""
    def _inline(filename: str) -> Markup:
        return Markup(read_text(base_dir / filename))

    return {"importcss": _inline, "importjs": _inline, "importhtml": _inline}


class TemplateRenderer:
    """Renders page bodies and named templates against effective metadata."""

    def __init__(self, source_root: Path):
        self.source_root = source_root
        self._envs: Dict[Path, Environment] = {}

    def _env_for(self, page: Path) -> Environment:
        page_dir = page.parent
        env = self._envs.get(page_dir)
        if env is None:
            search_path = [str(page_dir)]
            if page_dir != self.source_root:
                search_path.append(str(self.source_root))
            env = Environment(loader=FileSystemLoader(search_path), autoescape=True)
            env.globals.update(_helpers(page_dir))
            self._envs[page_dir] = env
        return env

    def render_string(self, page: Path, text: str, metadata: Dict[str, Any]) -> str:
        """Render `text` (the page body itself) as a template."""
        env = self._env_for(page)
        try:
            template = env.from_string(text)
            return template.render(metadata)
        except TemplateError as exc:
            raise RenderError(f"template error: {exc}", page) from exc

    def render_named(self, page: Path, name: str, metadata: Dict[str, Any]) -> str:
        """Render the template file `name` on behalf of `page`."""
        env = self._env_for(page)
        try:
            template = env.get_template(name)
            return template.render(metadata)
        except TemplateError as exc:
            raise RenderError(f"template '{name}': {exc}", page) from exc
