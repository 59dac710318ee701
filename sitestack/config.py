"""Build configuration shared by both passes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sitestack.errors import ConfigError
from sitestack.frontmatter import DEFAULT_DELIMITER, FORMATS


@dataclass
class BuildConfig:
    """Resolved settings for one run.

    source/target are absolute once `resolve()` has been called; the key names
    control where the global index, the rendered Markdown and the template
    reference live in each page's metadata.
    """
    source: Path
    target: Path
    global_key: str = "files"
    template_key: str = "template"
    content_key: str = "content"
    delimiter: str = DEFAULT_DELIMITER
    front_matter_format: str = "json"
    clean: bool = False

    def resolve(self) -> "BuildConfig":
        self.source = Path(self.source).expanduser().resolve()
        self.target = Path(self.target).expanduser().resolve()
        return self

    def validate(self) -> None:
        if not self.source.is_dir():
            raise ConfigError("source directory not found", self.source)
        if self.front_matter_format not in FORMATS:
            raise ConfigError(
                f"unknown front matter format '{self.front_matter_format}'"
                f" (expected one of {', '.join(FORMATS)})"
            )
        if not self.delimiter:
            raise ConfigError("front matter delimiter must not be empty")
        # the second walk would otherwise pick up its own output
        if self.target == self.source or self.source in self.target.parents:
            raise ConfigError("target must not be inside source", self.target)
        # --clean would remove the source along with the target
        if self.clean and self.target in self.source.parents:
            raise ConfigError("--clean target must not contain the source", self.target)
