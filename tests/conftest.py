import logging
from pathlib import Path
from typing import Dict, Union

import pytest

from sitestack.config import BuildConfig


@pytest.fixture
def make_tree(tmp_path):
    """Write {relative path: text or bytes} under tmp_path/src and return the root."""
    def _make(files: Dict[str, Union[str, bytes]]) -> Path:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def make_config(tmp_path):
    def _config(source: Path, **overrides) -> BuildConfig:
        return BuildConfig(source=source, target=tmp_path / "tgt", **overrides).resolve()

    return _config


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("sitestack").handlers[:] = []
