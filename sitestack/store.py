"""
Directory-scoped metadata stack.

Fragments are appended with a scope path (the source root "", a directory or a
single file, all source-relative POSIX strings). Nothing is merged on write;
`MetadataStore.get` merges every applicable fragment at query time, root first,
so deeper scopes override shallower ones and, at equal scope, later adds win.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterator, List, Tuple

from sitestack.errors import StoreSealedError

Fragment = Dict[str, Any]

ROOT_SCOPE = ""


def _overlay(base: Fragment, override: Fragment) -> Fragment:
    # new dicts along merged paths only; leaf values are shared with the inputs
    merged: Fragment = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _overlay(current, value)
        else:
            merged[key] = value
    return merged


def deep_merge(base: Fragment, override: Fragment) -> Fragment:
    """Return a new mapping with `override` merged over `base`.

    Nested mappings are merged key by key. Lists and scalars are replaced
    wholesale, as is any value whose type differs between the two sides.
    Neither input is modified.
    """
    return copy.deepcopy(_overlay(base, override))


def scope_of(root: Path, path: Path) -> str:
    """Source-relative POSIX scope for `path`; the root itself maps to ""."""
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return ROOT_SCOPE
    return Path(rel).as_posix()


def _depth(scope: str) -> int:
    return 0 if scope == ROOT_SCOPE else len(PurePosixPath(scope).parts)


def _applies(scope: str, path: str) -> bool:
    # a file scope only matches itself; a directory scope matches everything under it
    return scope == ROOT_SCOPE or path == scope or path.startswith(scope + "/")


class MetadataStore:
    """Append-only collection of (scope, fragment) pairs."""

    def __init__(self) -> None:
        self._entries: List[Tuple[str, Fragment]] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, Fragment]]:
        return iter(self._entries)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Mark the end of the write phase; later adds are rejected."""
        self._sealed = True

    def add(self, scope: str, fragment: Fragment) -> None:
        if self._sealed:
            raise StoreSealedError(f"cannot add metadata at scope '{scope}' after gathering")
        self._entries.append((scope.strip("/"), copy.deepcopy(fragment)))

    def scopes(self) -> List[str]:
        seen: Dict[str, None] = {}
        for scope, _ in self._entries:
            seen.setdefault(scope, None)
        return list(seen)

    def get(self, path: str) -> Fragment:
        """Effective metadata for `path`: every applicable fragment, merged."""
        target = path.strip("/")
        applicable = [
            (index, scope, fragment)
            for index, (scope, fragment) in enumerate(self._entries)
            if _applies(scope, target)
        ]
        applicable.sort(key=lambda item: (_depth(item[1]), item[0]))

        effective: Fragment = {}
        for _, _, fragment in applicable:
            effective = _overlay(effective, fragment)
        return copy.deepcopy(effective)
