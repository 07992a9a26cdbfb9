from __future__ import annotations

import logging
import shutil
from pathlib import Path


class PackageStore:
    """
    Directory holding one git clone per tracked package: <root>/<name>.
    """

    def __init__(self, root: Path, logger: logging.Logger) -> None:
        self._root = root
        self._logger = logger

    @property
    def root(self) -> Path:
        return self._root

    def ensure(self) -> Path:
        if not self._root.is_dir():
            self._logger.debug("Creating package store %s", self._root)
            self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def path(self, name: str) -> Path:
        return self._root / name

    def _is_child(self, name: str) -> bool:
        # Reject "", ".", "..", "a/b" and anything else that is not a direct child.
        if not name or name in {".", ".."}:
            return False
        candidate = self.path(name)
        return candidate.parent == self._root and candidate.name == name

    def exists(self, name: str) -> bool:
        return self._is_child(name) and self.path(name).is_dir()

    def list(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(p.name for p in self._root.iterdir() if p.is_dir())

    def delete(self, name: str) -> bool:
        if not self._is_child(name):
            self._logger.warning("Refusing to delete %r from the package store", name)
            return False
        target = self.path(name)
        if not target.is_dir():
            return False
        shutil.rmtree(target)
        return True
