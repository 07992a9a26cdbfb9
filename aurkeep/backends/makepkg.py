from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from aurkeep.util import CommandRunner


@dataclass(frozen=True)
class MakepkgBackend:
    runner: CommandRunner
    logger: logging.Logger
    flags: Sequence[str]

    def build_install(self, cwd: Path) -> bool:
        # makepkg talks to the terminal directly (and calls sudo pacman -U itself).
        res = self.runner.run(["makepkg", *self.flags], capture=False, cwd=cwd)
        return res.ok
