from __future__ import annotations

import logging
from dataclasses import dataclass

from aurkeep.util import CommandRunner


@dataclass(frozen=True)
class PacmanBackend:
    runner: CommandRunner
    logger: logging.Logger

    def installed_version(self, package: str) -> str | None:
        # `pacman -Q name` prints "name version" and exits 1 when not installed.
        res = self.runner.run(["pacman", "-Q", package], readonly=True)
        if not res.ok:
            return None
        parts = res.stdout.split()
        if len(parts) < 2:
            return None
        return parts[1]

    def is_installed(self, package: str) -> bool:
        return self.installed_version(package) is not None

    def remove(self, package: str, *, noconfirm: bool = False) -> bool:
        args = ["pacman", "-Rs"]
        if noconfirm:
            args.append("--noconfirm")
        args.append(package)
        res = self.runner.run(args, sudo=True, capture=False)
        return res.ok
