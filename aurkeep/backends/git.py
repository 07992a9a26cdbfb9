from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from aurkeep.util import CommandRunner


@dataclass(frozen=True)
class GitBackend:
    runner: CommandRunner
    logger: logging.Logger

    def _report(self, what: str, stderr: str) -> None:
        if stderr.strip():
            self.logger.debug("git %s stderr:\n%s", what, stderr.rstrip())

    def clone(self, url: str, dest: Path) -> bool:
        res = self.runner.run(["git", "clone", url, str(dest)])
        self._report("clone", res.stderr)
        return res.ok

    def pull(self, cwd: Path) -> bool:
        res = self.runner.run(["git", "pull", "--ff-only"], cwd=cwd)
        self._report("pull", res.stderr)
        return res.ok

    def remote_url(self, cwd: Path) -> str:
        res = self.runner.run(
            ["git", "config", "--get", "remote.origin.url"],
            readonly=True,
            cwd=cwd,
        )
        return res.stdout.strip() if res.ok else ""
