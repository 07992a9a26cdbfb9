from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def xdg_cache_home() -> Path:
    return Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))


def expand_path(s: str) -> Path:
    # Expand ~ and $VARS
    return Path(os.path.expandvars(os.path.expanduser(s)))


def sh_join(args: Sequence[str]) -> str:
    return shlex.join(list(args))


@dataclass(frozen=True)
class RunResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    def __init__(self, *, dry_run: bool, logger, sudo: str = "sudo") -> None:
        self._dry_run = dry_run
        self._logger = logger
        self._sudo = sudo

    def run(
        self,
        args: Iterable[str],
        *,
        sudo: bool = False,
        capture: bool = True,
        readonly: bool = False,
        cwd: Path | None = None,
    ) -> RunResult:
        """
        Run an external program and return its result; failures are reported
        through the return code, never raised.

        `readonly` commands (queries like `pacman -Q`) still execute in dry-run
        mode; everything else is only logged. With `capture=False` the child
        inherits the terminal so interactive tools (makepkg, pacman) show their
        own output.
        """
        argv = list(args)
        if sudo:
            argv = [*shlex.split(self._sudo), *argv]

        self._logger.debug("RUN %s", sh_join(argv))
        if self._dry_run and not readonly:
            return RunResult(args=argv, returncode=0, stdout="", stderr="")

        try:
            cp = subprocess.run(
                argv,
                text=True,
                capture_output=capture,
                check=False,
                cwd=str(cwd) if cwd is not None else None,
            )
        except FileNotFoundError as e:
            self._logger.debug("%s", e)
            return RunResult(args=argv, returncode=127, stdout="", stderr=str(e))

        return RunResult(
            args=argv,
            returncode=cp.returncode,
            stdout=cp.stdout or "",
            stderr=cp.stderr or "",
        )
