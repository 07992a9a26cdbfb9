from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pytest

from aurkeep.backends.aur import AurError, AurPackage
from aurkeep.backends.git import GitBackend
from aurkeep.backends.makepkg import MakepkgBackend
from aurkeep.backends.pacman import PacmanBackend
from aurkeep.core import Context, Options
from aurkeep.store import PackageStore
from aurkeep.util import RunResult


class FakeRunner:
    """
    Scripted stand-in for CommandRunner.

    Rules are (argv prefix, returncode, stdout); the first matching prefix wins
    and unmatched commands succeed with empty output.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self.rules: list[tuple[tuple[str, ...], int, str]] = []
        self.calls: list[tuple[list[str], Path | None]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "") -> None:
        self.rules.append((prefix, returncode, stdout))

    def run(self, args, *, sudo=False, capture=True, readonly=False, cwd=None):
        argv = list(args)
        if sudo:
            argv = ["sudo", *argv]
        self.calls.append((argv, cwd))
        bare = argv[1:] if sudo else argv
        for prefix, rc, out in self.rules:
            if tuple(bare[: len(prefix)]) == prefix:
                return RunResult(args=argv, returncode=rc, stdout=out, stderr="")
        return RunResult(args=argv, returncode=0, stdout="", stderr="")

    def commands(self, program: str) -> list[list[str]]:
        return [argv for argv, _ in self.calls if program in argv[:2]]


class FakeAur:
    def __init__(self, packages: Sequence[AurPackage] = ()) -> None:
        self.packages = {p.name: p for p in packages}
        self.fail = False
        self.info_calls: list[list[str]] = []
        self.search_calls: list[str] = []

    def _check(self) -> None:
        if self.fail:
            raise AurError("AUR request failed: connection refused")

    def search(self, term: str, *, by: str = "name-desc") -> list[AurPackage]:
        self._check()
        self.search_calls.append(term)
        term = term.lower()
        return [
            p for p in self.packages.values()
            if term in p.name.lower() or term in (p.description or "").lower()
        ]

    def info(self, names: Sequence[str]) -> list[AurPackage]:
        self._check()
        self.info_calls.append(list(names))
        return [self.packages[n] for n in names if n in self.packages]

    def info_one(self, name: str) -> AurPackage | None:
        for pkg in self.info([name]):
            return pkg
        return None

    def clone_url(self, pkg: AurPackage) -> str:
        return f"https://aur.example/{pkg.package_base or pkg.name}.git"


def pkg(name: str, version: str, **kw) -> AurPackage:
    return AurPackage(name=name, version=version, **kw)


@pytest.fixture
def logger() -> logging.Logger:
    lg = logging.getLogger("aurkeep-tests")
    lg.setLevel(logging.DEBUG)
    return lg


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def aur() -> FakeAur:
    return FakeAur()


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def answers() -> list[bool]:
    """Queue of answers for confirmation prompts; empty means yes."""
    return []


@pytest.fixture
def prompts() -> list[str]:
    return []


@pytest.fixture
def make_ctx(logger, runner, aur, store_dir, answers, prompts):
    def confirm(question: str) -> bool:
        prompts.append(question)
        return answers.pop(0) if answers else True

    def _make(*, dry_run: bool = False, auto_confirm: bool = False) -> Context:
        runner.dry_run = dry_run
        return Context(
            logger=logger,
            options=Options(dry_run=dry_run, auto_confirm=auto_confirm),
            store=PackageStore(store_dir, logger),
            aur=aur,
            pacman=PacmanBackend(runner=runner, logger=logger),
            git=GitBackend(runner=runner, logger=logger),
            makepkg=MakepkgBackend(
                runner=runner,
                logger=logger,
                flags=("--syncdeps", "--install", "--needed", "--noconfirm"),
            ),
            confirm=confirm,
        )

    return _make


def track(store_dir: Path, *names: str) -> None:
    for name in names:
        (store_dir / name).mkdir(parents=True, exist_ok=True)
