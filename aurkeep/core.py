from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from aurkeep.backends import AurClient, GitBackend, MakepkgBackend, PacmanBackend
from aurkeep.config_loader import Settings
from aurkeep.store import PackageStore
from aurkeep.util import CommandRunner

Confirm = Callable[[str], bool]


def ask_yes_no(question: str) -> bool:
    """Prompt on the terminal; a blank answer means yes."""
    while True:
        answer = input(f"{question} [Y/n] ").strip().lower()
        if answer in {"", "y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False


@dataclass(frozen=True)
class Options:
    dry_run: bool
    auto_confirm: bool


@dataclass(frozen=True)
class Context:
    logger: logging.Logger
    options: Options
    store: PackageStore
    aur: AurClient
    pacman: PacmanBackend
    git: GitBackend
    makepkg: MakepkgBackend
    confirm: Confirm = ask_yes_no


def build_context(
    *,
    settings: Settings,
    options: Options,
    logger: logging.Logger,
    confirm: Confirm = ask_yes_no,
) -> Context:
    runner = CommandRunner(dry_run=options.dry_run, logger=logger, sudo=settings.sudo)
    return Context(
        logger=logger,
        options=options,
        store=PackageStore(settings.store_dir, logger),
        aur=AurClient(settings.aur_url, timeout=settings.timeout),
        pacman=PacmanBackend(runner=runner, logger=logger),
        git=GitBackend(runner=runner, logger=logger),
        makepkg=MakepkgBackend(runner=runner, logger=logger, flags=settings.makepkg_flags),
        confirm=confirm,
    )
