from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

from aurkeep import __version__, commands
from aurkeep.config_loader import ConfigError, load_settings
from aurkeep.core import Context, Options, ask_yes_no, build_context
from aurkeep.util import expand_path

Handler = Callable[[Context, argparse.Namespace], Any]


def _setup_logger(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("aurkeep")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


# Global options that consume the next argv token.
_VALUE_OPTIONS = {"--store-dir", "--config"}


# (name, alias, help, nargs for the package list, handler)
_SUBCOMMANDS: list[tuple[str, str, str, str | None, Handler]] = [
    ("install", "i", "Clone or pull packages, then build and install them.", "+",
     lambda ctx, a: commands.install(ctx, a.packages)),
    ("remove", "r", "Uninstall packages and delete their local repositories.", "+",
     lambda ctx, a: commands.remove(ctx, a.packages)),
    ("upgrade", "u", "Refresh packages and rebuild those with a newer AUR version.", "*",
     lambda ctx, a: commands.upgrade(ctx, a.packages or None)),
    ("refresh", "y", "Clone missing or pull existing package repositories.", "*",
     lambda ctx, a: commands.refresh(ctx, a.packages or None)),
    ("details", "d", "Show AUR details for packages.", "+",
     lambda ctx, a: commands.details(ctx, a.packages)),
    ("search", "s", "Search the AUR by name and description.", "+",
     lambda ctx, a: commands.search(ctx, a.packages)),
    ("check", "c", "Compare installed, AUR and tracked package versions.", None,
     lambda ctx, a: commands.check(ctx)),
    ("list", "l", "List tracked packages.", None,
     lambda ctx, a: commands.list_packages(ctx, urls=a.urls)),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aurkeep",
        description="Keep local clones of AUR packages and build them with makepkg.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--store-dir",
        type=Path,
        help="Directory holding one git clone per tracked package "
        "(default: $XDG_CACHE_HOME/aurkeep, or AURKEEP_STORE_DIR).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (*.toml, *.yaml, *.yml, *.json). "
        "Default: $XDG_CONFIG_HOME/aurkeep/config.* if present.",
    )
    parser.add_argument(
        "--yes",
        "--noconfirm",
        dest="yes",
        action="store_true",
        help="Never prompt; answer yes to upgrade and removal questions.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log actions but do not change the system.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logs.",
    )

    sub = parser.add_subparsers(dest="command", metavar="<command>")
    for name, alias, help_text, nargs, handler in _SUBCOMMANDS:
        p = sub.add_parser(name, aliases=[alias], help=help_text, description=help_text)
        if nargs is not None:
            metavar = "term" if name == "search" else "package"
            p.add_argument("packages", nargs=nargs, metavar=metavar)
        if name == "list":
            p.add_argument("--urls", action="store_true", help="Show each clone's remote URL.")
        p.set_defaults(handler=handler)
    return parser


def _command_token(argv: list[str]) -> str | None:
    """First positional argv token, skipping global options and their values."""
    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            return next(tokens, None)
        if token.startswith("-"):
            if token in _VALUE_OPTIONS:
                next(tokens, None)
            continue
        return token
    return None


def _known_commands() -> set[str]:
    return {n for name, alias, *_ in _SUBCOMMANDS for n in (name, alias)}


def main(argv: list[str] | None = None, *, confirm=ask_yes_no) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()

    command = _command_token(argv)
    if command is not None and command not in _known_commands():
        parser.print_help()
        return 0
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logger = _setup_logger(args.verbose)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    if args.store_dir is not None:
        store_dir = expand_path(str(args.store_dir))
    else:
        store_dir = settings.store_dir
    logger.debug("Package store: %s", store_dir)
    if settings.source is not None:
        logger.debug("Loaded config %s", settings.source)

    options = Options(
        dry_run=bool(args.dry_run),
        auto_confirm=bool(args.yes or settings.auto_confirm),
    )
    ctx = build_context(
        settings=replace(settings, store_dir=store_dir),
        options=options,
        logger=logger,
        confirm=confirm,
    )

    result = args.handler(ctx, args)
    if isinstance(result, list):
        for line in result:
            print(line)
        return 0
    return 0 if result else 1
