from __future__ import annotations

from typing import Sequence

from aurkeep.backends.aur import AurError, AurPackage
from aurkeep.core import Context
from aurkeep.formatting import (
    CheckRow,
    check_rows,
    filter_search,
    format_check,
    format_details,
    format_search,
)

# The AUR refuses search arguments shorter than this.
MIN_SEARCH_TERM = 2


def _targets(ctx: Context, packages: Sequence[str] | None) -> list[str]:
    if packages:
        return list(packages)
    return ctx.store.list()


def _remote_versions(ctx: Context, names: Sequence[str]) -> dict[str, str] | None:
    """Versions by name, or None when the AUR could not be queried."""
    if not names:
        return {}
    try:
        records = ctx.aur.info(names)
    except AurError as e:
        ctx.logger.warning("%s", e)
        return None
    return {p.name: p.version for p in records}


def _lookup(ctx: Context, name: str) -> AurPackage | None:
    try:
        return ctx.aur.info_one(name)
    except AurError as e:
        ctx.logger.warning("%s", e)
        return None


def search(ctx: Context, terms: Sequence[str]) -> list[str]:
    usable = [t for t in terms if len(t) >= MIN_SEARCH_TERM]
    if not usable:
        ctx.logger.warning(
            "Search terms must be at least %d characters long", MIN_SEARCH_TERM
        )
        return []
    query = max(usable, key=len)
    try:
        results = ctx.aur.search(query)
    except AurError as e:
        ctx.logger.warning("%s", e)
        return []
    return format_search(filter_search(results, terms))


def details(ctx: Context, names: Sequence[str]) -> list[str]:
    try:
        records = ctx.aur.info(names)
    except AurError as e:
        ctx.logger.warning("%s", e)
        return []
    found = {p.name for p in records}
    for name in names:
        if name not in found:
            ctx.logger.warning("%s: package not found", name)
    # Keep the order the names were given in.
    order = {name: i for i, name in enumerate(names)}
    records.sort(key=lambda p: order.get(p.name, len(order)))
    return format_details(records)


def list_packages(ctx: Context, *, urls: bool = False) -> list[str]:
    names = ctx.store.list()
    if not urls:
        return names
    return [f"{name} {ctx.git.remote_url(ctx.store.path(name)) or '-'}" for name in names]


def check_report(ctx: Context) -> list[CheckRow]:
    tracked = ctx.store.list()
    installed = {name: ctx.pacman.installed_version(name) for name in tracked}
    remote = _remote_versions(ctx, tracked) or {}
    return check_rows(tracked, installed, remote)


def check(ctx: Context) -> list[str]:
    return format_check(check_report(ctx))


def sync_one(ctx: Context, name: str) -> bool:
    """Pull an existing clone, or clone the package from the AUR."""
    ctx.store.ensure()
    dest = ctx.store.path(name)

    if ctx.store.exists(name):
        if ctx.git.pull(dest):
            ctx.logger.info("%s: pulled", name)
            return True
        ctx.logger.error("%s: git pull failed", name)
        return False

    pkg = _lookup(ctx, name)
    if pkg is None:
        ctx.logger.error("%s: no remote repository", name)
        return False
    if ctx.git.clone(ctx.aur.clone_url(pkg), dest):
        ctx.logger.info("%s: cloned", name)
        return True
    ctx.logger.error("%s: git clone failed", name)
    return False


def refresh(ctx: Context, packages: Sequence[str] | None = None) -> bool:
    failures = 0
    for name in _targets(ctx, packages):
        if not sync_one(ctx, name):
            failures += 1
    if failures:
        ctx.logger.warning("%d package(s) failed to refresh", failures)
    return failures == 0


def _build(ctx: Context, name: str) -> bool:
    ctx.logger.info("%s: building", name)
    if ctx.makepkg.build_install(ctx.store.path(name)):
        return True
    ctx.logger.error("%s: makepkg failed", name)
    return False


def install(ctx: Context, packages: Sequence[str]) -> bool:
    failures = 0
    for name in packages:
        if not sync_one(ctx, name) or not _build(ctx, name):
            failures += 1
    return failures == 0


def upgrade(ctx: Context, packages: Sequence[str] | None = None) -> bool:
    targets = _targets(ctx, packages)
    remote = _remote_versions(ctx, targets)
    if remote is None:
        for name in targets:
            ctx.logger.error("%s: AUR version unknown, not upgrading", name)
        return False

    failures = 0
    for name in targets:
        if not sync_one(ctx, name):
            failures += 1
            continue

        installed = ctx.pacman.installed_version(name)
        latest = remote.get(name)
        if installed is not None and installed == latest:
            ctx.logger.debug("%s: up to date (%s)", name, installed)
            continue

        question = f":: Upgrade {name} ({installed or 'not installed'} -> {latest or 'unknown'})?"
        if not ctx.options.auto_confirm and not ctx.confirm(question):
            ctx.logger.info("%s: skipped", name)
            continue
        if not _build(ctx, name):
            failures += 1
    return failures == 0


def remove(ctx: Context, packages: Sequence[str]) -> bool:
    failures = 0
    for name in packages:
        if not name:
            continue

        if ctx.pacman.is_installed(name):
            if ctx.pacman.remove(name, noconfirm=ctx.options.auto_confirm):
                ctx.logger.info("%s: removed", name)
            else:
                ctx.logger.error("%s: pacman removal failed", name)
                failures += 1

        if ctx.store.exists(name):
            if ctx.options.dry_run:
                ctx.logger.info("%s: would delete %s", name, ctx.store.path(name))
            elif ctx.store.delete(name):
                ctx.logger.info("%s: deleted local repository", name)
    return failures == 0
