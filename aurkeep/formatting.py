from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from aurkeep.backends.aur import AurPackage

UP_TO_DATE = "up-to-date"
NOT_AVAILABLE = "not-available"
NOT_INSTALLED = "not-installed"
NEITHER = "-"
ABSENT = "-"
ORPHAN = "-"


@dataclass(frozen=True)
class CheckRow:
    name: str
    installed: str | None
    remote: str | None
    status: str

    def cells(self) -> list[str]:
        return [self.name, self.installed or ABSENT, self.status]


def classify(installed: str | None, remote: str | None) -> str:
    """
    Status label for one package.

    Local clone presence never changes the label: a remote-only package and a
    tracked-but-uninstalled one both read `not-installed`.
    """
    if installed is not None and remote is not None:
        return UP_TO_DATE if installed == remote else remote
    if installed is not None:
        return NOT_AVAILABLE
    if remote is not None:
        return NOT_INSTALLED
    return NEITHER


def check_rows(
    tracked: Iterable[str],
    installed: dict[str, str | None],
    remote: dict[str, str],
) -> list[CheckRow]:
    rows = [
        CheckRow(
            name=name,
            installed=installed.get(name),
            remote=remote.get(name),
            status=classify(installed.get(name), remote.get(name)),
        )
        for name in tracked
    ]
    rows.sort(key=lambda r: (r.status, r.name))
    return rows


def align_columns(rows: Sequence[Sequence[str]], *, sep: str = " ") -> list[str]:
    if not rows:
        return []
    widths = [0] * max(len(r) for r in rows)
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    out: list[str] = []
    for row in rows:
        padded = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
        out.append(sep.join(padded).rstrip())
    return out


def format_check(rows: Sequence[CheckRow]) -> list[str]:
    return align_columns([r.cells() for r in rows])


def _matches(pkg: AurPackage, terms: Sequence[str]) -> bool:
    haystack = f"{pkg.name} {pkg.description or ''}".lower()
    return all(t.lower() in haystack for t in terms)


def filter_search(results: Iterable[AurPackage], terms: Sequence[str]) -> list[AurPackage]:
    return [p for p in results if _matches(p, terms)]


def format_search(results: Iterable[AurPackage]) -> list[str]:
    ordered = sorted(results, key=lambda p: (-(p.popularity or 0.0), p.name))
    lines: list[str] = []
    for pkg in ordered:
        header = f"{pkg.maintainer or ORPHAN}/{pkg.name} {pkg.version}"
        if pkg.out_of_date:
            header += " (Out-of-date)"
        lines.append(header)
        if pkg.description:
            lines.append(f"    {pkg.description}")
    return lines


def _timestamp(value: int) -> str:
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def detail_fields(pkg: AurPackage) -> list[tuple[str, str]]:
    """Ordered (label, value) pairs; absent values are left out."""
    candidates: list[tuple[str, object]] = [
        ("Name", pkg.name),
        ("Package Base", pkg.package_base if pkg.package_base != pkg.name else None),
        ("Version", pkg.version),
        ("Description", pkg.description),
        ("URL", pkg.url),
        ("Keywords", pkg.keywords),
        ("Licenses", pkg.licenses),
        ("Provides", pkg.provides),
        ("Conflicts With", pkg.conflicts),
        ("Depends On", pkg.depends),
        ("Make Deps", pkg.make_depends),
        ("Check Deps", pkg.check_depends),
        ("Optional Deps", pkg.opt_depends),
        ("Maintainer", pkg.maintainer),
        ("Votes", pkg.num_votes),
        ("Popularity", pkg.popularity),
        ("Out Of Date", _timestamp(pkg.out_of_date) if pkg.out_of_date else None),
        ("Last Modified", _timestamp(pkg.last_modified) if pkg.last_modified else None),
    ]
    out: list[tuple[str, str]] = []
    for label, value in candidates:
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, list):
            out.append((label, "  ".join(value)))
        elif isinstance(value, float):
            out.append((label, f"{value:.6g}"))
        else:
            out.append((label, str(value)))
    return out


def format_details(packages: Iterable[AurPackage]) -> list[str]:
    lines: list[str] = []
    for pkg in packages:
        fields = detail_fields(pkg)
        width = max(len(label) for label, _ in fields)
        if lines:
            lines.append("")
        lines.extend(f"{label.ljust(width)} : {value}" for label, value in fields)
    return lines
