"""
AUR RPC client.

This module is the only place that builds AUR RPC URLs, sends HTTP requests to
the AUR and interprets its JSON payloads. Callers receive `AurPackage` records
or an `AurError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import requests

from aurkeep import __version__

RPC_VERSION = 5
# The AUR rejects overly long query strings; keep batched info requests small.
INFO_CHUNK_SIZE = 100


class AurError(RuntimeError):
    pass


@dataclass(frozen=True)
class AurPackage:
    name: str
    version: str
    package_base: str | None = None
    description: str | None = None
    url: str | None = None
    maintainer: str | None = None
    num_votes: int | None = None
    popularity: float | None = None
    out_of_date: int | None = None
    last_modified: int | None = None
    licenses: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    depends: list[str] = field(default_factory=list)
    make_depends: list[str] = field(default_factory=list)
    check_depends: list[str] = field(default_factory=list)
    opt_depends: list[str] = field(default_factory=list)
    provides: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AurPackage":
        name = data.get("Name")
        version = data.get("Version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise AurError(f"Malformed AUR record: {data!r}")

        def strings(key: str) -> list[str]:
            value = data.get(key) or []
            return [str(x) for x in value] if isinstance(value, list) else []

        return cls(
            name=name,
            version=version,
            package_base=data.get("PackageBase"),
            description=data.get("Description"),
            url=data.get("URL"),
            maintainer=data.get("Maintainer"),
            num_votes=data.get("NumVotes"),
            popularity=data.get("Popularity"),
            out_of_date=data.get("OutOfDate"),
            last_modified=data.get("LastModified"),
            licenses=strings("License"),
            keywords=strings("Keywords"),
            depends=strings("Depends"),
            make_depends=strings("MakeDepends"),
            check_depends=strings("CheckDepends"),
            opt_depends=strings("OptDepends"),
            provides=strings("Provides"),
            conflicts=strings("Conflicts"),
        )


def _chunks(items: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class AurClient:
    def __init__(
        self,
        base_url: str = "https://aur.archlinux.org",
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": f"aurkeep/{__version__}"})

    def clone_url(self, pkg: AurPackage) -> str:
        return f"{self._base_url}/{pkg.package_base or pkg.name}.git"

    def _request(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rpc/"
        query = {"v": RPC_VERSION, **params}
        try:
            r = self._session.get(url, params=query, timeout=self._timeout)
        except requests.RequestException as e:
            raise AurError(f"AUR request failed: {e}") from e

        if r.status_code >= 400:
            raise AurError(f"AUR RPC error {r.status_code} for type={params.get('type')}")
        try:
            payload = r.json()
        except ValueError as e:
            raise AurError(f"AUR returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise AurError("AUR returned an unexpected payload")
        if payload.get("type") == "error":
            raise AurError(f"AUR RPC error: {payload.get('error', 'unknown error')}")
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise AurError("AUR returned malformed results")
        return results

    def search(self, term: str, *, by: str = "name-desc") -> list[AurPackage]:
        results = self._request({"type": "search", "by": by, "arg": term})
        return [AurPackage.from_json(r) for r in results]

    def info(self, names: Sequence[str]) -> list[AurPackage]:
        """
        Batch info lookup. Names the AUR does not know are simply absent from
        the result; an empty `names` never hits the network.
        """
        out: list[AurPackage] = []
        for chunk in _chunks(list(names), INFO_CHUNK_SIZE):
            results = self._request({"type": "info", "arg[]": list(chunk)})
            out.extend(AurPackage.from_json(r) for r in results)
        return out

    def info_one(self, name: str) -> AurPackage | None:
        for pkg in self.info([name]):
            if pkg.name == name:
                return pkg
        return None
