"""Tests for the AUR RPC client"""

from unittest.mock import MagicMock

import pytest
import requests

from aurkeep.backends.aur import INFO_CHUNK_SIZE, AurClient, AurError, AurPackage


def _response(payload=None, *, status=200, bad_json=False):
    r = MagicMock()
    r.status_code = status
    if bad_json:
        r.json.side_effect = ValueError("Expecting value")
    else:
        r.json.return_value = payload
    return r


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def client(session):
    return AurClient("https://aur.example/", timeout=5, session=session)


FOO = {
    "Name": "foo",
    "PackageBase": "foo",
    "Version": "1.2-1",
    "Description": "Foo tool",
    "URL": "https://foo.example",
    "NumVotes": 12,
    "Popularity": 0.42,
    "OutOfDate": None,
    "Maintainer": "ann",
    "License": ["MIT"],
    "Depends": ["glibc"],
    "MakeDepends": ["git"],
}


class TestAurClient:

    def test_sets_user_agent(self, client, session):
        assert session.headers["User-Agent"].startswith("aurkeep/")

    def test_search(self, client, session):
        session.get.return_value = _response({"type": "search", "results": [FOO]})
        results = client.search("foo")
        session.get.assert_called_once_with(
            "https://aur.example/rpc/",
            params={"v": 5, "type": "search", "by": "name-desc", "arg": "foo"},
            timeout=5,
        )
        assert results[0].name == "foo"
        assert results[0].licenses == ["MIT"]
        assert results[0].opt_depends == []

    def test_info_batches(self, client, session):
        session.get.return_value = _response({"type": "multiinfo", "results": []})
        names = [f"pkg{i}" for i in range(INFO_CHUNK_SIZE + 1)]
        assert client.info(names) == []
        assert session.get.call_count == 2
        first = session.get.call_args_list[0].kwargs["params"]
        assert first["type"] == "info"
        assert first["arg[]"] == names[:INFO_CHUNK_SIZE]

    def test_info_empty_names_skips_request(self, client, session):
        assert client.info([]) == []
        session.get.assert_not_called()

    def test_info_one(self, client, session):
        session.get.return_value = _response({"type": "multiinfo", "results": [FOO]})
        assert client.info_one("foo").version == "1.2-1"
        assert client.info_one("bar") is None

    def test_rpc_error_payload(self, client, session):
        session.get.return_value = _response({"type": "error", "error": "Too many package results."})
        with pytest.raises(AurError, match="Too many package results"):
            client.search("a")

    def test_http_error(self, client, session):
        session.get.return_value = _response(status=503)
        with pytest.raises(AurError, match="503"):
            client.search("foo")

    def test_invalid_json(self, client, session):
        session.get.return_value = _response(bad_json=True)
        with pytest.raises(AurError, match="invalid JSON"):
            client.search("foo")

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(AurError, match="refused"):
            client.info(["foo"])

    def test_clone_url_prefers_package_base(self, client):
        assert client.clone_url(AurPackage("foo-cli", "1", package_base="foo")) == "https://aur.example/foo.git"
        assert client.clone_url(AurPackage("bar", "1")) == "https://aur.example/bar.git"


class TestAurPackage:

    def test_malformed_record(self):
        with pytest.raises(AurError):
            AurPackage.from_json({"Description": "no name"})

    def test_optional_fields_default(self):
        record = AurPackage.from_json({"Name": "x", "Version": "1"})
        assert record.maintainer is None
        assert record.depends == []
