from __future__ import annotations

import json
import sys

import pytest


ARGV = ["seed", "--seeds-dir", "fixtures", "--mongo-uri", "mongodb://db/app", "--database", "app", "--concurrency", "3"]


@pytest.mark.parametrize("error", ["connection", "discovery"])
def test_cli_exits_1_on_fatal_errors(monkeypatch, error: str) -> None:
    import db.seed
    from db.errors import DiscoveryError, StoreConnectionError

    async def fake_seed(directory, **kwargs):
        if error == "connection":
            raise StoreConnectionError("cannot connect to mongodb://db/app: refused")
        raise DiscoveryError("cannot read fixture directory: No such file or directory", path=directory)

    monkeypatch.setattr(db.seed, "seed", fake_seed)
    monkeypatch.setattr(sys, "argv", ARGV)

    with pytest.raises(SystemExit) as ei:
        db.seed.main()
    assert ei.value.code == 1


def test_cli_reports_fixture_failures_without_failing(monkeypatch, capsys) -> None:
    import db.seed
    from db.seed import BatchResult, SeedOutcome

    calls = []

    async def fake_seed(directory, **kwargs):
        calls.append((directory, kwargs))
        return BatchResult(
            [
                SeedOutcome(collection="widgets", path="fixtures/widgets.json", status="ok", inserted=2),
                SeedOutcome(collection="single", path="fixtures/single.json", status="failed", error="Error: bad"),
            ]
        )

    monkeypatch.setattr(db.seed, "seed", fake_seed)
    monkeypatch.setattr(sys, "argv", ARGV)

    db.seed.main()

    assert calls == [("fixtures", {"uri": "mongodb://db/app", "database_name": "app", "concurrency": 3})]
    summary = json.loads(capsys.readouterr().out)
    assert summary["succeeded"] == 1
    assert summary["failed"] == 1
    assert summary["errors"] == {"single": "Error: bad"}
