from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from testcontainers.mongodb import MongoDbContainer


REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

# No collector in tests; keep the OTLP exporter out of the picture.
os.environ.setdefault("TRACING_ENABLED", "false")


@pytest.fixture(scope="session")
def mongo_url() -> str:
    with MongoDbContainer("mongo:7") as mongo:
        yield mongo.get_connection_url()


@pytest.fixture()
def write_fixtures(tmp_path: Path):
    """Write {filename: text} into a fresh seeds directory and return its path."""

    def _write(files: dict[str, str]) -> Path:
        seeds = tmp_path / "seeds"
        seeds.mkdir(exist_ok=True)
        for name, text in files.items():
            (seeds / name).write_text(text, encoding="utf-8")
        return seeds

    return _write
