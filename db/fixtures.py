from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

from db.errors import DiscoveryError, FixtureParseError


JSONValue: TypeAlias = str | int | float | bool | None | dict[str, "JSONValue"] | list["JSONValue"]
Record: TypeAlias = dict[str, JSONValue]

FIXTURE_SUFFIX = ".json"


@dataclass(frozen=True)
class FixtureFile:
    path: Path
    size: int

    @property
    def collection_name(self) -> str:
        # "cohort.json" seeds "cohort"; everything after the first dot is dropped.
        return self.path.name.split(".", 1)[0]


def list_fixtures(directory: str | os.PathLike[str]) -> list[FixtureFile]:
    """
    Return the .json fixtures in `directory`, in directory enumeration order.

    Contents are not read here so that a malformed file only fails its own fixture.
    Raises DiscoveryError if the directory cannot be listed or if two files would
    seed the same collection.
    """
    root = Path(directory)
    try:
        entries = list(os.scandir(root))
    except OSError as exc:
        raise DiscoveryError(f"cannot read fixture directory: {exc.strerror}", path=root) from exc

    fixtures: list[FixtureFile] = []
    seen: dict[str, Path] = {}
    for entry in entries:
        # A file called just ".json" has no extension (and no collection name).
        if Path(entry.name).suffix != FIXTURE_SUFFIX:
            continue
        try:
            if not entry.is_file():
                continue
            size = entry.stat().st_size
        except OSError as exc:
            raise DiscoveryError(f"cannot stat fixture: {exc.strerror}", path=entry.path) from exc

        fixture = FixtureFile(path=Path(entry.path), size=size)
        name = fixture.collection_name
        if name in seen:
            raise DiscoveryError(
                f"fixtures {seen[name].name} and {fixture.path.name} both target collection {name!r}",
                path=root,
            )
        seen[name] = fixture.path
        fixtures.append(fixture)
    return fixtures


def read_records(fixture: FixtureFile) -> list[Record]:
    if fixture.size == 0:
        return []

    try:
        # utf-8-sig drops the BOM editors on Windows like to prepend.
        text = fixture.path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise FixtureParseError(f"cannot read fixture: {exc.strerror}", path=fixture.path) from exc
    except UnicodeDecodeError as exc:
        raise FixtureParseError(f"fixture is not valid UTF-8: {exc.reason}", path=fixture.path) from exc

    try:
        contents: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FixtureParseError(f"invalid JSON: {exc}", path=fixture.path) from exc

    if not isinstance(contents, list):
        raise FixtureParseError(
            f"Seed file {fixture.collection_name} does not start with an Array", path=fixture.path
        )
    for i, item in enumerate(contents):
        if not isinstance(item, dict):
            raise FixtureParseError(
                f"Seed file {fixture.collection_name} item {i} is a {type(item).__name__}, expected an object",
                path=fixture.path,
            )
    return contents
