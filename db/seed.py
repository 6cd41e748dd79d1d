"""
Seed MongoDB from the JSON fixtures in a directory.

Each `<name>.json` file holds an array of documents for the collection `<name>`.
For every fixture the collection is dropped (if present), created again and
filled, so running the seeder twice leaves the same contents behind.

Usage: python -m db.seed --seeds-dir seeds --mongo-uri mongodb://localhost/app
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from db.errors import InsertError, ReconcileError, SeedError, StoreError, error_message
from db.fixtures import FixtureFile, Record, list_fixtures, read_records
from db.logging import configure_logging, logger, seed_run_context
from db.settings import SETTINGS
from db.store import MongoStore, Store


DEFAULT_CONCURRENCY = 4

Connect = Callable[[str, str | None], Awaitable[Store]]


@dataclass(frozen=True)
class SeedOutcome:
    collection: str
    path: str
    status: Literal["ok", "failed"]
    inserted: int = 0
    error: str | None = None
    # Downgraded existence-check/drop failures; they never fail the fixture.
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class BatchResult:
    outcomes: list[SeedOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[SeedOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[SeedOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> dict:
        return {
            "fixtures": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "inserted": {o.collection: o.inserted for o in self.succeeded},
            "errors": {o.collection: o.error for o in self.failed},
        }


async def reconcile(store: Store, name: str, warnings: list[str] | None = None) -> list[str]:
    """
    Leave `name` existing and empty: CHECK_EXISTS -> DROP (if it exists) -> CREATE.

    Existence-check and drop failures are logged and appended to `warnings` (which
    is also returned); only a failed create raises ReconcileError.
    """
    if warnings is None:
        warnings = []

    try:
        exists = await store.collection_exists(name)
    except StoreError as exc:
        msg = f"existence check failed: {exc}"
        logger.warning("collection_exists_check_failed", collection=name, error=str(exc))
        warnings.append(msg)
        exists = False

    if exists:
        try:
            await store.drop_collection(name)
            logger.info("collection_dropped", collection=name)
        except StoreError as exc:
            logger.warning("collection_drop_failed", collection=name, error=str(exc))
            warnings.append(f"drop failed: {exc}")
    else:
        logger.info("collection_drop_skipped", collection=name)

    try:
        await store.create_collection(name)
    except StoreError as exc:
        logger.error("collection_create_failed", collection=name, error=str(exc))
        raise ReconcileError(f"could not create collection {name}: {exc}") from exc
    logger.info("collection_created", collection=name)
    return warnings


async def insert_records(store: Store, name: str, records: Sequence[Record] | None) -> int:
    if not records:
        logger.info("insert_skipped_no_data", collection=name)
        return 0
    try:
        inserted = await store.insert_many(name, records)
    except StoreError as exc:
        logger.error("insert_failed", collection=name, error=str(exc))
        raise InsertError(f"could not insert into {name}: {exc}") from exc
    logger.info("insert_done", collection=name, inserted=inserted)
    return inserted


async def seed_fixture(store: Store, fixture: FixtureFile) -> SeedOutcome:
    name = fixture.collection_name
    path = str(fixture.path)
    logger.info("seeding_collection", collection=name, path=path, size=fixture.size)
    warnings: list[str] = []
    try:
        # File reads go to a worker thread so other fixtures (and API requests) keep running.
        records = await asyncio.to_thread(read_records, fixture)
        await reconcile(store, name, warnings)
        inserted = await insert_records(store, name, records)
    except SeedError as exc:
        return SeedOutcome(
            collection=name,
            path=path,
            status="failed",
            error=error_message(exc),
            warnings=tuple(warnings),
        )
    return SeedOutcome(collection=name, path=path, status="ok", inserted=inserted, warnings=tuple(warnings))


async def seed(
    directory: str | os.PathLike[str],
    *,
    uri: str,
    database_name: str | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    connect: Connect = MongoStore.connect,
) -> BatchResult:
    """
    Seed every fixture in `directory` and return once all of them have settled.

    Raises StoreConnectionError or DiscoveryError before anything is seeded; past
    that point failures are per fixture and end up in the BatchResult.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    with seed_run_context(directory):
        return await _seed_run(directory, uri, database_name, concurrency, connect)


async def _seed_run(
    directory: str | os.PathLike[str],
    uri: str,
    database_name: str | None,
    concurrency: int,
    connect: Connect,
) -> BatchResult:
    store = await connect(uri, database_name)
    try:
        fixtures = await asyncio.to_thread(list_fixtures, directory)
        logger.info("seeding_started", fixtures=[f.path.name for f in fixtures])

        sem = asyncio.Semaphore(concurrency)

        async def run(fixture: FixtureFile) -> SeedOutcome:
            async with sem:
                return await seed_fixture(store, fixture)

        settled = await asyncio.gather(*(run(f) for f in fixtures), return_exceptions=True)
    finally:
        await store.close()

    result = BatchResult()
    for fixture, item in zip(fixtures, settled):
        if isinstance(item, SeedOutcome):
            outcome = item
        elif isinstance(item, Exception):
            logger.error(
                "seeding_fixture_crashed",
                collection=fixture.collection_name,
                exc_info=(type(item), item, item.__traceback__),
            )
            outcome = SeedOutcome(
                collection=fixture.collection_name,
                path=str(fixture.path),
                status="failed",
                error=error_message(item),
            )
        else:
            # CancelledError and friends are not fixture failures.
            raise item
        result.outcomes.append(outcome)
        if outcome.ok:
            logger.info("seeding_fixture_ok", collection=outcome.collection, inserted=outcome.inserted)
        else:
            logger.error("seeding_fixture_failed", collection=outcome.collection, error=outcome.error)

    logger.info(
        "seeding_finished",
        fixtures=len(result.outcomes),
        succeeded=len(result.succeeded),
        failed=len(result.failed),
    )
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Load JSON fixtures into MongoDB collections.")
    parser.add_argument("--seeds-dir", default=os.getenv("SEEDS_DIR") or SETTINGS.seeds_dir)
    parser.add_argument("--mongo-uri", default=os.getenv("MONGO_URI") or SETTINGS.mongo_uri)
    parser.add_argument("--database", default=os.getenv("DATABASE_NAME") or SETTINGS.database_name)
    parser.add_argument("--concurrency", type=int, default=SETTINGS.seed_concurrency)
    parser.add_argument("--log-level", default=SETTINGS.log_level)
    args = parser.parse_args()

    configure_logging(args.log_level)
    try:
        result = asyncio.run(
            seed(
                args.seeds_dir,
                uri=args.mongo_uri,
                database_name=args.database,
                concurrency=args.concurrency,
            )
        )
    except SeedError as exc:
        logger.error("seeding_aborted", error=error_message(exc))
        raise SystemExit(1) from exc

    print(json.dumps(result.summary(), indent=2))


if __name__ == "__main__":
    main()
