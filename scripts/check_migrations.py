"""Exit non-zero when the live schema has drifted from the newsgate models."""

from __future__ import annotations

import asyncio
import sys

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from newsgate import models  # noqa: F401  # Ensure models are registered
from newsgate.config import settings
from newsgate.database import Base

# Bookkeeping table managed by Alembic itself
IGNORED_TABLES = {"alembic_version"}


def _compare(connection) -> list[object]:
    context = MigrationContext.configure(connection, opts={"compare_type": True})
    diffs = compare_metadata(context, Base.metadata)
    return [
        diff for diff in diffs
        if not (diff[0] == "remove_table" and diff[1].name in IGNORED_TABLES)
    ]


async def main(database_url: str) -> int:
    engine = create_async_engine(database_url)
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
        diffs = await conn.run_sync(_compare)
    await engine.dispose()

    if diffs:
        print(f"Detected {len(diffs)} schema difference(s) between models and database:")
        for diff in diffs:
            print(f"  {diff}")
        return 1

    print("No schema differences detected.")
    return 0


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else settings.database_url
    raise SystemExit(asyncio.run(main(url)))
