#!/usr/bin/env python
"""Check that every client path can reach the store."""

import asyncio

from access_bench.adapters import AdapterRegistry, connect_kwargs
from access_bench.config import load_settings
from access_bench.schema import POSTS_SCAN
from access_bench.types import ClientPath


async def check_connection(path: ClientPath) -> tuple[bool, str]:
    """Connect one path and fetch a single row. Returns (success, message)."""
    settings = load_settings()
    client = AdapterRegistry.create(path)
    try:
        await client.connect(**connect_kwargs(path, settings))
        rows = await client.select_rows(POSTS_SCAN, limit=1)
        return True, f"{client.name}, {rows} row(s)"
    except Exception as e:
        return False, str(e)[:60]
    finally:
        await client.disconnect()


async def main() -> None:
    print("=" * 60)
    print("Checking Client Paths")
    print("=" * 60)
    print()

    for path in ClientPath:
        ok, msg = await check_connection(path)
        status = "[OK]" if ok else "[FAIL]"
        print(f"  {status:6} {path.value:8} {msg}")

    print()
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
