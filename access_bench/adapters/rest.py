r"""
PostgREST client path over httpx.

Talks to the REST data API that fronts the store (Supabase serves it under
/rest/v1). Every step of a write is its own HTTP call, so writes are not
transactional; cleanup reclaims whatever a failed write left behind.

Requires: pip install httpx

Environment variables:
    SUPABASE_URL: Project URL
    SUPABASE_KEY: API key
    BENCH_CACHE_TTL: Optional Cache-Control max-age for reads

    from access_bench.adapters.rest import RestClient

    client = RestClient()
    await client.connect(uri="https://xyz.supabase.co", key="...")
"""

import os
from collections.abc import Sequence
from typing import Any

import httpx

from access_bench.adapters.base import AdapterRegistry, BaseClient
from access_bench.config import get_env
from access_bench.logging_config import get_logger
from access_bench.schema import (
    BOOKS,
    INSTRUCTOR_BOOKS,
    INSTRUCTOR_COLUMNS,
    INSTRUCTOR_KEYWORDS,
    INSTRUCTORS,
    KEYWORDS,
    POSTS_SCAN,
    instructor_tree_select,
)
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, TableScan

__all__ = ["RestClient"]

logger = get_logger(__name__)

REST_PREFIX = "/rest/v1"
RETURN_REPRESENTATION = {"Prefer": "return=representation"}
RETURN_MINIMAL = {"Prefer": "return=minimal"}
SINGLE_OBJECT = {"Accept": "application/vnd.pgrst.object+json"}


@AdapterRegistry.register(ClientPath.REST)
class RestClient(BaseClient):
    """PostgREST data API client."""

    supports_transactions = False

    def __init__(self) -> None:
        self._client: httpx.AsyncClient | None = None
        self._connected = False
        self._cache_ttl: int | None = None

    @property
    def name(self) -> str:
        return "postgrest"

    async def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        url = uri or os.environ.get("SUPABASE_URL")
        key = kwargs.pop("key", None) or os.environ.get("SUPABASE_KEY")
        cache_ttl = kwargs.pop("cache_ttl", None)
        if cache_ttl is None and get_env("CACHE_TTL"):
            cache_ttl = int(get_env("CACHE_TTL"))  # type: ignore[arg-type]

        if not url:
            msg = "PostgREST URL required (set SUPABASE_URL)"
            raise ValueError(msg)
        if not key:
            msg = "PostgREST API key required (set SUPABASE_KEY)"
            raise ValueError(msg)

        client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}{REST_PREFIX}",
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
            **kwargs,
        )
        try:
            response = await client.get(f"/{POSTS_SCAN.table}", params={"select": "id", "limit": 0})
            response.raise_for_status()
        except Exception:
            await client.aclose()
            raise

        self._client = client
        self._cache_ttl = cache_ttl
        self._connected = True
        logger.debug("Connected to PostgREST at %s", url)

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        self._connected = False

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "RestClient is not connected"
            raise RuntimeError(msg)
        return self._client

    def _read_headers(self) -> dict[str, str]:
        if self._cache_ttl:
            return {"Cache-Control": f"max-age={self._cache_ttl}"}
        return {}

    async def _get(self, table: str, params: dict[str, Any], *, headers: dict[str, str] | None = None) -> Any:
        response = await self.client.get(f"/{table}", params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    async def _insert(self, table: str, rows: Any, *, returning: str | None = "id", single: bool = False) -> Any:
        params = {"select": returning} if returning else None
        headers = dict(RETURN_REPRESENTATION if returning else RETURN_MINIMAL)
        if single:
            headers.update(SINGLE_OBJECT)
        response = await self.client.post(f"/{table}", json=rows, params=params, headers=headers)
        response.raise_for_status()
        return response.json() if returning else None

    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        rows = await self._get(
            scan.table,
            {"select": ",".join(scan.columns), "order": f"{scan.order_by}.desc", "limit": limit},
            headers=self._read_headers(),
        )
        return len(rows or [])

    async def select_instructors(self, *, limit: int) -> int:
        rows = await self._get(
            INSTRUCTORS,
            {"select": instructor_tree_select(), "order": "created_at.desc", "limit": limit},
            headers=self._read_headers(),
        )
        return len(rows or [])

    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        keyword_rows = await self._insert(KEYWORDS, [{"name": name} for name in seed.keyword_names])
        ids.keyword_ids.extend(row["id"] for row in keyword_rows)

        book_rows = await self._insert(BOOKS, seed.books)
        ids.book_ids.extend(row["id"] for row in book_rows)

        instructor = await self._insert(INSTRUCTORS, seed.instructor, single=True)
        instructor_id: int = instructor["id"]
        ids.instructor_id = instructor_id

        if ids.book_ids:
            await self._insert(
                INSTRUCTOR_BOOKS,
                [{"instructor_id": instructor_id, "book_id": book_id} for book_id in ids.book_ids],
                returning=None,
            )
        if ids.keyword_ids:
            await self._insert(
                INSTRUCTOR_KEYWORDS,
                [
                    {"instructor_id": instructor_id, "keyword_id": keyword_id, "order": index}
                    for index, keyword_id in enumerate(ids.keyword_ids)
                ],
                returning=None,
            )
        return instructor_id

    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        rows = await self._get(
            INSTRUCTORS,
            {"select": ",".join(INSTRUCTOR_COLUMNS), "id": f"eq.{instructor_id}"},
        )
        return rows[0] if rows else None

    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        if not values:
            return 0
        response = await self.client.delete(
            f"/{table}",
            params={column: f"in.({','.join(str(v) for v in values)})"},
            headers=RETURN_REPRESENTATION,
        )
        response.raise_for_status()
        return len(response.json() or [])
