r"""
Benchmark configuration read from the environment.

Connection strings keep the names the surrounding service already uses
(SUPABASE_URL, DATABASE_URL, ...); benchmark knobs carry the BENCH_ prefix.

    from access_bench.config import load_settings

    settings = load_settings()
    print(f"Limit: {settings.limit}, paths: {settings.paths}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dotenv import load_dotenv

from access_bench.types import ClientPath

# Look for .env in current dir or the project root
env_file = Path(".env")
if not env_file.exists():
    env_file = Path(__file__).parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file)

__all__ = [
    "DEFAULT_LIMIT",
    "ENV_PREFIX",
    "Settings",
    "direct_database_url",
    "get_env",
    "load_settings",
    "parse_paths",
]

ENV_PREFIX = "BENCH_"

DEFAULT_LIMIT = 100
DEFAULT_PATHS: tuple[ClientPath, ...] = (
    ClientPath.REST,
    ClientPath.ORM,
    ClientPath.ORM_RAW,
    ClientPath.SQL,
)


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything a run needs, read once at start.

    Attributes:
        supabase_url: Project URL; PostgREST lives under /rest/v1.
        supabase_key: API key sent as apikey and bearer token.
        database_url: Connection string for the SQLAlchemy paths.
        direct_url: Direct (non-pooled) connection string for asyncpg.
        limit: Row limit shared by all read scenarios.
        read_repeats: Times every read scenario runs per path.
        write_repeats: Times the write scenario runs per path.
        cache_ttl: Read cache hint in seconds, for paths that honour one.
        db_ssl: SSL mode for asyncpg connections.
        paths: Client paths to benchmark, in report order.
    """

    supabase_url: str | None = None
    supabase_key: str | None = None
    database_url: str | None = None
    direct_url: str | None = None
    limit: int = DEFAULT_LIMIT
    read_repeats: int = 1
    write_repeats: int = 1
    cache_ttl: int | None = None
    db_ssl: str | None = "require"
    paths: tuple[ClientPath, ...] = DEFAULT_PATHS


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with BENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "LIMIT").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def _get_int(key: str, default: int | None, *, minimum: int = 0) -> int | None:
    raw = get_env(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        msg = f"{ENV_PREFIX}{key} must be an integer, got '{raw}'"
        raise ValueError(msg) from None
    if value < minimum:
        msg = f"{ENV_PREFIX}{key} must be >= {minimum}, got {value}"
        raise ValueError(msg)
    return value


def parse_paths(raw: str | None) -> tuple[ClientPath, ...]:
    """Parse a comma-separated list of client path tags.

    Raises:
        ValueError: If a tag is not a known client path.
    """
    if not raw:
        return DEFAULT_PATHS
    paths: list[ClientPath] = []
    for name in raw.split(","):
        name = name.strip()
        if not name:
            continue
        try:
            path = ClientPath(name)
        except ValueError:
            valid = ", ".join(p.value for p in ClientPath)
            msg = f"Unknown client path '{name}'. Valid paths: {valid}"
            raise ValueError(msg) from None
        if path not in paths:
            paths.append(path)
    return tuple(paths) or DEFAULT_PATHS


def direct_database_url() -> str | None:
    """Connection string for the raw-SQL path.

    Prefers SUPABASE_DB_DIRECT_URL. Otherwise uses the pooled
    SUPABASE_DB_CONNECTION_STRING with its pgbouncer parameter removed,
    since asyncpg would forward it to the server as a setting.
    """
    direct = os.environ.get("SUPABASE_DB_DIRECT_URL")
    if direct:
        return direct

    fallback = os.environ.get("SUPABASE_DB_CONNECTION_STRING")
    if not fallback:
        return None
    parts = urlsplit(fallback)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "pgbouncer"]
    return urlunsplit(parts._replace(query=urlencode(query)))


def load_settings() -> Settings:
    """Read settings from the environment.

    Raises:
        ValueError: If a numeric override or path list is malformed.
    """
    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL"),
        supabase_key=os.environ.get("SUPABASE_KEY"),
        database_url=os.environ.get("DATABASE_URL"),
        direct_url=direct_database_url(),
        limit=_get_int("LIMIT", DEFAULT_LIMIT, minimum=1),  # type: ignore[arg-type]
        read_repeats=_get_int("READ_REPEATS", 1),  # type: ignore[arg-type]
        write_repeats=_get_int("WRITE_REPEATS", 1),  # type: ignore[arg-type]
        cache_ttl=_get_int("CACHE_TTL", None),
        db_ssl=get_env("DB_SSL", default="require") or None,
        paths=parse_paths(get_env("PATHS")),
    )
