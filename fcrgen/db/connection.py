from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from fcrgen.models.config_models import DatabaseConfig

"""PostgreSQL connection helpers for the project store.

Connection settings are resolved in this order:
    1. variables from .env (loaded with override so they win)
    2. process environment: DATABASE_URL / PGDSN as a full DSN, otherwise
       PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the database section of config/fcr.yml for anything still missing
"""

__all__ = [
    "load_env_file",
    "resolve_dsn",
    "db_cursor",
]


def load_env_file(path: Path = Path(".env"), override: bool = True) -> bool:
    """Load .env with python-dotenv. Returns False when the file is absent."""
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=override)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_cursor(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """Yield a cursor inside one transaction: commit on success, rollback on error."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    try:
        with conn:
            with conn.cursor() as cur:
                yield cur
    finally:
        conn.close()
