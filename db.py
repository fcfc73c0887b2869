# db.py
import os
from dotenv import load_dotenv
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

load_dotenv()

DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", "5"))


def create_pool(conninfo: str | None = None) -> ConnectionPool:
    """
    Build the process-wide pool. Created closed; the app lifespan opens it.

    Usage:
        pool = create_pool()
        pool.open()
        with pool.connection() as conn:
            rows = conn.execute("select 1 as ok").fetchall()
    """
    conninfo = conninfo or os.getenv("DATABASE_URL")
    if not conninfo:
        raise RuntimeError("DATABASE_URL not set. Put it in .env (with ?sslmode=require).")

    # Small client-side pool (works great with Supabase Session Pooler on port 6543)
    return ConnectionPool(
        conninfo=conninfo,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        max_idle=30,                    # seconds
        kwargs={"row_factory": dict_row},
        open=False,
    )
