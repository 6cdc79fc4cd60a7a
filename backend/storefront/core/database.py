"""
PostgreSQL (Supabase) database access

This module centralizes every way the backend reaches the hosted database:
- psycopg2 direct connections (repositories own their SQL)
- Supabase client (authentication service)
"""
import logging
import time
from functools import lru_cache

import psycopg2
from psycopg2.extras import RealDictCursor
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)

# Seconds psycopg2 waits for the pooler before giving up
CONNECTION_TIMEOUT = 10


def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")
    return database_url


# ============================================================================
# psycopg2 Direct Connections
# ============================================================================

def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Use this for repositories and API responses.

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM products")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(
        _database_url(),
        cursor_factory=RealDictCursor,
        connect_timeout=CONNECTION_TIMEOUT,
    )


def get_db_connection_with_retry(max_retries=3, retry_delay=1.0, cursor_factory=None):
    """
    Get a psycopg2 connection with automatic retry on SSL/connection failures

    Handles intermittent pooler disconnects by retrying up to max_retries
    times with exponential backoff between attempts.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)
        cursor_factory: Optional cursor factory (e.g. RealDictCursor)

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(
                database_url,
                cursor_factory=cursor_factory,
                connect_timeout=CONNECTION_TIMEOUT,
            )

            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

    raise last_error if last_error else Exception("Connection failed after all retries")


# ============================================================================
# Supabase Client
# ============================================================================

def create_supabase_client(service_role: bool = False) -> Client:
    """
    New Supabase client

    Auth calls (sign up / sign in) keep the session inside the client, so
    each request gets its own client instead of sharing one.

    Args:
        service_role: Use the service role key (admin auth operations)
    """
    key = settings.SUPABASE_SERVICE_ROLE_KEY if service_role else settings.SUPABASE_ANON_KEY
    if not settings.SUPABASE_URL or not key:
        raise Exception("SUPABASE_URL / Supabase API key not configured")
    return create_client(settings.SUPABASE_URL, key)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Shared service-role Supabase client for stateless calls (created on first use)

    Used for admin auth operations such as revoking a session at logout.
    """
    return create_supabase_client(service_role=True)
