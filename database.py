"""
Database connection module for the Dentist Earnings Calculator
PostgreSQL holding the reports and clinic_settings tables (the Supabase database)
"""

import os
import time
import getpass
import logging
import urllib.parse
from typing import Any, Dict, Mapping, Optional

import pandas as pd
import psycopg2
from psycopg2.extras import RealDictCursor
import streamlit as st

logger = logging.getLogger(__name__)

# Hosted Postgres only accepts TLS connections
DEFAULT_SSLMODE = 'require'


class DatabaseConnection:
    """One lazily opened psycopg2 connection plus a DataFrame query helper"""

    def __init__(self, host: str = "localhost", port: int = 5432,
                 database: str = "postgres", user: Optional[str] = None,
                 password: Optional[str] = None, sslmode: Optional[str] = None):
        """
        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Role to connect as (defaults to DB_USER, then the OS user)
            password: Role password
            sslmode: libpq sslmode ('require', 'prefer', 'disable', ...)
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user or os.environ.get('DB_USER') or getpass.getuser()
        self.password = password or os.environ.get('DB_PASSWORD')
        self.sslmode = sslmode or os.environ.get('DB_SSLMODE')
        self._conn = None

    def connect_params(self) -> Dict[str, Any]:
        params = {
            'host': self.host,
            'port': self.port,
            'database': self.database,
            'user': self.user,
        }
        if self.password:
            params['password'] = self.password
        if self.sslmode:
            params['sslmode'] = self.sslmode
        return params

    def connect(self) -> psycopg2.extensions.connection:
        """Open the connection on first use and reopen it if it was closed."""
        if self._conn is not None and not self._conn.closed:
            return self._conn

        logger.info(f"DB CONNECT: {self.database}@{self.host}:{self.port}")
        started = time.time()
        try:
            self._conn = psycopg2.connect(**self.connect_params())
        except psycopg2.Error as e:
            # Full error text only with DEBUG=true
            if os.environ.get('DEBUG', '').lower() == 'true':
                logger.error(f"Database connection error: {e}")
            else:
                logger.error(f"Database connection error: {type(e).__name__}")
            raise
        logger.info(f"DB CONNECT: Connected in {time.time() - started:.2f}s")
        return self._conn

    def execute_query(self, query: str, params: Optional[tuple] = None,
                      commit: bool = False) -> pd.DataFrame:
        """
        Run one statement and return its rows as a DataFrame.

        Statements without a result set (DELETE, UPDATE) are always
        committed; pass commit=True for INSERT/UPSERT ... RETURNING.
        On psycopg2.Error the transaction is rolled back and the error
        is re-raised for the caller to handle.
        """
        preview = ' '.join(query.split())[:100]
        logger.debug(f"DB QUERY: {preview}")

        conn = self.connect()
        started = time.time()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params)

                elapsed = time.time() - started
                if elapsed > 1.0:
                    logger.warning(f"DB QUERY: Slow query took {elapsed:.2f}s: {preview}")

                if cursor.description:
                    columns = [column[0] for column in cursor.description]
                    result = pd.DataFrame(cursor.fetchall(), columns=columns)
                else:
                    result = pd.DataFrame()

                if commit or not cursor.description:
                    conn.commit()
                return result
        except psycopg2.Error as e:
            logger.error(f"Query failed ({type(e).__name__}): {preview}")
            conn.rollback()
            raise

    def close(self):
        if self._conn is not None and not self._conn.closed:
            self._conn.close()


def resolve_connection_settings(environ: Optional[Mapping[str, str]] = None,
                                secrets: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Work out DatabaseConnection keyword arguments.

    Order: DATABASE_URL, then DB_* variables, then a [database] table in
    Streamlit secrets, then local defaults (empty dict).
    """
    environ = os.environ if environ is None else environ

    if environ.get('DATABASE_URL'):
        url = urllib.parse.urlparse(environ['DATABASE_URL'])
        return {
            'host': url.hostname,
            'port': url.port or 5432,
            'database': url.path.lstrip('/') or 'postgres',
            'user': url.username,
            'password': url.password,
            'sslmode': environ.get('DB_SSLMODE', DEFAULT_SSLMODE),
        }

    if environ.get('DB_HOST'):
        return {
            'host': environ['DB_HOST'],
            'port': int(environ.get('DB_PORT', 5432)),
            'database': environ.get('DB_NAME', 'postgres'),
            'user': environ.get('DB_USER'),
            'password': environ.get('DB_PASSWORD'),
            'sslmode': environ.get('DB_SSLMODE', DEFAULT_SSLMODE),
        }

    if secrets and 'database' in secrets:
        section = secrets['database']
        return {
            'host': section['host'],
            'port': int(section.get('port', 5432)),
            'database': section.get('name', 'postgres'),
            'user': section.get('user'),
            'password': section.get('password'),
            'sslmode': section.get('sslmode', DEFAULT_SSLMODE),
        }

    return {}


def _streamlit_secrets() -> Optional[Mapping[str, Any]]:
    # st.secrets raises when no secrets.toml exists
    try:
        return st.secrets.to_dict()
    except Exception as e:
        logger.debug(f"No Streamlit secrets available ({type(e).__name__})")
        return None


@st.cache_resource
def get_database_connection() -> DatabaseConnection:
    """Shared DatabaseConnection for the Streamlit app (cached per process)."""
    settings = resolve_connection_settings(secrets=_streamlit_secrets())
    if not settings:
        logger.info("No database configured, using local defaults")
    return DatabaseConnection(**settings)


def test_connection() -> bool:
    """True if a trivial query succeeds."""
    try:
        db = get_database_connection()
        return not db.execute_query("SELECT 1 AS ok").empty
    except psycopg2.Error as e:
        logger.warning(f"Database connection test failed: {type(e).__name__}")
        return False


if __name__ == "__main__":
    print("✓ Database connection successful!" if test_connection() else "✗ Database connection failed")
