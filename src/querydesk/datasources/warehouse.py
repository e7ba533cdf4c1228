"""
Snowflake warehouse backend.

``SnowflakeConnection`` is a single-use session: connect, execute, destroy.
``warehouse_session`` is the one place connection lifetime is enforced; every
warehouse operation goes through it.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

import snowflake.connector
from snowflake.connector.errors import Error as SnowflakeError

from querydesk.common.contracts import StatementResult
from querydesk.common.errors import BackendConnectionError, BackendExecutionError
from querydesk.common.logger import get_logger
from querydesk.common.settings import Settings, settings as default_settings
from querydesk.datasources.protocols import WarehouseConnection

logger = get_logger("warehouse")

PROBE_STATEMENT = (
    "SELECT CURRENT_VERSION() AS VERSION, CURRENT_USER() AS USER, CURRENT_DATABASE() AS DATABASE"
)

SCHEMAS_STATEMENT = """
SELECT
  DATABASE_NAME,
  SCHEMA_NAME,
  SCHEMA_OWNER,
  CREATED,
  LAST_ALTERED
FROM INFORMATION_SCHEMA.SCHEMATA
ORDER BY DATABASE_NAME, SCHEMA_NAME
"""

TABLES_STATEMENT = """
SELECT
  TABLE_CATALOG,
  TABLE_SCHEMA,
  TABLE_NAME,
  TABLE_TYPE,
  CREATED,
  LAST_ALTERED,
  ROW_COUNT,
  BYTES
FROM INFORMATION_SCHEMA.TABLES
WHERE TABLE_SCHEMA = CURRENT_SCHEMA()
ORDER BY TABLE_NAME
"""


class SnowflakeConnection:
    """Warehouse connection backed by snowflake-connector-python."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._conn = None

    def __str__(self):
        return f"snowflake ({self.config.snowflake_account or 'unconfigured'})"

    def connect(self) -> None:
        connect_args: Dict[str, Any] = self.config.snowflake_connect_args()
        if not connect_args.get("account"):
            raise BackendConnectionError("SNOWFLAKE_ACCOUNT is not configured")
        try:
            self._conn = snowflake.connector.connect(**connect_args)
        except SnowflakeError as e:
            logger.error(f"Failed to connect to {self}: {e.msg or e}")
            raise BackendConnectionError(str(e.msg or e)) from e
        logger.info(f"Connected to {self}")

    def execute(self, statement: str) -> StatementResult:
        if self._conn is None:
            raise BackendConnectionError(f"Not connected to {self}")

        cursor = self._conn.cursor()
        try:
            # Server-side cancel; the sandbox deadline bounds the client side.
            cursor.execute(statement, timeout=self.config.warehouse_timeout_sec)
            if cursor.description is None:
                return StatementResult(rows_affected=cursor.rowcount)
            columns = [col[0] for col in cursor.description]
            rows = [list(row) for row in cursor.fetchall()]
            return StatementResult(columns=columns, rows=rows, rows_affected=cursor.rowcount)
        except SnowflakeError as e:
            logger.error(f"Query execution failed on {self}: {e.msg or e}")
            raise BackendExecutionError(str(e.msg or e)) from e
        finally:
            cursor.close()

    def destroy(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except SnowflakeError as e:
            logger.error(f"Error closing connection to {self}: {e}")


WarehouseFactory = Callable[[], WarehouseConnection]


@contextmanager
def warehouse_session(factory: WarehouseFactory) -> Iterator[WarehouseConnection]:
    """Acquires a connection and guarantees its release on every exit path."""
    connection = factory()
    try:
        connection.connect()
        yield connection
    finally:
        connection.destroy()
