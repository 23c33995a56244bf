"""Connection management for the shared store file.

Each DatabaseConnection owns one primary sqlite3 connection to one file.
There is no process-wide singleton: the Store and every widget snapshot open
their own handle.

- WAL mode so widget readers never block the writer
- Busy timeout instead of an extra lock layer
- Read-only opens for widget processes (no migrations, no writes)
- Separate background connections for batch work on worker threads
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from todolistmore.adapters.sqlite.capabilities import detect_capabilities
from todolistmore.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner
from todolistmore.core.exceptions import StoreUnavailableError
from todolistmore.models.core import StoreCapabilities
from todolistmore.utils.logger import get_logger

logger = get_logger(__name__)

MEMORY_PATH = ":memory:"


class DatabaseConnection:
    """Connection handle for one store file."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        read_only: bool = False,
        timeout: float = 30.0,
    ):
        self.db_path = db_path if db_path == MEMORY_PATH else Path(db_path)
        self.read_only = read_only
        self.timeout = timeout
        self._connection: sqlite3.Connection | None = None
        self._capabilities: StoreCapabilities | None = None

    @property
    def is_memory(self) -> bool:
        return self.db_path == MEMORY_PATH

    @property
    def connection(self) -> sqlite3.Connection:
        """The primary connection, opened on first use."""
        if self._connection is None:
            self.open()
        assert self._connection is not None
        return self._connection

    @property
    def capabilities(self) -> StoreCapabilities:
        if self._capabilities is None:
            self._capabilities = detect_capabilities(self.connection)
        return self._capabilities

    def open(self) -> sqlite3.Connection:
        """Open the primary connection, running pending migrations unless read-only.

        Raises:
            StoreUnavailableError: If the file cannot be opened or migrated
        """
        if self._connection is not None:
            return self._connection
        try:
            connection = self._connect()
            if not self.read_only:
                applied = MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
                if applied:
                    logger.info("Store %s migrated (%d applied)", self.db_path, applied)
            self._capabilities = detect_capabilities(connection)
        except (sqlite3.Error, OSError, RuntimeError) as e:
            raise StoreUnavailableError(f"Cannot open store at {self.db_path}: {e}") from e

        self._connection = connection
        logger.debug(
            "Opened store %s (read_only=%s, schema=%d)",
            self.db_path,
            self.read_only,
            self._capabilities.schema_version,
        )
        return connection

    def open_background(self) -> sqlite3.Connection:
        """Open an extra read-write connection to the same file for a worker thread.

        In-memory stores cannot share their data across connections, so callers
        must use the primary connection for those.
        """
        if self.is_memory:
            raise StoreUnavailableError("In-memory stores have no background connection")
        if self.read_only:
            raise StoreUnavailableError("Read-only stores have no background connection")
        return self._connect()

    def close(self) -> None:
        """Close the primary connection, committing anything pending."""
        if self._connection is None:
            return
        try:
            self._connection.commit()
            self._connection.close()
        except sqlite3.Error:
            logger.warning("Error while closing store %s", self.db_path, exc_info=True)
        finally:
            self._connection = None

    def _connect(self) -> sqlite3.Connection:
        if self.is_memory:
            connection = sqlite3.connect(MEMORY_PATH, check_same_thread=False)
        elif self.read_only:
            path = Path(self.db_path)
            if not path.exists():
                raise sqlite3.OperationalError(f"no store file at {path}")
            connection = sqlite3.connect(
                f"{path.resolve().as_uri()}?mode=ro",
                uri=True,
                check_same_thread=False,
                timeout=self.timeout,
            )
        else:
            path = Path(self.db_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            is_new_database = not path.exists()
            connection = sqlite3.connect(
                str(path), check_same_thread=False, timeout=self.timeout
            )
            connection.execute("PRAGMA journal_mode = WAL")
            if is_new_database:
                os.chmod(path, 0o600)

        connection.row_factory = sqlite3.Row
        connection.execute(f"PRAGMA busy_timeout = {int(self.timeout * 1000)}")
        return connection
