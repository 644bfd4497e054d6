import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

Connection = sqlite3.Connection

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

class DatabaseConfig:
    """Location of the cashbook database file."""

    def __init__(self, db_path: Path | str = "data/cashbook.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection_string(self) -> str:
        return str(self.db_path.absolute())

def configure_connection(conn: Connection) -> None:
    """
    Apply cashbook's connection settings.

    Args:
        conn: SQLite connection to configure
    """
    # Foreign keys are OFF by default in SQLite; transactions rely on them
    # to reject unknown owners and categories
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row

class DatabaseManager:
    """
    Owns the single SQLite connection shared by all repositories.

    The connection is opened lazily. Writes go through transaction(), which
    can be nested: only the outermost scope commits or rolls back, so a
    service can group several repository writes into one unit.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._connection: Connection | None = None
        self._depth = 0

    def get_connection(self) -> Connection:
        """Return the shared connection, opening it on first use"""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.config.connection_string,
                check_same_thread=False,
            )
            configure_connection(self._connection)
        return self._connection

    @property
    def in_transaction(self) -> bool:
        """True while inside a transaction() scope"""
        return self._depth > 0

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Run the block as one database transaction.

        The outermost scope commits on success and rolls back on any
        exception. Inner scopes join it without committing.

        Usage:
            with db_manager.transaction():
                transactions.save(transaction)
                audit_log.record(entry)
        """
        conn = self.get_connection()
        self._depth += 1
        try:
            yield conn
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                conn.rollback()
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                conn.commit()

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

def execute_schema(conn: Connection, schema_path: Path = SCHEMA_PATH) -> None:
    """
    Create any missing tables and indexes.

    The bundled schema uses IF NOT EXISTS throughout, so running it against
    an initialized database is harmless.

    Args:
        conn: Database connection
        schema_path: Path to a .sql file, the bundled schema by default
    """
    conn.executescript(schema_path.read_text(encoding="utf-8"))
    conn.commit()

def schema_version(conn: Connection) -> sqlite3.Row | None:
    """Return the latest applied schema version row, if any"""
    cursor = conn.execute(
        "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
    )
    return cursor.fetchone()
