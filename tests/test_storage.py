import sqlite3
from pathlib import Path

from stresstrainer.storage import MemoryStorage, SqliteStorage, StatisticsError, StorageError


def test_memory_storage_roundtrip() -> None:
    storage = MemoryStorage()
    assert storage.get("k") is None
    storage.set("k", b"v")
    assert storage.get("k") == b"v"
    assert MemoryStorage({"a": b"1"}).get("a") == b"1"


def test_sqlite_storage_roundtrip_and_overwrite() -> None:
    storage = SqliteStorage(":memory:")
    assert storage.get("words-stats") is None
    storage.set("words-stats", b"{}")
    storage.set("words-stats", b'{"1": {}}')
    assert storage.get("words-stats") == b'{"1": {}}'
    storage.close()


def test_sqlite_migration_sets_user_version_and_schema_history() -> None:
    storage = SqliteStorage(":memory:")
    version = int(storage._conn.execute("PRAGMA user_version").fetchone()[0])  # noqa: SLF001
    assert version == 1
    rows = storage._conn.execute("SELECT version FROM schema_migrations ORDER BY version").fetchall()  # noqa: SLF001
    assert [int(row["version"]) for row in rows] == [1]


def test_sqlite_storage_shared_between_connections(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "stats.db"
    first = SqliteStorage(db_path)
    second = SqliteStorage(db_path)
    first.set("k", b"from-first")
    assert second.get("k") == b"from-first"
    assert db_path.exists()
    first.close()
    second.close()


def test_newer_schema_version_is_rejected(tmp_path: Path) -> None:
    db_path = tmp_path / "future.db"
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA user_version = 99")
    conn.commit()
    conn.close()
    try:
        SqliteStorage(db_path)
        raise AssertionError("Expected StorageError for newer schema.")
    except StorageError as exc:
        assert "newer than supported" in str(exc)


def test_sqlite_errors_are_wrapped() -> None:
    storage = SqliteStorage(":memory:")
    storage.close()
    try:
        storage.get("k")
        raise AssertionError("Expected StorageError on closed database.")
    except StorageError:
        pass
    try:
        storage.set("k", b"v")
        raise AssertionError("Expected StorageError on closed database.")
    except StorageError:
        pass


def test_storage_error_is_statistics_error() -> None:
    assert issubclass(StorageError, StatisticsError)
    assert issubclass(StatisticsError, RuntimeError)


def test_unusable_database_directory_is_storage_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    try:
        SqliteStorage(blocker / "nested" / "stats.db")
        raise AssertionError("Expected StorageError for unusable directory.")
    except StorageError as exc:
        assert "Could not open statistics database" in str(exc)
