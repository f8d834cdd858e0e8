"""Tests for database module."""

import pytest
import duckdb
from decimal import Decimal

import numpy as np


class TestDatabaseConnection:
    """Tests for database connection functions."""

    def test_get_memory_connection(self):
        """Test in-memory connection."""
        from src.database import get_memory_connection

        conn = get_memory_connection()
        assert conn is not None

        result = conn.execute("SELECT 1").fetchone()
        assert result[0] == 1

        conn.close()

    def test_get_connection_creates_file(self, tmp_path):
        """Test file-based connection."""
        from src.database import get_connection

        db_path = tmp_path / "nested" / "test.duckdb"

        with get_connection(db_path) as conn:
            conn.execute("CREATE TABLE test (id INTEGER)")
            conn.execute("INSERT INTO test VALUES (1)")

        assert db_path.exists()

    def test_read_only_connection_rejects_writes(self, tmp_path):
        """Read-only connections cannot modify the database."""
        from src.database import get_connection

        db_path = tmp_path / "ro.duckdb"
        with get_connection(db_path) as conn:
            conn.execute("CREATE TABLE test (id INTEGER)")

        with get_connection(db_path, read_only=True) as conn:
            with pytest.raises(duckdb.Error):
                conn.execute("INSERT INTO test VALUES (1)")

    def test_connect_reuses_open_connection(self, tmp_path):
        """connect() returns the same connection until close()."""
        from src.database import DatabaseConnection

        db = DatabaseConnection(tmp_path / "reuse.duckdb")
        first = db.connect()
        assert db.connect() is first

        db.close()
        second = db.connect()
        assert second is not first
        db.close()

    def test_borrow_connection_passes_through(self, test_db):
        """A given connection is yielded unchanged and left open."""
        from src.database import borrow_connection

        with borrow_connection(test_db) as conn:
            assert conn is test_db

        assert test_db.execute("SELECT COUNT(*) FROM dim_region").fetchone()[0] == 5


class TestSchema:
    """Tests for database schema functions."""

    def test_create_all_tables(self):
        """Test table creation."""
        from src.database import create_all_tables, get_memory_connection
        from src.database.schema import TABLES

        conn = get_memory_connection()
        create_all_tables(conn)

        tables = conn.execute("""
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = 'main'
        """).fetchall()
        table_names = {t[0] for t in tables}

        for table in TABLES:
            assert table in table_names
        assert "schema_version" in table_names

        conn.close()

    def test_get_table_counts(self, test_db):
        """Test getting table row counts."""
        from src.database import get_table_counts

        counts = get_table_counts(test_db)

        assert counts["dim_region"] == 5
        assert counts["dim_disease"] == 3
        assert counts["fact_population_state_year"] == 16

    def test_initialize_database_is_idempotent(self):
        """Initializing twice records the schema version once."""
        from src.database import initialize_database, get_memory_connection
        from src.database.schema import get_schema_version, SCHEMA_VERSION

        conn = get_memory_connection()
        initialize_database(conn)
        initialize_database(conn)

        assert get_schema_version(conn) == SCHEMA_VERSION
        assert conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0] == 1
        conn.close()

    def test_schema_version_missing(self):
        """No schema_version table means no version."""
        from src.database import get_memory_connection
        from src.database.schema import get_schema_version

        conn = get_memory_connection()
        assert get_schema_version(conn) is None
        conn.close()

    def test_week_out_of_range_rejected(self, empty_db):
        """Weeks outside 1..53 violate the table constraint."""
        with pytest.raises(duckdb.Error):
            empty_db.execute("INSERT INTO fact_cases_weekly VALUES (1, 1, 2023, 54, 10)")

    def test_drop_all_tables(self, test_db):
        """All tables are removed."""
        from src.database import drop_all_tables, get_table_counts

        drop_all_tables(test_db)

        assert all(count is None for count in get_table_counts(test_db).values())


class TestCoercion:
    """Tests for numeric coercion of query results."""

    def test_to_int_variants(self):
        """Decimals, numpy scalars and floats become native ints."""
        from src.database import to_int

        assert to_int(Decimal("42")) == 42
        assert isinstance(to_int(np.int64(7)), int)
        assert to_int(12.0) == 12
        assert to_int(None) == 0
        assert to_int(float("nan")) == 0

    def test_optional_keeps_missing(self):
        """Optional variants keep NULL as None."""
        from src.database import to_optional_int, to_optional_float

        assert to_optional_int(None) is None
        assert to_optional_int(np.nan) is None
        assert to_optional_float(None) is None
        assert to_optional_float(Decimal("1.5")) == 1.5

    def test_hugeint_sum_is_native_int(self, test_db):
        """SUM over BIGINT comes back as a plain int after coercion."""
        from src.database import to_int

        raw = test_db.execute("SELECT SUM(current_week_cases) FROM fact_cases_weekly").fetchone()[0]
        value = to_int(raw)

        assert isinstance(value, int)
        assert value == 3640
