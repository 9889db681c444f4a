"""Tests for database engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, text

from catalogctl.infrastructure.database.engine import create_db_engine, init_database


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()

    def test_busy_timeout_applied(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db", busy_timeout=2.5)
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA busy_timeout")).scalar() == 2500
        engine.dispose()


class TestInitDatabase:
    def test_creates_default_location(self, tmp_path: Path) -> None:
        init_database(tmp_path).dispose()
        assert (tmp_path / ".catalogctl" / "catalog.db").is_file()

    def test_relative_path_resolves_against_root(self, tmp_path: Path) -> None:
        init_database(tmp_path, db_path=Path("data/shop.db")).dispose()
        assert (tmp_path / "data" / "shop.db").is_file()

    def test_creates_all_tables(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        assert {"products", "reviews"} <= set(inspect(engine).get_table_names())
        engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path).dispose()
        engine = init_database(tmp_path)
        assert "products" in inspect(engine).get_table_names()
        engine.dispose()


class TestSchema:
    def test_review_product_id_is_unique(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        uniques = inspect(engine).get_unique_constraints("reviews")
        assert any(u["column_names"] == ["product_id"] for u in uniques)
        engine.dispose()
