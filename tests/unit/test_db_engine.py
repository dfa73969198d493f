"""Tests for engine/session lifecycle (checkout_kernel/db/engine.py)."""

from decimal import Decimal

import pytest
from sqlalchemy import inspect

from checkout_kernel.db import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from checkout_kernel.models import FlatTax


class TestUninitialized:

    def setup_method(self):
        reset_engine()

    @pytest.mark.parametrize("accessor", [get_engine, get_session, get_session_factory])
    def test_raises_before_init(self, accessor):
        with pytest.raises(RuntimeError, match="not initialized"):
            accessor()


class TestSessionScope:

    def test_commit_on_success(self, db_engine):
        with session_scope() as session:
            session.add(FlatTax(id=5, name="Cook County", tax_amount=Decimal("18.00")))

        with session_scope() as session:
            assert session.get(FlatTax, 5).name == "Cook County"

    def test_rollback_on_error(self, db_engine):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(FlatTax(id=5, name="Cook County", tax_amount=Decimal("18.00")))
                session.flush()
                raise RuntimeError("abort")

        with session_scope() as session:
            assert session.get(FlatTax, 5) is None

    def test_is_active_defaults_true(self, db_engine):
        with session_scope() as session:
            session.add(FlatTax(id=7, name="State", tax_amount=Decimal("2.00")))

        with session_scope() as session:
            row = session.get(FlatTax, 7)
            assert row.is_active is True
            assert row.created_at is not None


class TestTables:

    def test_create_and_drop(self, tmp_path):
        init_engine_from_url(f"sqlite:///{tmp_path / 'ddl.db'}")
        try:
            create_tables()
            assert "flat_taxes" in inspect(get_engine()).get_table_names()
            drop_tables()
            assert "flat_taxes" not in inspect(get_engine()).get_table_names()
        finally:
            reset_engine()


class TestSqlitePoolOptions:

    def teardown_method(self):
        reset_engine()

    def test_ignored_pool_options_logged(self, captured_logs):
        init_engine_from_url("sqlite://", pool_size=3, pool_timeout=5)

        record = next(r for r in captured_logs() if r["message"] == "pool_options_ignored")
        assert record["level"] == "DEBUG"
        assert record["dialect"] == "sqlite"
        assert record["pool_size"] == 3
        assert record["pool_timeout"] == 5

    def test_engine_still_usable(self):
        engine = init_engine_from_url("sqlite://", pool_size=3)
        create_tables()
        assert "flat_taxes" in inspect(engine).get_table_names()
