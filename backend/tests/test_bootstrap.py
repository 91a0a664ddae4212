import pytest

from autoplan.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_schema_bootstrap_creates_tables(db_engine):
    bootstrap.ensure_schema(db_engine)


def test_schema_bootstrap_raises_on_validation_failure(monkeypatch, db_engine):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda bind: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Schema bootstrap failed"):
        bootstrap.ensure_schema(db_engine)
