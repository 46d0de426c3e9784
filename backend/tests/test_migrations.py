from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from app.models import SQLModel

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _load_revision(filename: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS_DIR / filename)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _migrate(*, downgrade: bool = False) -> sa.Inspector:
    revision = _load_revision("0001_initial_schema.py")
    engine = sa.create_engine("sqlite://")
    with engine.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            revision.upgrade()
            if downgrade:
                revision.downgrade()
    return sa.inspect(engine)


def test_initial_revision_is_root() -> None:
    revision = _load_revision("0001_initial_schema.py")
    assert revision.revision == "0001"
    assert revision.down_revision is None


def test_upgrade_creates_every_model_table_and_column() -> None:
    inspector = _migrate()

    assert set(inspector.get_table_names()) == set(SQLModel.metadata.tables)
    for name, table in SQLModel.metadata.tables.items():
        migrated = {column["name"] for column in inspector.get_columns(name)}
        assert migrated == set(table.columns.keys()), name


def test_upgrade_creates_partial_unique_balance_index() -> None:
    inspector = _migrate()

    indexes = {index["name"]: index for index in inspector.get_indexes("leave_balance")}
    assert indexes["uq_balance_employee_type_year"]["unique"]
    assert indexes["uq_balance_employee_type_year"]["column_names"] == ["employee_id", "leave_type_id", "year"]


def test_downgrade_drops_every_table() -> None:
    inspector = _migrate(downgrade=True)

    assert inspector.get_table_names() == []
