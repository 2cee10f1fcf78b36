"""
Tests for alembic/versions/001_create_employees_table.py.
"""
import importlib.util
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

MIGRATION_PATH = (
    Path(__file__).resolve().parents[1] / "alembic" / "versions" / "001_create_employees_table.py"
)


@pytest.fixture
def migration():
    spec = importlib.util.spec_from_file_location("create_employees_table", MIGRATION_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def sync_engine():
    engine = sa.create_engine("sqlite://")
    yield engine
    engine.dispose()


def _run(engine, step):
    with engine.begin() as conn:
        context = MigrationContext.configure(conn)
        with Operations.context(context):
            step()


class TestCreateEmployeesTable:
    def test_revision_is_the_root(self, migration):
        assert migration.revision == "001"
        assert migration.down_revision is None

    def test_upgrade_creates_table_and_indexes(self, migration, sync_engine):
        _run(sync_engine, migration.upgrade)

        inspector = sa.inspect(sync_engine)
        columns = {c["name"] for c in inspector.get_columns("employees")}
        indexes = {i["name"] for i in inspector.get_indexes("employees")}

        assert columns == {
            "id", "name", "email", "salary", "department", "gender",
            "bonus", "provident_fund", "tax",
        }
        assert {"ix_employees_department", "ix_employees_gender"} <= indexes

    def test_email_is_unique(self, migration, sync_engine):
        _run(sync_engine, migration.upgrade)
        insert = sa.text(
            "INSERT INTO employees (name, email, salary, department, gender) "
            "VALUES (:name, :email, 1000, 'IT', 'Male')"
        )

        with sync_engine.begin() as conn:
            conn.execute(insert, {"name": "A", "email": "same@example.com"})

        with pytest.raises(sa.exc.IntegrityError):
            with sync_engine.begin() as conn:
                conn.execute(insert, {"name": "B", "email": "same@example.com"})

    def test_downgrade_drops_table(self, migration, sync_engine):
        _run(sync_engine, migration.upgrade)
        _run(sync_engine, migration.downgrade)

        assert "employees" not in sa.inspect(sync_engine).get_table_names()
