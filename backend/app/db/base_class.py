from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.orm import as_declarative, declared_attr

# Constraint and index names match the ones used in alembic/versions
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


@as_declarative(metadata=MetaData(naming_convention=NAMING_CONVENTION))
class Base:
    id: Any
    __name__: str

    # Employee -> employees
    @declared_attr  # type: ignore[misc]
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"
