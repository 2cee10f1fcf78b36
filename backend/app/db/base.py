# Import all the models, so that Base has them before being
# imported by Alembic or by create_all at startup
from app.db.base_class import Base  # noqa

from app.models.employee import Employee  # noqa
