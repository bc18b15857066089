from prospectflow.db.session import engine
from prospectflow.db.base import Base
import prospectflow.db.models  # noqa: F401  registers every model on Base.metadata


def init_db():
    """Create all tables that do not exist yet (local development without Alembic)."""
    Base.metadata.create_all(bind=engine)
