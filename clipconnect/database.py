"""Database engine creation and initialization."""

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from clipconnect.config import settings

# Import all models so SQLModel registers them
import clipconnect.models  # noqa: F401


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build an engine for ``url``. In-memory SQLite shares one connection."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create all tables, and enable WAL mode on SQLite files."""
    SQLModel.metadata.create_all(engine)

    if engine.url.get_backend_name() == "sqlite" and engine.url.database not in (None, "", ":memory:"):
        # WAL lets /latest reads run alongside /sync writes
        with engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql("PRAGMA synchronous=NORMAL")
            conn.commit()


engine = create_db_engine(settings.sqlalchemy_url, echo=settings.debug)
