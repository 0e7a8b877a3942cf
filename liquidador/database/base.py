"""SQLAlchemy base, engine and sessions for the SQL document store."""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()

# Built lazily from DB_URL
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def make_engine(db_url: str, echo: bool = False) -> Engine:
    """Create an engine for a database URL."""
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=echo)
    return create_engine(
        db_url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def get_engine() -> Engine:
    """Return the shared engine, creating it from settings on first use."""
    global _engine
    if _engine is None:
        from liquidador.config import get_global_settings

        settings = get_global_settings()
        _engine = make_engine(settings.db_url)
    return _engine


def get_session_factory() -> sessionmaker:
    """Return the shared session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine())
    return _session_factory


def get_session() -> Session:
    """Open a new session on the shared engine."""
    session_factory = get_session_factory()
    return session_factory()  # type: ignore[no-any-return]


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""
    session = get_session()
    try:
        yield session
    finally:
        session.close()


def create_tables(engine: Optional[Engine] = None) -> None:
    """Create the document tables if they do not exist."""
    Base.metadata.create_all(bind=engine or get_engine())


def reset_engine() -> None:
    """Dispose the global engine (useful for testing)."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
