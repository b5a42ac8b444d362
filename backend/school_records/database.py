import logging
from typing import Callable, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from school_records.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the given URL.

    In-memory SQLite URLs get a StaticPool so every session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """FastAPI dependency to get a database session from the app's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine):
    """Create any missing tables for the Student, Teacher and Marks models."""
    try:
        # Registers the models on Base.metadata
        from school_records import models  # noqa: F401

        logger.info("Attempting to create database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully (if they didn't exist)")
    except Exception as e:
        logger.error(f"Database initialization error: {e}")
        logger.error(f"Connection string used: {engine.url.render_as_string(hide_password=True)}")
        raise


def commit(db: Session, on_conflict: Optional[Callable[[], None]] = None) -> None:
    """
    Commit the session, translating storage failures into service errors.

    A unique-constraint violation means another request won the race after our
    pre-checks; `on_conflict` runs after the rollback so the caller can re-run
    them and raise the specific "already exists" error.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error on commit: {e.orig}")
        if on_conflict is not None:
            on_conflict()
        raise ValidationError("Record already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error on commit: {str(e)}")
        raise StorageError("A database error occurred") from e
