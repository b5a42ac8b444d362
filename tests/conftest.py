import os
import pytest

# Point the app at an in-memory database before any school_records module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("JWT_SECRET", "test-secret")

from fastapi.testclient import TestClient

from school_records.auth.service import create_access_token, hash_password
from school_records.database import create_db_engine, create_session_factory, init_db
from school_records.main import create_app
from school_records.models import Student, Teacher

TEST_PASSWORD = "password123"


@pytest.fixture()
def engine():
    """A fresh in-memory database with all tables created."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def app(engine):
    return create_app(engine)


@pytest.fixture()
def db_session(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


def _create_teacher(db_session, name, email, role="teacher", subject="Mathematics", is_active=True):
    teacher = Teacher(
        name=name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        subject=subject,
        role=role,
        is_active=is_active,
    )
    db_session.add(teacher)
    db_session.commit()
    db_session.refresh(teacher)
    return teacher


@pytest.fixture()
def admin(db_session):
    return _create_teacher(db_session, "Admin User", "admin@school.com", role="admin", subject="Administration")


@pytest.fixture()
def teacher(db_session):
    return _create_teacher(db_session, "John Smith", "teacher@school.com")


@pytest.fixture()
def other_teacher(db_session):
    return _create_teacher(db_session, "Priya Nair", "priya.nair@school.com", subject="Science")


@pytest.fixture()
def student(db_session):
    student = Student(
        name="Zara Khan",
        roll_number="2024010",
        class_name="10th",
        section="A",
        email="z@x.com",
        gender="Female",
    )
    db_session.add(student)
    db_session.commit()
    db_session.refresh(student)
    return student


def _client_for(app, teacher=None):
    client = TestClient(app)
    if teacher is not None:
        client.headers.update({"Authorization": f"Bearer {create_access_token(teacher)}"})
    return client


@pytest.fixture()
def anon_client(app):
    """A client that sends no credentials."""
    with _client_for(app) as client:
        yield client


@pytest.fixture()
def admin_client(app, admin):
    with _client_for(app, admin) as client:
        yield client


@pytest.fixture()
def teacher_client(app, teacher):
    with _client_for(app, teacher) as client:
        yield client


@pytest.fixture()
def other_teacher_client(app, other_teacher):
    with _client_for(app, other_teacher) as client:
        yield client
