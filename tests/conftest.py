from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from constants import StudentStatus
from database import Base, configure_sqlite, get_db
from main import app
from models.masters import ClassMaster, Parent
from models.students import Student


@pytest.fixture
def engine():
    engine = configure_sqlite(create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """API client on its own in-memory database; seed it through the API."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_class(db):
    def _add(name="Grade 1"):
        cls = ClassMaster(class_name=name)
        db.add(cls)
        db.commit()
        return cls
    return _add


@pytest.fixture
def add_student(db):
    parents = {}

    def _add(name, cls, fee, discount="0", status=StudentStatus.ACTIVE, parent_name="Ahmed Hassan"):
        parent = parents.get(parent_name)
        if parent is None:
            parent = Parent(name=parent_name, phone="+252-61-234-5678")
            db.add(parent)
            db.flush()
            parents[parent_name] = parent
        student = Student(
            student_name=name,
            parent_id=parent.id,
            class_id=cls.id,
            fee=Decimal(str(fee)),
            discount=Decimal(str(discount)),
            status=status.value,
        )
        db.add(student)
        db.commit()
        return student
    return _add
