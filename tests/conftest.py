import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Settings are read once at import; point them at throwaway values first.
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"

from fleetos.database import Base, get_db  # noqa: E402
from fleetos.main import app  # noqa: E402
from fleetos import models  # noqa: E402
from fleetos.security import hash_password  # noqa: E402

PASSWORD = "Str0ng!Pass"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    def _make(username, role=models.UserRole.USER, is_active=True):
        user = models.User(
            username=username,
            email=f"{username}@fleet.test",
            name=username.replace("_", " ").title(),
            password=hash_password(PASSWORD),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture()
def auth_headers(client, db_session, make_user):
    """Bearer headers for a user of the given role, created on first use."""
    def _headers(role="admin"):
        role = models.UserRole(role)
        username = f"{role.value}_user"
        if not db_session.query(models.User).filter(models.User.username == username).first():
            make_user(username, role)

        response = client.post("/api/auth/login", json={"username": username, "password": PASSWORD})
        assert response.status_code == 200, response.text
        # Keep requests header-only; cookie auth has its own tests
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _headers


@pytest.fixture()
def vehicle(db_session):
    vehicle = models.Vehicle(
        registration_number="AB-123-CD",
        brand="Renault",
        model="Master",
        year=2020,
        mileage=10000,
    )
    db_session.add(vehicle)
    db_session.commit()
    db_session.refresh(vehicle)
    return vehicle


@pytest.fixture()
def part(db_session):
    part = models.Part(
        name="Oil filter",
        reference="OF-001",
        quantity=10,
        min_quantity=5,
        unit_price=12.5,
    )
    db_session.add(part)
    db_session.commit()
    db_session.refresh(part)
    return part


@pytest.fixture()
def make_work_order(db_session):
    def _make(vehicle, status=models.WorkOrderStatus.PENDING, **kwargs):
        work_order = models.WorkOrder(
            vehicle_id=vehicle.id,
            title=kwargs.pop("title", "Oil change"),
            status=status,
            **kwargs
        )
        db_session.add(work_order)
        db_session.commit()
        db_session.refresh(work_order)
        return work_order
    return _make
