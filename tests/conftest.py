import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import configure_mappers, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fleetops.database import Base, get_db  # noqa: E402
from fleetops.main import app  # noqa: E402
from fleetops.models import Role, User, UserRole  # noqa: E402
from fleetops.security_utils import create_access_token, hash_password  # noqa: E402
from fleetops.seed import create_shop_owner, seed_discount_types, seed_roles  # noqa: E402

configure_mappers()

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_PASSWORD = "harbour-pass-1"


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    seed_roles(session)
    seed_discount_types(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def owner(db) -> User:
    return create_shop_owner(db, "Harbour Marine", "owner@harbour.test", OWNER_PASSWORD, "Olive", "Owner")


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "shop_id": user.shop_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db, owner):
    """Create another login in the owner's shop holding the given roles"""

    def _make_user(email: str, *roles: str, shop_id=None) -> User:
        user = User(
            shop_id=shop_id or owner.shop_id,
            email=email,
            password_hash=hash_password("member-pass-1"),
            first_name=email.split("@")[0].title(),
            is_active=True,
        )
        db.add(user)
        db.flush()
        for name in roles:
            role = db.query(Role).filter(Role.name == name).one()
            db.add(UserRole(user_id=user.id, role_id=role.id))
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def auth_client(client, owner) -> TestClient:
    client.headers.update(auth_headers(owner))
    return client


@pytest.fixture()
def vessel(auth_client) -> dict:
    response = auth_client.post(
        "/equipment",
        json={
            "name": "MV Northern Light",
            "asset_number": "V-001",
            "equipment_type": "vessel",
            "current_hours": 1200,
            "current_mileage": 0,
        },
    )
    assert response.status_code == 201
    return response.json()
