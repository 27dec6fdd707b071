import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.security import generate_password_hash
from app.database import Base, get_db
from app.main import app
from app.models.project import Project
from app.models.user import User

TEST_DB_URL = "sqlite:///./test_report_format.db"
DEFAULT_PASSWORD = "password"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    password_hash = generate_password_hash(DEFAULT_PASSWORD)
    users = {
        "leader": User(name="Leader", email="leader@example.com", encrypted_password=password_hash),
        "member": User(name="Member", email="member@example.com", encrypted_password=password_hash),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_project(db, seed_users):
    project = Project(project_name="주간 보고", leader_id=seed_users["leader"].user_id)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def get_token(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
