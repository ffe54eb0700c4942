import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from werkzeug.security import generate_password_hash

from negocio.database import Base, build_engine, get_db, init_db
from negocio.main import app
from negocio.models import User
from negocio.services.customer_service import CustomerService
from negocio.services.product_service import ProductService

# Single shared in-memory SQLite connection with foreign keys on
TEST_DATABASE_URL = "sqlite://"

TEST_EMAIL = "operator@example.com"
TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
def test_engine():
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fresh(session_factory):
    """Open a new session, for reading back what a request wrote"""
    sessions = []

    def _open():
        session = session_factory()
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    del app.dependency_overrides[get_db]


@pytest.fixture
def operator(db):
    user = User(email=TEST_EMAIL, password_hash=generate_password_hash(TEST_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def signed_in(client, operator):
    """Client carrying a valid session cookie"""
    response = client.post(
        "/sign-in",
        data={"email": TEST_EMAIL, "password": TEST_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client


@pytest.fixture
def customer(db):
    return CustomerService(db).create({
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "555-0100",
    })


@pytest.fixture
def other_customer(db):
    return CustomerService(db).create({"name": "Bob Builder", "email": "bob@example.com"})


@pytest.fixture
def products(db):
    """A well-stocked, a low-stock and an out-of-stock product"""
    service = ProductService(db)
    return [
        service.create({"name": "Gadget", "price": 25.0, "sku": "GAD-1", "stock_quantity": 50}),
        service.create({"name": "Widget", "price": 10.0, "sku": "WID-1", "stock_quantity": 5}),
        service.create({"name": "Doohickey", "price": 3.5, "sku": "DOO-1", "stock_quantity": 0}),
    ]
