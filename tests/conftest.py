import os

# Must be set before catalog.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from catalog.client.cache import ReadCache
from catalog.client.services import ProductService
from catalog.db import get_session
from catalog.main import create_app
from catalog.models import Product


class RecordingNavigator:
    def __init__(self) -> None:
        self.pushed: list[str] = []
        self.refreshes = 0

    def push(self, path: str) -> None:
        self.pushed.append(path)

    def refresh(self) -> None:
        self.refreshes += 1


class RecordingNotifier:
    def __init__(self) -> None:
        self.toasts: list[tuple[str, str]] = []

    def toast(self, title: str, description: str) -> None:
        self.toasts.append((title, description))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app(session):
    app = create_app()

    def get_test_session():
        return session

    app.dependency_overrides[get_session] = get_test_session
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def service(app):
    service = ProductService(base_url="http://test", transport=ASGITransport(app=app))
    yield service
    await service.close()


@pytest.fixture
def cache():
    return ReadCache()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def add_product(session):
    def _add(**overrides) -> Product:
        fields = {
            "category": "Laptop",
            "product_name": "Lenovo ThinkPad X1",
            "product_spec": "14 inch, 16GB RAM, 512GB SSD",
            "price": "25000000",
        }
        fields.update(overrides)
        product = Product(**fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _add
