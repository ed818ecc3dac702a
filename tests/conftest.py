import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BEAT_ENABLED", "False")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tracker.models  # noqa: F401
from tracker.core.db import Base, get_db
from tracker.core.exceptions import UpstreamUnavailable
from tracker.managers.cache_manager import CacheManager
from tracker.repositories import RepositoryFactory
from tracker.services.index_service import IndexSeriesCache


class FakeRedis:
    """Dict-backed stand-in for the few redis calls CacheManager makes."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = value

    def delete(self, key):
        self.store.pop(key, None)


class StubQuotes:
    """Quote provider double: known tickers get a price, anything else fails."""

    def __init__(self, prices=None, failing=()):
        self.prices = {k.upper(): v for k, v in (prices or {}).items()}
        self.failing = {t.upper() for t in failing}
        self.calls = []

    def __call__(self, ticker):
        ticker = ticker.upper()
        self.calls.append(ticker)
        if ticker in self.failing or ticker not in self.prices:
            raise UpstreamUnavailable(f"no quote for {ticker}")
        return self.prices[ticker]

    def quote(self, ticker):
        price = self(ticker)
        return {"ticker": ticker.upper(), "price": price, "change": 1.0, "change_percent": 0.5}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def factory(db):
    return RepositoryFactory(db)


@pytest.fixture
def quotes():
    return StubQuotes({"ABC": 110.0, "XYZ": 50.0, "QQQ": 400.0})


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def index_rows():
    return [
        {"date": "2025-03-03", "close": 100.0},
        {"date": "2025-03-04", "close": 102.0},
        {"date": "2025-03-06", "close": 99.0},
    ]


@pytest.fixture
def index_cache(fake_redis, index_rows):
    fetches = []

    def fetch(symbol, period="1y"):
        fetches.append(symbol)
        return index_rows

    cache = IndexSeriesCache(CacheManager(prefix="index", client=fake_redis), symbol="^GSPC", fetch_fn=fetch)
    cache.fetches = fetches
    return cache


@pytest.fixture
def client(engine, quotes, index_cache):
    from tracker.api.dependencies import get_index_cache, get_price_fetcher, get_quote_fetcher
    from tracker.main import app

    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_fetcher] = lambda: quotes
    app.dependency_overrides[get_quote_fetcher] = lambda: quotes.quote
    app.dependency_overrides[get_index_cache] = lambda: index_cache
    yield TestClient(app)
    app.dependency_overrides.clear()
