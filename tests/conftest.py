import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import main
from storage import LocalStorage

PRODUCTS = [
    {"id": "a", "title": "Ferrari Cap", "vendor_type": "official", "team": "Ferrari", "price": 20.0, "stock_total": 30, "category": "accessories"},
    {"id": "b", "title": "Monaco Print", "vendor_type": "creator", "creator_name": "Apex Studio", "price": 15.0, "stock_total": 4, "category": "art"},
    {"id": "c", "title": "McLaren Polo", "vendor_type": "official", "team": "McLaren", "price": 120.0, "stock_total": 12, "category": "apparel"},
]


@pytest.fixture
def mock_db(monkeypatch):
    db = mongomock.MongoClient().db
    monkeypatch.setattr(database, "db", db)
    return db


@pytest.fixture
def client(mock_db, tmp_path, monkeypatch):
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    monkeypatch.setattr(main, "UPLOAD_DIR", str(upload_dir))
    return TestClient(main.app)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage.json"))


@pytest.fixture
def products():
    return [dict(p) for p in PRODUCTS]
