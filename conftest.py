"""Shared fixtures: a seeded data directory, the app and async clients bound to it"""

import copy
import json
import sys
import os

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from main import create_app
from app.clients.data_api import DataAPI
from app.clients.notifications import Notifier
from app.core.cache import InMemoryCache
from app.core.config import Settings
from app.services.offline_store import OfflineStore

MENU = {
    "categories": ["Coffee", "Tea", "Pastries"],
    "items": [
        {"id": 1, "name": "Latte", "category": "Coffee", "price": 4.5,
         "description": "Espresso with steamed milk", "image": "images/latte.jpg"},
        {"id": 2, "name": "Earl Grey", "category": "Tea", "price": 3.0,
         "description": "Black tea with bergamot", "image": "images/earl-grey.jpg"},
        {"id": 3, "name": "Croissant", "category": "Pastries", "price": 3.25,
         "description": "Buttery and flaky", "image": "images/croissant.jpg"},
        {"id": 4, "name": "Americano", "category": "Coffee", "price": 3.5,
         "description": "Espresso topped with hot water", "image": "images/americano.jpg"},
    ],
}

SPECIALS = {
    "specials": [
        {"id": 1, "day": "Monday", "name": "Monday Kick-start", "items": "Latte + Croissant",
         "price": 6.5, "discount": "15%", "description": "Start the week right"},
        {"id": 2, "day": "Friday", "name": "Friday Treat", "items": "Americano + Croissant",
         "price": 5.75, "discount": "10%", "description": "End the week right"},
        {"id": 3, "day": "Monday", "name": "Tea Time", "items": "Earl Grey + Croissant",
         "price": 5.0, "discount": "5%", "description": "A quiet afternoon"},
    ]
}

EVENTS = {
    "events": [
        {"id": 1, "name": "Jazz Night", "date": "Every Friday, 7 PM", "description": "Live trio",
         "image": "images/jazz.jpg", "tag": "Music", "featured": True},
        {"id": 2, "name": "Latte Art Class", "date": "Sunday, 10 AM", "description": "Pour like a pro",
         "image": "images/latte-art.jpg", "tag": "Workshop", "featured": False},
    ]
}

CONTACT = {
    "address": "12 Rue Napoleon\nOld Town",
    "phone": "+1 555 010 2024",
    "email": "hello@bonpartecafe.com",
    "workingHours": {"weekdays": "Mon-Fri 7-21", "weekends": "Sat-Sun 8-22"},
    "socialMedia": {
        "facebook": "https://facebook.com/bonpartecafe",
        "instagram": "https://instagram.com/bonpartecafe",
        "twitter": "https://twitter.com/bonpartecafe",
        "tripadvisor": "https://tripadvisor.com/bonpartecafe",
    },
}

SEED = {"menu": MENU, "specials": SPECIALS, "events": EVENTS, "contact": CONTACT}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def write_document(data_dir, key, document):
    (data_dir / f"{key}.json").write_text(json.dumps(document, indent=2), encoding="utf-8")


def read_document(data_dir, key):
    return json.loads((data_dir / f"{key}.json").read_text(encoding="utf-8"))


@pytest.fixture
def seed():
    return copy.deepcopy(SEED)


@pytest.fixture
def data_dir(tmp_path, seed):
    directory = tmp_path / "data"
    directory.mkdir()
    for key, document in seed.items():
        write_document(directory, key, document)
    return directory


@pytest.fixture
def settings(tmp_path, data_dir):
    return Settings(
        data_dir=data_dir,
        backup_dir=tmp_path / "backups",
        offline_dir=tmp_path / "offline",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_api(app, tmp_path, clock):
    """Build a DataAPI talking to the app in-process (or through a custom transport)"""

    def factory(transport=None):
        transport = transport or httpx.ASGITransport(app=app)
        http_client = httpx.AsyncClient(transport=transport, base_url="http://testserver")
        return DataAPI(
            base_url="http://testserver",
            client=http_client,
            cache=InMemoryCache(ttl=30, clock=clock),
            offline_store=OfflineStore(tmp_path / "offline", clock=clock),
            notifier=Notifier(),
        )

    return factory


def unreachable_transport():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.MockTransport(handler)
