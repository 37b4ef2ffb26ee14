import os

# Must be set before anything imports the settings / engine.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["STORAGE_BUCKET"] = "spot-photos"

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import func  # noqa: E402
from sqlmodel import Session, SQLModel, select  # noqa: E402

from fotospots.core.ids import SequentialIds, get_identifier_service  # noqa: E402
from fotospots.db import models  # noqa: E402,F401
from fotospots.db.models.spot import Spot  # noqa: E402
from fotospots.db.models.stored_object import StoredObject  # noqa: E402
from fotospots.db.session import engine  # noqa: E402
from fotospots.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_db():
    SQLModel.metadata.create_all(engine)
    yield
    app.dependency_overrides.clear()
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def ids():
    """Deterministic server-side ids: id-1, id-2, ..."""
    seq = SequentialIds("id")
    app.dependency_overrides[get_identifier_service] = lambda: seq
    return seq


def spot_payload(**overrides):
    payload = {
        "name": "Westerhever Leuchtturm",
        "region": "Schleswig-Holstein",
        "latitude": 54.3741,
        "longitude": 8.6084,
        "description": "Leuchtturm in den Salzwiesen, am besten bei Sonnenuntergang.",
        "best_time": "evening",
        "equipment": "Weitwinkel, Stativ",
        "photo_tips": "Vom Deich aus fotografieren.",
        "categories": ["Leuchtturm", "Küste"],
        "photos": [],
        "website": "",
    }
    payload.update(overrides)
    return payload


def add_spots(count, *, approved=True, start=None):
    """Insert `count` spots, the i-th one i minutes after `start`. Returns their ids."""
    start = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        spots = [
            Spot(
                name=f"Spot {i}",
                region="Hamburg",
                latitude=53.55,
                longitude=9.99,
                description="Beschreibung",
                is_approved=approved,
                created_at=start + timedelta(minutes=i),
            )
            for i in range(count)
        ]
        session.add_all(spots)
        session.commit()
        return [str(s.id) for s in spots]


def count_spots():
    with Session(engine) as session:
        return session.exec(select(func.count(Spot.id))).one()


def add_stored_objects(folder, count, bucket="spot-photos"):
    with Session(engine) as session:
        for i in range(count):
            session.add(
                StoredObject(
                    bucket=bucket,
                    folder=folder,
                    path=f"{folder}/existing-{i}.jpg",
                    content_type="image/jpeg",
                    size_bytes=3,
                    data=b"abc",
                )
            )
        session.commit()
