import pytest

from app import create_app
from app.config import TestConfig
from db.extensions import db
from models.profile import Profile, Role
from models.station import Station, StationStatus, StationType
from services.auth_service import AuthService


class FakeRedis:
    """In-memory stand-in for the few redis commands the app uses."""

    def __init__(self):
        self.store = {}
        self.published = []

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    def publish(self, channel, message):
        self.published.append((channel, message))
        return 0

    def ping(self):
        return True


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr('db.extensions.redis_client', fake)
    monkeypatch.setattr('services.auth_service.redis_client', fake)
    monkeypatch.setattr('services.notification_service.redis_client', fake)
    return fake


@pytest.fixture
def app(fake_redis):
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_station(app):
    def _make(name='PS5-1', station_type=StationType.STANDARD_PS5, price_solo=40, price_group=None,
              status=StationStatus.FREE):
        station = Station(
            name=name,
            station_type=station_type,
            price_solo=price_solo,
            price_group=price_group,
            status=status,
        )
        db.session.add(station)
        db.session.commit()
        return station
    return _make


@pytest.fixture
def make_profile(app):
    def _make(profile_id, first_name=None, role=Role.MEMBER, points=0, total_visits=0):
        profile = Profile(
            id=profile_id,
            first_name=first_name,
            role=role,
            points=points,
            total_visits=total_visits,
        )
        db.session.add(profile)
        db.session.commit()
        return profile
    return _make


@pytest.fixture
def admin_headers(make_profile):
    make_profile('admin-1', first_name='Yassine', role=Role.ADMIN)
    return {'Authorization': f"Bearer {AuthService.issue_token('admin-1')}"}


@pytest.fixture
def member_headers(make_profile):
    make_profile('member-1', first_name='Salma')
    return {'Authorization': f"Bearer {AuthService.issue_token('member-1')}"}
