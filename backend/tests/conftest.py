"""Shared fixtures: an app on in-memory SQLite seeded with the real catalogs."""

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from app import create_app
from models import (
    db, User, Planet, UserPlanet, SpacecraftUpgrade, UserUpgrade, SpaceAchievement, WellnessChallenge
)
from seed import seed_catalogs

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "JWT_SECRET_KEY": "test-secret-key-with-at-least-32-bytes",
    "ACHIEVEMENTS_ASYNC": False,
    "LOG_LEVEL": "DEBUG",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        seed_catalogs()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def without_achievements(app):
    """Empty the achievement catalog so balances only reflect the transaction."""
    SpaceAchievement.query.delete()
    db.session.commit()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(points=0, username=None):
        counter["n"] += 1
        user = User(
            username=username or f"pilot{counter['n']}",
            email=f"pilot{counter['n']}@example.com",
            password_hash=generate_password_hash("password123"),
            points=points,
        )
        db.session.add(user)
        db.session.commit()
        return user.id

    return _make


@pytest.fixture
def make_challenge(app, make_user):
    def _make(points=10, creator_id=None, description="Take a 15-minute walk outside"):
        challenge = WellnessChallenge(
            creator_id=creator_id or make_user(),
            description=description,
            points=points,
        )
        db.session.add(challenge)
        db.session.commit()
        return challenge.id

    return _make


@pytest.fixture
def give_planets(app):
    def _give(user_id, *planet_ids):
        db.session.add_all([UserPlanet(user_id=user_id, planet_id=pid) for pid in planet_ids])
        db.session.commit()

    return _give


@pytest.fixture
def give_upgrades(app):
    def _give(user_id, *upgrade_ids, equipped=True):
        db.session.add_all([
            UserUpgrade(user_id=user_id, upgrade_id=uid, is_equipped=equipped)
            for uid in upgrade_ids
        ])
        db.session.commit()

    return _give


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def balance(app):
    def _balance(user_id):
        db.session.expire_all()
        return db.session.get(User, user_id).points

    return _balance


@pytest.fixture
def catalog(app):
    """Catalog ids keyed by name."""
    return {
        "planet": {p.name: p.id for p in Planet.query.all()},
        "upgrade": {u.name: u.id for u in SpacecraftUpgrade.query.all()},
        "achievement": {a.name: a.id for a in SpaceAchievement.query.all()},
    }
